"""
데이터베이스 설정 및 연결
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import MetaData, types
from sqlalchemy.dialects.postgresql import UUID as PostgresUUID
import redis.asyncio as redis
from typing import AsyncGenerator
import logging
import os
import uuid
import ssl
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from qisati.core.config import settings

logger = logging.getLogger(__name__)


# SQLite와 PostgreSQL 모두 지원하는 UUID 타입
class UUID(types.TypeDecorator):
    """Platform-independent UUID type.

    Uses PostgreSQL's UUID type when available, otherwise uses
    CHAR(36), storing as stringified hex values.
    """
    impl = types.CHAR(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PostgresUUID(as_uuid=True))
        return dialect.type_descriptor(types.CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == 'postgresql':
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


# SQLite와 PostgreSQL 모두 지원하는 JSON 타입
class JSON(types.TypeDecorator):
    """Platform-independent JSON type."""
    impl = types.JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import JSONB
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(types.JSON())


def _sqlite_url(raw_url: str) -> str:
    """sqlite:/// → sqlite+aiosqlite:/// 로 보정하고 파일 디렉터리를 보장한다."""
    url = raw_url
    if url.startswith("sqlite:///"):
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    path = url.split(":///", 1)[-1]
    if path and path != ":memory:":
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
    return url


def _postgres_engine_args(raw_url: str) -> tuple[str, dict]:
    """asyncpg는 sslmode 쿼리를 받지 않으므로 connect_args의 SSLContext로 옮긴다."""
    url = raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    parts = urlsplit(url)
    query_items = parse_qsl(parts.query, keep_blank_values=True)
    sslmode = next((v for (k, v) in query_items if k.lower() == "sslmode"), None)
    filtered = [(k, v) for (k, v) in query_items if k.lower() not in ("sslmode", "ssl")]
    engine_url = urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(filtered), parts.fragment))

    connect_args = {}
    mode = (sslmode or "").strip().lower()
    if mode in ("require", "prefer", "verify-ca", "verify-full"):
        ctx = ssl.create_default_context()
        # libpq의 require/prefer는 암호화만 하고 인증서는 검증하지 않는다
        if mode in ("require", "prefer"):
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ctx
    return engine_url, connect_args


# SQLAlchemy 비동기 엔진 생성
if settings.DATABASE_URL.startswith("sqlite"):
    engine = create_async_engine(
        _sqlite_url(settings.DATABASE_URL),
        echo=settings.DEBUG,
        future=True,
    )
else:
    _engine_url, _connect_args = _postgres_engine_args(settings.DATABASE_URL)
    engine = create_async_engine(
        _engine_url,
        echo=settings.DEBUG,
        future=True,
        pool_pre_ping=True,
        pool_recycle=300,
        connect_args=_connect_args,
    )

# 세션 팩토리 생성
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)

# Redis 연결 (메트릭 카운터 전용, 장애 시 무시)
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


class Base(DeclarativeBase):
    """SQLAlchemy Base 클래스"""
    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s"
        }
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """데이터베이스 세션 의존성"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_redis() -> redis.Redis:
    """Redis 클라이언트 의존성"""
    return redis_client


async def test_db_connection() -> bool:
    """데이터베이스 연결 테스트"""
    try:
        async with engine.begin() as conn:
            await conn.exec_driver_sql("SELECT 1")
        return True
    except Exception as e:
        logger.warning(f"데이터베이스 연결 실패: {e}")
        return False


async def test_redis_connection() -> bool:
    """Redis 연결 테스트"""
    try:
        await redis_client.ping()
        return True
    except Exception as e:
        logger.warning(f"Redis 연결 실패: {e}")
        return False
