"""
Qisati - 연재 소설 에디션 플랫폼 FastAPI 메인 애플리케이션
"""

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from qisati.core.config import settings
from qisati.core.database import engine, Base, test_db_connection, test_redis_connection
from qisati.core.errors import QisatiError, qisati_error_handler
from qisati.services.storage import get_upload_dir
import qisati.models  # noqa: F401  (메타데이터 등록)

# API 라우터 임포트
from qisati.api.auth import router as auth_router
from qisati.api.users import router as users_router
from qisati.api.series import router as series_router
from qisati.api.chapters import router as chapters_router
from qisati.api.mint import router as mint_router
from qisati.api.dashboard import router as dashboard_router
from qisati.api.explore import router as explore_router
from qisati.api.character_voices import router as character_voices_router
from qisati.api.audio import router as audio_router
from qisati.api.files import router as files_router

# 로깅 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 시 실행되는 이벤트"""
    logger.info("🚀 Qisati API 시작")

    # 데이터베이스 테이블 생성 (개발용)
    if settings.ENVIRONMENT == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("📊 데이터베이스 테이블 생성 완료")

    yield

    logger.info("👋 Qisati API 종료")


app = FastAPI(
    title="Qisati API",
    description="연재 소설 회차를 에디션으로 발행하고 수집하는 플랫폼",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan,
)

app.add_exception_handler(QisatiError, qisati_error_handler)

UPLOAD_DIR = get_upload_dir()
app.mount("/static", StaticFiles(directory=UPLOAD_DIR), name="static")

# CORS: 개발 환경에선 프론트 도메인을 명시적으로 허용
DEV_ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
ALLOWED_ORIGINS = DEV_ALLOWED_ORIGINS if settings.ENVIRONMENT == "development" else [settings.FRONTEND_BASE_URL]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(auth_router, prefix="/auth", tags=["인증"])
app.include_router(users_router, prefix="/users", tags=["유저"])
app.include_router(series_router, prefix="/series", tags=["시리즈"])
app.include_router(chapters_router, prefix="/chapters", tags=["회차"])
app.include_router(mint_router, prefix="/mint", tags=["민팅"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["대시보드"])
app.include_router(explore_router, prefix="/explore", tags=["탐색"])
app.include_router(character_voices_router, prefix="/character-voices", tags=["캐릭터 보이스"])
app.include_router(audio_router, prefix="/audio", tags=["오디오"])
app.include_router(files_router, prefix="/files", tags=["파일"])


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "Qisati API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """헬스 체크 (Redis는 메트릭 전용이라 실패해도 healthy)"""
    db_ok = await test_db_connection()
    redis_ok = await test_redis_connection()
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "ok" if db_ok else "unavailable",
        "redis": "ok" if redis_ok else "unavailable",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "qisati.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True if settings.ENVIRONMENT == "development" else False,
    )
