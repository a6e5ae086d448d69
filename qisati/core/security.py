"""
보안 관련 유틸리티

Bearer 토큰은 지갑 세션 id를 감싼 JWT다. 토큰이 유효해도 매 요청마다 세션 행을
다시 조회하므로, 로그아웃/만료된 세션은 즉시 거부된다.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
import uuid

from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from qisati.core.config import settings
from qisati.core.database import get_db
from qisati.core.errors import QisatiError, ErrorKind


# auto_error=False: 토큰 누락도 Unauthenticated 도메인 에러로 통일
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """요청 단위로 한 번 해석되는 호출자 신원"""
    user_id: uuid.UUID
    wallet_address: str
    session_id: uuid.UUID


def create_session_token(session_id: uuid.UUID, expires_at: datetime) -> str:
    """세션 토큰 생성"""
    to_encode = {"sid": str(session_id), "exp": expires_at, "type": "session"}
    return jwt.encode(to_encode, settings.SESSION_SECRET_KEY, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[uuid.UUID]:
    """세션 토큰 검증 → 세션 id"""
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET_KEY, algorithms=[settings.SESSION_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "session":
        return None
    try:
        return uuid.UUID(str(payload.get("sid")))
    except ValueError:
        return None


def require_owner(principal: Principal, owner_id: Union[str, uuid.UUID, None]) -> None:
    """소유자 확인 (단일 소유자, 역할/위임 없음)"""
    if owner_id is None or str(owner_id) != str(principal.user_id):
        raise QisatiError(ErrorKind.FORBIDDEN)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """현재 호출자 가져오기"""
    if credentials is None:
        raise QisatiError(ErrorKind.UNAUTHENTICATED)
    session_id = decode_session_token(credentials.credentials)
    if session_id is None:
        raise QisatiError(ErrorKind.UNAUTHENTICATED)

    # 순환 참조 방지를 위해 함수 내에서 임포트
    from qisati.services.session_service import resolve_principal
    return await resolve_principal(db, session_id)


async def get_current_principal_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[Principal]:
    """
    현재 호출자를 가져오지만, 필수는 아닙니다.
    토큰이 없거나 세션이 무효하면 None을 반환합니다.
    """
    if credentials is None:
        return None
    session_id = decode_session_token(credentials.credentials)
    if session_id is None:
        return None

    from qisati.services.session_service import resolve_principal
    try:
        return await resolve_principal(db, session_id)
    except QisatiError:
        return None
