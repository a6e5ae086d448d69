"""
지갑 세션 서비스: 세션 저장소와 신원 해석
"""

from datetime import datetime, timedelta, timezone
from typing import Union, Dict, Any
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from qisati.core.config import settings
from qisati.core.errors import QisatiError, ErrorKind
from qisati.core.security import Principal, create_session_token
from qisati.models.user import User
from qisati.models.wallet_session import WalletSession
from qisati.services.signature_service import SignatureVerifier
from qisati.services import user_service

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.utcnow()


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


async def create_session(db: AsyncSession, user: User) -> WalletSession:
    """세션 생성 (TTL 기본 30일)"""
    now = _utcnow()
    session = WalletSession(
        user_id=user.id,
        wallet_address=user.wallet_address,
        created_at=now,
        expires_at=now + timedelta(days=settings.SESSION_TTL_DAYS),
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)
    return session


async def resolve_session(db: AsyncSession, session_id: Union[str, uuid.UUID]) -> WalletSession:
    """세션 조회. 없거나 만료(now >= expires_at)면 Unauthenticated. 만료 연장 없음."""
    session = (await db.execute(
        select(WalletSession).where(WalletSession.id == session_id)
    )).scalar_one_or_none()
    if session is None or _utcnow() >= _as_naive_utc(session.expires_at):
        raise QisatiError(ErrorKind.UNAUTHENTICATED)
    return session


async def resolve_principal(db: AsyncSession, session_id: Union[str, uuid.UUID]) -> Principal:
    """세션 → Principal (읽기 전용)"""
    session = await resolve_session(db, session_id)
    user = await user_service.get_user_by_id(db, session.user_id)
    if user is None:
        raise QisatiError(ErrorKind.UNAUTHENTICATED)
    return Principal(user_id=user.id, wallet_address=session.wallet_address, session_id=session.id)


async def sign_in(
    db: AsyncSession,
    verifier: SignatureVerifier,
    address: str,
    signature: str,
    message: str,
) -> Dict[str, Any]:
    """서명 검증 → 사용자 보장 → 세션 발급"""
    if not verifier.verify(address, message, signature):
        logger.info(f"[wallet_auth] signature rejected for {address}")
        raise QisatiError(ErrorKind.UNAUTHENTICATED, "지갑 서명이 올바르지 않습니다.")

    user = await user_service.ensure_user(db, address)
    session = await create_session(db, user)
    token = create_session_token(session.id, session.expires_at)
    logger.info(f"[wallet_auth] session issued user={user.id}")
    return {
        "session_id": session.id,
        "access_token": token,
        "token_type": "bearer",
        "expires_at": session.expires_at,
        "user": user,
    }


async def revoke_session(db: AsyncSession, session_id: Union[str, uuid.UUID]) -> None:
    """로그아웃: 세션 행 삭제"""
    session = (await db.execute(
        select(WalletSession).where(WalletSession.id == session_id)
    )).scalar_one_or_none()
    if session is not None:
        await db.delete(session)
        await db.commit()
