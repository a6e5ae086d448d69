"""
지갑 인증 API
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from qisati.core.database import get_db
from qisati.core.security import Principal, get_current_principal
from qisati.dependencies import get_signature_verifier
from qisati.schemas.auth import WalletLoginRequest, SessionResponse
from qisati.schemas.user import UserResponse
from qisati.services import session_service, user_service
from qisati.services.signature_service import SignatureVerifier
from qisati.core.errors import not_found

router = APIRouter()


@router.post("/login", response_model=SessionResponse)
async def login(
    request: WalletLoginRequest,
    db: AsyncSession = Depends(get_db),
    verifier: SignatureVerifier = Depends(get_signature_verifier),
):
    """지갑 서명 로그인 (첫 로그인 시 사용자 생성)"""
    return await session_service.sign_in(db, verifier, request.address, request.signature, request.message)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    await session_service.revoke_session(db, principal.session_id)


@router.get("/me", response_model=UserResponse)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.get_user_by_id(db, principal.user_id)
    if user is None:
        raise not_found("사용자")
    return user
