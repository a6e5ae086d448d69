"""
지갑 인증 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field
from datetime import datetime
import uuid

from qisati.schemas.user import UserResponse


class WalletLoginRequest(BaseModel):
    """지갑 서명 로그인 요청"""
    address: str = Field(..., min_length=4, max_length=64)
    signature: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """세션 발급 응답"""
    session_id: uuid.UUID
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse
