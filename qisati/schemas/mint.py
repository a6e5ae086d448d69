"""
민팅/수집/대시보드 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal, Union
from datetime import datetime
import uuid

from qisati.core.constants import PendingTxType
from qisati.schemas.chapter import ChapterResponse
from qisati.schemas.user import UserResponse


class RoyaltySplit(BaseModel):
    address: str = Field(..., min_length=4, max_length=64)
    percentage: float


class MintRequest(BaseModel):
    """민팅 요청 (합계 100 검증은 서비스 계층)"""
    edition_size: Union[int, Literal["unlimited"]]
    price: float
    splits: Optional[List[RoyaltySplit]] = None


class MintResult(BaseModel):
    success: bool = True
    tx_hash: str
    token_id: int
    chapter: ChapterResponse


class CollectRequest(BaseModel):
    # 지갑에서 제출한 실제 해시가 있으면 기록
    tx_hash: Optional[str] = Field(None, max_length=100)


class CollectResult(BaseModel):
    tx_hash: str
    remaining: int


class PendingTxCreate(BaseModel):
    hash: str = Field(..., min_length=1, max_length=100)
    type: PendingTxType
    series_id: Optional[uuid.UUID] = None
    chapter_id: Optional[uuid.UUID] = None


class PendingTxResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    hash: str
    type: PendingTxType
    user_id: uuid.UUID
    series_id: Optional[uuid.UUID] = None
    chapter_id: Optional[uuid.UUID] = None
    created_at: datetime


class WithdrawResult(BaseModel):
    ok: bool


class DashboardResponse(BaseModel):
    drafts: List[ChapterResponse]
    live_chapters: List[ChapterResponse]
    earnings: float
    user: UserResponse
