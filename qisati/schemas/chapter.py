"""
회차 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid

from qisati.core.constants import ChapterStatus
from qisati.schemas.series import SupplyInfo


class ChapterCreate(BaseModel):
    """회차 생성 (series_id 없으면 기본 시리즈를 만든다)"""
    title: str = Field(..., min_length=1, max_length=200)
    series_id: Optional[uuid.UUID] = None


class ChapterCreateResult(BaseModel):
    chapter_id: uuid.UUID
    series_id: uuid.UUID


class DraftChapterCreate(BaseModel):
    series_id: uuid.UUID


class DraftSave(BaseModel):
    markdown: str


class ChapterTitleUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)


class ChapterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    series_id: uuid.UUID
    index: int
    title: str
    word_count: int
    status: ChapterStatus
    price_eth: float
    supply: int
    remaining: int
    token_id: int
    draft_md: Optional[str] = None
    body_md: Optional[str] = None
    audio_generation_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AudioSegmentItem(BaseModel):
    text: str
    audio_url: str
    character_id: Optional[str] = None
    start_index: int
    end_index: int


class ChapterView(BaseModel):
    """독자용 회차 조회"""
    id: uuid.UUID
    series_id: uuid.UUID
    index: int
    title: str
    status: ChapterStatus
    word_count: int
    content: str
    price_eth: float
    supply: SupplyInfo
    token_id: int
    comments: int
    audio_segments: List[AudioSegmentItem] = Field(default_factory=list)


class NavItem(BaseModel):
    id: uuid.UUID
    title: str
    index: int


class ChapterNavigation(BaseModel):
    previous: Optional[NavItem] = None
    next: Optional[NavItem] = None


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    chapter_id: uuid.UUID
    author_id: uuid.UUID
    body: str
    created_at: Optional[datetime] = None
