"""
시리즈/탐색 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid

from qisati.core.constants import Category, ChapterStatus


class SeriesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    title: str
    cover_url: str
    logline: str
    synopsis_md: str
    author_id: uuid.UUID
    contract: str
    token_id: int
    category: Optional[str] = None
    coin_address: Optional[str] = None
    created_at: Optional[datetime] = None


class SeriesTitleUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)


class SeriesSettingsUpdate(BaseModel):
    """에디터 설정 패널 (제목 제외, 잠금 대상 아님)"""
    logline: Optional[str] = Field(None, max_length=500)
    synopsis_md: Optional[str] = None
    cover_url: Optional[str] = Field(None, max_length=500)
    category: Optional[Category] = None
    coin_address: Optional[str] = Field(None, max_length=64)


class SupplyInfo(BaseModel):
    current: int
    total: int


class AuthorInfo(BaseModel):
    name: str
    avatar: str
    bio: Optional[str] = None


class ExploreItem(BaseModel):
    id: uuid.UUID
    slug: str
    title: str
    logline: str
    category: Optional[str] = None
    author: AuthorInfo
    cover: str
    supply: SupplyInfo


class ExploreResponse(BaseModel):
    items: List[ExploreItem]
    page: int
    page_size: int
    total: int


class SeriesChapterItem(BaseModel):
    id: uuid.UUID
    index: int
    title: str
    word_count: int
    status: ChapterStatus
    price_eth: float
    supply: SupplyInfo


class SeriesDetail(BaseModel):
    id: uuid.UUID
    slug: str
    title: str
    logline: str
    synopsis: str
    category: Optional[str] = None
    author: AuthorInfo
    cover: str
    locked: bool
    chapters: List[SeriesChapterItem]


class HomeStats(BaseModel):
    stories: str
    authors: str
    collectors: str
    volume: str


class SeriesCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    logline: Optional[str] = Field(None, max_length=500)
    category: Optional[Category] = None
    cover_url: Optional[str] = Field(None, max_length=500)


class SeriesLaunch(BaseModel):
    """시리즈 코인 배포 결과 연결"""
    contract: str = Field(..., pattern=r"^0x[0-9a-fA-F]{40}$")
    token_id: int = Field(0, ge=0)
    tx_hash: Optional[str] = Field(None, max_length=100)


class CoinMetadataResponse(BaseModel):
    content_id: str
    url: str
    uri: str
