"""
사용자/프로필 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid


HANDLE_PATTERN = r"^[A-Za-z0-9_]+$"


class UserResponse(BaseModel):
    """사용자 응답 스키마"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    handle: str
    avatar_url: str
    about: Optional[str] = None
    banner_url: Optional[str] = None
    wallet_address: Optional[str] = None
    created_at: Optional[datetime] = None


class UserSocialItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    platform: str = Field(..., min_length=1, max_length=50)
    url: str = Field(..., min_length=1, max_length=500)
    display_text: Optional[str] = Field(None, max_length=100)


class ProfileUpdate(BaseModel):
    """프로필 수정 요청 (handle 규칙은 서비스에서 검증)"""
    handle: Optional[str] = None
    about: Optional[str] = Field(None, max_length=1000)
    avatar_url: Optional[str] = Field(None, max_length=500)
    banner_url: Optional[str] = Field(None, max_length=500)
    socials: Optional[List[UserSocialItem]] = None


class HandleAvailability(BaseModel):
    available: bool
    error: Optional[str] = None


class ProfileSeriesItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    title: str
    cover_url: str
    logline: str
    category: Optional[str] = None


class ProfileResponse(UserResponse):
    """프로필 페이지용 (소셜, 시리즈, 팔로우 수 포함)"""
    socials: List[UserSocialItem] = Field(default_factory=list)
    series: List[ProfileSeriesItem] = Field(default_factory=list)
    follower_count: int = 0
    following_count: int = 0


class FollowResponse(BaseModel):
    following: bool
