"""
사용자 프로필/팔로우 API
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qisati.core.database import get_db
from qisati.core.errors import not_found
from qisati.core.security import Principal, get_current_principal
from qisati.schemas.user import (
    UserResponse,
    ProfileUpdate,
    ProfileResponse,
    HandleAvailability,
    FollowResponse,
)
from qisati.services import user_service

router = APIRouter()


@router.get("/check-handle", response_model=HandleAvailability)
async def check_handle(
    handle: str = Query(..., min_length=1, max_length=50),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.check_handle_available(db, principal, handle)


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    profile: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    socials = None
    if profile.socials is not None:
        socials = [s.model_dump() for s in profile.socials]
    return await user_service.update_profile(
        db,
        principal,
        handle=profile.handle,
        about=profile.about,
        avatar_url=profile.avatar_url,
        banner_url=profile.banner_url,
        socials=socials,
    )


@router.get("/{handle}", response_model=ProfileResponse)
async def get_profile(handle: str, db: AsyncSession = Depends(get_db)):
    profile = await user_service.profile_by_handle(db, handle)
    if profile is None:
        raise not_found("사용자")
    return profile


@router.post("/{handle}/follow", response_model=FollowResponse)
async def toggle_follow(
    handle: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    following = await user_service.toggle_follow(db, principal, handle)
    return {"following": following}
