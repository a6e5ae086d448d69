"""
사용자/프로필 관련 서비스
"""

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Union, List, Dict, Any
import re
import uuid

from qisati.core.constants import AVATAR_URL_TEMPLATE, DEFAULT_USER_ABOUT
from qisati.core.errors import invalid_input, not_found
from qisati.core.security import Principal
from qisati.models.user import User, UserSocial
from qisati.models.series import Series
from qisati.models.social import Follow


_HANDLE_RE = re.compile(r"^[A-Za-z0-9_]+$")


def normalize_address(address: str) -> str:
    return address.strip().lower()


def default_handle_candidates(address: str) -> List[str]:
    """주소 앞 6자 + 뒤 4자, 충돌 시 점점 길게"""
    return [address[:6] + address[-4:], address[:8] + address[-6:], address[:10] + address[-8:]]


def handle_error(handle: str) -> Optional[str]:
    """handle 규칙 위반 메시지 (정상이면 None)"""
    if not _HANDLE_RE.match(handle or ""):
        return "Only letters, numbers, and underscores allowed"
    if len(handle) < 3 or len(handle) > 20:
        return "Must be between 3 and 20 characters"
    return None


async def get_user_by_id(db: AsyncSession, user_id: Union[str, uuid.UUID]) -> Optional[User]:
    """ID로 사용자 조회"""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_wallet(db: AsyncSession, address: str) -> Optional[User]:
    """지갑 주소로 사용자 조회 (쓰기 없음)"""
    result = await db.execute(select(User).where(User.wallet_address == normalize_address(address)))
    return result.scalar_one_or_none()


async def get_user_by_handle(db: AsyncSession, handle: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.handle == handle))
    return result.scalar_one_or_none()


async def ensure_user(db: AsyncSession, address: str) -> User:
    """로그인 시 한 번 호출되는 명시적 사용자 생성 커맨드.

    조회 경로에서는 절대 사용자를 만들지 않는다.
    """
    address = normalize_address(address)
    user = await get_user_by_wallet(db, address)
    if user is not None:
        return user

    handle = None
    for candidate in default_handle_candidates(address):
        if await get_user_by_handle(db, candidate) is None:
            handle = candidate
            break
    if handle is None:
        handle = f"user_{uuid.uuid4().hex[:12]}"

    user = User(
        handle=handle,
        avatar_url=AVATAR_URL_TEMPLATE.format(address=address),
        wallet_address=address,
        about=DEFAULT_USER_ABOUT,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def check_handle_available(db: AsyncSession, principal: Principal, handle: str) -> Dict[str, Any]:
    """handle 사용 가능 여부 (본인이 쓰는 handle은 사용 가능)"""
    error = handle_error(handle)
    if error:
        return {"available": False, "error": error}
    existing = await get_user_by_handle(db, handle)
    available = existing is None or existing.id == principal.user_id
    return {"available": available, "error": None if available else "Handle is already taken"}


async def update_profile(
    db: AsyncSession,
    principal: Principal,
    handle: Optional[str] = None,
    about: Optional[str] = None,
    avatar_url: Optional[str] = None,
    banner_url: Optional[str] = None,
    socials: Optional[List[Dict[str, Any]]] = None,
) -> User:
    """프로필 수정. socials가 주어지면 전부 교체한다."""
    user = await get_user_by_id(db, principal.user_id)
    if user is None:
        raise not_found("사용자")

    if handle is not None:
        error = handle_error(handle)
        if error:
            raise invalid_input(error)
        existing = await get_user_by_handle(db, handle)
        if existing is not None and existing.id != user.id:
            raise invalid_input("Handle is already taken")
        user.handle = handle
    if about is not None:
        user.about = about
    if avatar_url is not None:
        user.avatar_url = avatar_url
    if banner_url is not None:
        user.banner_url = banner_url

    if socials is not None:
        await db.execute(delete(UserSocial).where(UserSocial.user_id == user.id))
        for social in socials:
            db.add(UserSocial(
                user_id=user.id,
                platform=social["platform"],
                url=social["url"],
                display_text=social.get("display_text"),
            ))

    await db.commit()
    await db.refresh(user)
    return user


async def profile_by_handle(db: AsyncSession, handle: str) -> Optional[Dict[str, Any]]:
    """
    프로필 페이지용 조회: 기본 정보 + 소셜 + 시리즈 + 팔로워/팔로잉 수
    """
    user = await get_user_by_handle(db, handle)
    if user is None:
        return None

    socials = (await db.execute(
        select(UserSocial).where(UserSocial.user_id == user.id)
    )).scalars().all()
    series = (await db.execute(
        select(Series).where(Series.author_id == user.id).order_by(Series.created_at.desc())
    )).scalars().all()
    follower_count = await db.scalar(
        select(func.count()).select_from(Follow).where(Follow.following_id == user.id)
    )
    following_count = await db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user.id)
    )

    return {
        "id": user.id,
        "handle": user.handle,
        "avatar_url": user.avatar_url,
        "about": user.about,
        "banner_url": user.banner_url,
        "wallet_address": user.wallet_address,
        "created_at": user.created_at,
        "socials": list(socials),
        "series": list(series),
        "follower_count": follower_count or 0,
        "following_count": following_count or 0,
    }


async def toggle_follow(db: AsyncSession, principal: Principal, target_handle: str) -> bool:
    """팔로우 토글. 반환값은 토글 후 팔로우 여부."""
    target = await get_user_by_handle(db, target_handle)
    if target is None:
        raise not_found("사용자")
    if target.id == principal.user_id:
        raise invalid_input("자기 자신은 팔로우할 수 없습니다.")

    existing = (await db.execute(
        select(Follow).where(Follow.follower_id == principal.user_id, Follow.following_id == target.id)
    )).scalar_one_or_none()
    if existing is not None:
        await db.delete(existing)
        await db.commit()
        return False

    db.add(Follow(follower_id=principal.user_id, following_id=target.id))
    await db.commit()
    return True


async def is_following(db: AsyncSession, principal: Principal, target_handle: str) -> bool:
    target = await get_user_by_handle(db, target_handle)
    if target is None:
        return False
    existing = await db.scalar(
        select(func.count()).select_from(Follow)
        .where(Follow.follower_id == principal.user_id, Follow.following_id == target.id)
    )
    return bool(existing)
