"""
회차 라이프사이클 서비스

draft → live 단방향 전이. 시리즈 제목은 live 회차가 생기면 잠긴다.
모든 변경은 소유자 확인 후에만 수행한다.
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Union, Tuple, Dict, Any
from datetime import datetime
import logging
import re
import uuid

from qisati.core.config import settings
from qisati.core.constants import (
    STATUS_DRAFT,
    STATUS_LIVE,
    ZERO_ADDRESS,
    DEFAULT_SERIES_TITLE,
    DEFAULT_SERIES_COVER,
    DEFAULT_SERIES_LOGLINE,
    DEFAULT_SERIES_SYNOPSIS,
    DEFAULT_SERIES_CATEGORY,
)
from qisati.core.errors import QisatiError, ErrorKind, not_found
from qisati.core.security import Principal, require_owner
from qisati.models.series import Series
from qisati.models.chapter import Chapter

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"[\w'’-]+", re.UNICODE)
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def count_words(markdown: Optional[str]) -> int:
    return len(_WORD_RE.findall(markdown or ""))


async def get_series(db: AsyncSession, series_id: Union[str, uuid.UUID]) -> Series:
    series = await db.get(Series, series_id)
    if series is None:
        raise not_found("시리즈")
    return series


async def get_chapter(db: AsyncSession, chapter_id: Union[str, uuid.UUID]) -> Chapter:
    chapter = await db.get(Chapter, chapter_id)
    if chapter is None:
        raise not_found("회차")
    return chapter


async def load_owned_series(db: AsyncSession, principal: Principal, series_id: Union[str, uuid.UUID]) -> Series:
    series = await get_series(db, series_id)
    require_owner(principal, series.author_id)
    return series


async def load_owned_chapter(
    db: AsyncSession, principal: Principal, chapter_id: Union[str, uuid.UUID]
) -> Tuple[Chapter, Series]:
    """회차 권한은 부모 시리즈의 작성자로 판단"""
    chapter = await get_chapter(db, chapter_id)
    series = await get_series(db, chapter.series_id)
    require_owner(principal, series.author_id)
    return chapter, series


async def has_live_chapter(db: AsyncSession, series_id: Union[str, uuid.UUID]) -> bool:
    live = await db.scalar(
        select(func.count()).select_from(Chapter)
        .where(Chapter.series_id == series_id, Chapter.status == STATUS_LIVE)
    )
    return bool(live)


def _new_chapter(series_id, index: int, title: str) -> Chapter:
    return Chapter(
        series_id=series_id,
        index=index,
        title=title,
        word_count=0,
        status=STATUS_DRAFT,
        price_eth=settings.DEFAULT_CHAPTER_PRICE_ETH,
        supply=settings.DEFAULT_CHAPTER_SUPPLY,
        remaining=settings.DEFAULT_CHAPTER_SUPPLY,
        token_id=0,
        markdown_cid="",
        draft_md="",
        body_md="",
        audio_segments=[],
        audio_generation_count=0,
    )


def _default_series(principal: Principal) -> Series:
    stamp = int(datetime.utcnow().timestamp() * 1000)
    return Series(
        slug=f"untitled-{stamp}-{uuid.uuid4().hex[:6]}",
        title=DEFAULT_SERIES_TITLE,
        cover_url=DEFAULT_SERIES_COVER,
        logline=DEFAULT_SERIES_LOGLINE,
        synopsis_md=DEFAULT_SERIES_SYNOPSIS,
        author_id=principal.user_id,
        contract=ZERO_ADDRESS,
        token_id=0,
        category=DEFAULT_SERIES_CATEGORY,
    )


async def create_series(
    db: AsyncSession,
    principal: Principal,
    title: str,
    logline: Optional[str] = None,
    category: Optional[str] = None,
    cover_url: Optional[str] = None,
) -> Series:
    """호출자 소유의 새 시리즈 (회차 없이)"""
    series = _default_series(principal)
    series.title = title
    base = _SLUG_RE.sub("-", title.lower()).strip("-")[:60] or "untitled"
    series.slug = f"{base}-{uuid.uuid4().hex[:6]}"
    if logline is not None:
        series.logline = logline
    if category is not None:
        series.category = category
    if cover_url is not None:
        series.cover_url = cover_url
    db.add(series)
    await db.commit()
    await db.refresh(series)
    logger.info(f"[content] series created id={series.id}")
    return series


async def create_chapter(
    db: AsyncSession,
    principal: Principal,
    title: str,
    series_id: Optional[Union[str, uuid.UUID]] = None,
) -> Dict[str, Any]:
    """회차 생성. 시리즈가 없으면 호출자 소유의 기본 시리즈를 먼저 만든다."""
    if series_id is None:
        series = _default_series(principal)
        db.add(series)
        await db.flush()
        next_index = 1
    else:
        series = await load_owned_series(db, principal, series_id)
        existing = await db.scalar(
            select(func.count()).select_from(Chapter).where(Chapter.series_id == series.id)
        )
        next_index = (existing or 0) + 1

    chapter = _new_chapter(series.id, next_index, title)
    db.add(chapter)
    await db.commit()
    logger.info(f"[content] chapter created series={series.id} index={next_index}")
    return {"chapter_id": chapter.id, "series_id": series.id}


async def create_draft_chapter(
    db: AsyncSession, principal: Principal, series_id: Union[str, uuid.UUID]
) -> Chapter:
    """기존 시리즈 끝에 'Untitled N' 초안 회차 추가"""
    series = await load_owned_series(db, principal, series_id)
    last_index = await db.scalar(
        select(func.max(Chapter.index)).where(Chapter.series_id == series.id)
    )
    next_index = (last_index or 0) + 1
    chapter = _new_chapter(series.id, next_index, f"Untitled {next_index}")
    db.add(chapter)
    await db.commit()
    await db.refresh(chapter)
    return chapter


async def save_draft(
    db: AsyncSession, principal: Principal, chapter_id: Union[str, uuid.UUID], markdown: str
) -> Chapter:
    """초안 저장 (덮어쓰기, 마지막 쓰기 우선). 같은 내용이면 아무것도 쓰지 않는다."""
    chapter, _ = await load_owned_chapter(db, principal, chapter_id)
    if chapter.draft_md == markdown:
        return chapter
    chapter.draft_md = markdown
    chapter.word_count = count_words(markdown)
    await db.commit()
    await db.refresh(chapter)
    return chapter


def apply_publish(chapter: Chapter) -> None:
    """스테이징 → 공개본 이동 (커밋은 호출자 책임)"""
    draft = chapter.draft_md or ""
    if not draft.strip():
        raise QisatiError(ErrorKind.NO_DRAFT_TO_PUBLISH)
    chapter.body_md = draft
    chapter.draft_md = None
    chapter.word_count = count_words(draft)
    chapter.status = STATUS_LIVE


async def publish_chapter(
    db: AsyncSession, principal: Principal, chapter_id: Union[str, uuid.UUID]
) -> Chapter:
    """회차 공개 (되돌릴 수 없음)"""
    chapter, _ = await load_owned_chapter(db, principal, chapter_id)
    apply_publish(chapter)
    await db.commit()
    await db.refresh(chapter)
    logger.info(f"[content] chapter published id={chapter.id}")
    return chapter


async def update_series_title(
    db: AsyncSession, principal: Principal, series_id: Union[str, uuid.UUID], title: str
) -> Series:
    """시리즈 제목 변경. live 회차가 있으면 SeriesLocked."""
    series = await load_owned_series(db, principal, series_id)
    if await has_live_chapter(db, series.id):
        raise QisatiError(ErrorKind.SERIES_LOCKED)
    series.title = title
    await db.commit()
    await db.refresh(series)
    return series


async def update_series_settings(
    db: AsyncSession,
    principal: Principal,
    series_id: Union[str, uuid.UUID],
    **fields: Any,
) -> Series:
    """로그라인/시놉시스/커버/카테고리/코인 주소 수정"""
    series = await load_owned_series(db, principal, series_id)
    allowed = {"logline", "synopsis_md", "cover_url", "category", "coin_address"}
    for key, value in fields.items():
        if key in allowed and value is not None:
            setattr(series, key, value)
    await db.commit()
    await db.refresh(series)
    return series


async def update_chapter_title(
    db: AsyncSession, principal: Principal, chapter_id: Union[str, uuid.UUID], title: str
) -> Chapter:
    chapter, _ = await load_owned_chapter(db, principal, chapter_id)
    chapter.title = title
    await db.commit()
    await db.refresh(chapter)
    return chapter
