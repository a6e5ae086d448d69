"""
탐색/홈 통계/시리즈·회차 조회 서비스 (읽기 전용)
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Union, Dict, Any, List
import math
import uuid

from qisati.core.config import settings
from qisati.core.constants import STATUS_LIVE, ZERO_ADDRESS, UNPUBLISHED_PLACEHOLDER
from qisati.core.errors import not_found
from qisati.models.user import User
from qisati.models.series import Series
from qisati.models.chapter import Chapter
from qisati.models.social import ChapterComment
from qisati.models.chain import MetricsSnapshot


def format_count(count: int) -> str:
    if count == 0:
        return "0"
    if count < 1000:
        return str(count)
    if count < 1_000_000:
        return f"{count / 1000:.1f}K"
    return f"{count / 1_000_000:.1f}M"


def format_eth(amount: float) -> str:
    if amount == 0:
        return "$0"
    if amount < 0.001:
        return "<$0.001"
    if amount < 1:
        return f"${amount:.3f}"
    if amount < 1000:
        return f"${amount:.2f}"
    if amount < 1_000_000:
        return f"${amount / 1000:.1f}K"
    return f"${amount / 1_000_000:.1f}M"


def _author_info(author: Optional[User]) -> Dict[str, Any]:
    return {
        "name": author.handle if author else "Unknown",
        "avatar": author.avatar_url if author else "",
        "bio": (author.about or "") if author else "",
    }


async def total_volume(db: AsyncSession) -> float:
    """live 회차 판매액 합계 Σ price × (supply − remaining)"""
    volume = await db.scalar(
        select(func.coalesce(func.sum(Chapter.price_eth * (Chapter.supply - Chapter.remaining)), 0.0))
        .where(Chapter.status == STATUS_LIVE)
    )
    return float(volume or 0.0)


async def home_stats(db: AsyncSession) -> Dict[str, str]:
    stories = await db.scalar(select(func.count()).select_from(Series)) or 0
    authors = await db.scalar(select(func.count()).select_from(User)) or 0
    volume = await total_volume(db)
    # 온체인 보유자 집계 전까지는 판매액 기반 추정치
    collectors = math.floor(volume * 15)
    return {
        "stories": format_count(stories),
        "authors": format_count(authors),
        "collectors": format_count(collectors),
        "volume": format_eth(volume),
    }


def _matches_search(series: Series, needle: str) -> bool:
    return needle in (series.title or "").casefold() or needle in (series.logline or "").casefold()


async def explore_feed(
    db: AsyncSession,
    page: int = 1,
    category: Optional[str] = None,
    search: Optional[str] = None,
    include_no_contract: bool = False,
) -> Dict[str, Any]:
    """탐색 피드 (페이지당 12개)"""
    page = max(1, page)
    page_size = settings.EXPLORE_PAGE_SIZE

    conditions = []
    if category and category != "all":
        conditions.append(Series.category == category)
    if not include_no_contract:
        conditions.append(Series.contract.is_not(None))
        conditions.append(Series.contract != "")
        conditions.append(Series.contract != ZERO_ADDRESS)
    stmt = (
        select(Series, User)
        .outerjoin(User, Series.author_id == User.id)
        .where(*conditions)
        .order_by(Series.created_at.desc(), Series.slug.asc())
    )
    if search:
        # 리터럴 부분 문자열 일치 (casefold, 와일드카드 없음)
        needle = search.casefold()
        matched = [row for row in (await db.execute(stmt)).all() if _matches_search(row[0], needle)]
        total = len(matched)
        rows = matched[(page - 1) * page_size:page * page_size]
    else:
        total = await db.scalar(select(func.count()).select_from(Series).where(*conditions)) or 0
        rows = (await db.execute(stmt.offset((page - 1) * page_size).limit(page_size))).all()

    supply_by_series = {}
    series_ids = [s.id for s, _ in rows]
    if series_ids:
        supply_rows = (await db.execute(
            select(Chapter.series_id, func.sum(Chapter.remaining), func.sum(Chapter.supply))
            .where(Chapter.series_id.in_(series_ids))
            .group_by(Chapter.series_id)
        )).all()
        supply_by_series = {sid: (int(cur or 0), int(tot or 0)) for sid, cur, tot in supply_rows}

    items = []
    for series, author in rows:
        current, total_supply = supply_by_series.get(series.id, (0, 0))
        items.append({
            "id": series.id,
            "slug": series.slug,
            "title": series.title,
            "logline": series.logline,
            "category": series.category,
            "author": _author_info(author),
            "cover": series.cover_url,
            "supply": {"current": current, "total": total_supply},
        })
    return {"items": items, "page": page, "page_size": page_size, "total": total}


async def series_by_slug(db: AsyncSession, slug: str) -> Dict[str, Any]:
    series = (await db.execute(select(Series).where(Series.slug == slug))).scalar_one_or_none()
    if series is None:
        raise not_found("시리즈")
    author = await db.get(User, series.author_id)
    chapters = (await db.execute(
        select(Chapter).where(Chapter.series_id == series.id).order_by(Chapter.index.asc())
    )).scalars().all()

    return {
        "id": series.id,
        "slug": series.slug,
        "title": series.title,
        "logline": series.logline,
        "synopsis": series.synopsis_md,
        "category": series.category,
        "author": _author_info(author),
        "cover": series.cover_url,
        "locked": any(ch.status == STATUS_LIVE for ch in chapters),
        "chapters": [
            {
                "id": ch.id,
                "index": ch.index,
                "title": ch.title,
                "word_count": ch.word_count,
                "status": ch.status,
                "price_eth": ch.price_eth,
                "supply": {"current": ch.remaining, "total": ch.supply},
            }
            for ch in chapters
        ],
    }


async def chapter_view(db: AsyncSession, chapter_id: Union[str, uuid.UUID]) -> Dict[str, Any]:
    """독자용 회차. 미공개면 본문 대신 안내 문구."""
    chapter = await db.get(Chapter, chapter_id)
    if chapter is None:
        raise not_found("회차")
    comments = await db.scalar(
        select(func.count()).select_from(ChapterComment).where(ChapterComment.chapter_id == chapter.id)
    )
    return {
        "id": chapter.id,
        "series_id": chapter.series_id,
        "index": chapter.index,
        "title": chapter.title,
        "status": chapter.status,
        "word_count": chapter.word_count,
        "content": chapter.body_md or UNPUBLISHED_PLACEHOLDER,
        "price_eth": chapter.price_eth,
        "supply": {"current": chapter.remaining, "total": chapter.supply},
        "token_id": chapter.token_id,
        "comments": comments or 0,
        "audio_segments": list(chapter.audio_segments or []),
    }


async def chapter_navigation(
    db: AsyncSession, series_id: Union[str, uuid.UUID], current_index: int
) -> Dict[str, Optional[Dict[str, Any]]]:
    """이전/다음 회차 (인덱스 순)"""
    def _item(ch: Optional[Chapter]):
        if ch is None:
            return None
        return {"id": ch.id, "title": ch.title, "index": ch.index}

    previous = (await db.execute(
        select(Chapter)
        .where(Chapter.series_id == series_id, Chapter.index < current_index)
        .order_by(Chapter.index.desc())
        .limit(1)
    )).scalar_one_or_none()
    following = (await db.execute(
        select(Chapter)
        .where(Chapter.series_id == series_id, Chapter.index > current_index)
        .order_by(Chapter.index.asc())
        .limit(1)
    )).scalar_one_or_none()
    return {"previous": _item(previous), "next": _item(following)}


async def snapshot_metrics(db: AsyncSession) -> MetricsSnapshot:
    """플랫폼 누적 지표를 스냅샷으로 기록"""
    snapshot = MetricsSnapshot(
        total_series=await db.scalar(select(func.count()).select_from(Series)) or 0,
        total_chapters=await db.scalar(select(func.count()).select_from(Chapter)) or 0,
        total_eth_earned=await total_volume(db),
    )
    db.add(snapshot)
    await db.commit()
    return snapshot
