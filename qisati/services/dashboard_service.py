"""
작가 대시보드 (매 호출 전체 재계산)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from qisati.core.constants import STATUS_DRAFT, STATUS_LIVE
from qisati.core.errors import not_found
from qisati.core.security import Principal
from qisati.models.series import Series
from qisati.models.chapter import Chapter
from qisati.services.user_service import get_user_by_id


async def author_dashboard(db: AsyncSession, principal: Principal) -> Dict[str, Any]:
    user = await get_user_by_id(db, principal.user_id)
    if user is None:
        raise not_found("사용자")

    chapters = (await db.execute(
        select(Chapter)
        .join(Series, Chapter.series_id == Series.id)
        .where(Series.author_id == user.id)
        .order_by(Chapter.series_id, Chapter.index.asc())
    )).scalars().all()

    drafts = [ch for ch in chapters if ch.status == STATUS_DRAFT]
    live = [ch for ch in chapters if ch.status == STATUS_LIVE]
    earnings = sum(ch.price_eth * (ch.supply - ch.remaining) for ch in live)

    return {"drafts": drafts, "live_chapters": live, "earnings": earnings, "user": user}
