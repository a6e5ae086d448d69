"""
탐색/홈 통계 API
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from qisati.core.database import get_db
from qisati.schemas.series import ExploreResponse, HomeStats
from qisati.services import explore_service

router = APIRouter()


@router.get("/", response_model=ExploreResponse)
async def explore_feed(
    page: int = Query(1, ge=1),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    include_no_contract: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    return await explore_service.explore_feed(
        db, page=page, category=category, search=search, include_no_contract=include_no_contract
    )


@router.get("/stats", response_model=HomeStats)
async def home_stats(db: AsyncSession = Depends(get_db)):
    return await explore_service.home_stats(db)
