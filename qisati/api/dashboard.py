"""
작가 대시보드 API
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qisati.core.database import get_db
from qisati.core.security import Principal, get_current_principal
from qisati.schemas.mint import DashboardResponse
from qisati.services.dashboard_service import author_dashboard

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """초안/공개 회차와 누적 수익"""
    return await author_dashboard(db, principal)
