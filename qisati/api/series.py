"""
시리즈 API
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from qisati.core.database import get_db
from qisati.core.security import Principal, get_current_principal
from qisati.dependencies import get_ledger, get_storage
from qisati.schemas.series import (
    SeriesResponse,
    SeriesCreate,
    SeriesTitleUpdate,
    SeriesSettingsUpdate,
    SeriesDetail,
    SeriesLaunch,
    CoinMetadataResponse,
)
from qisati.schemas.chapter import ChapterResponse, ChapterNavigation
from qisati.services import content_service, explore_service
from qisati.services.mint_service import MintLedger, pin_series_metadata
from qisati.services.storage import Storage

router = APIRouter()


@router.post("/", response_model=SeriesResponse, status_code=201)
async def create_series(
    request: SeriesCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.create_series(
        db, principal, request.title,
        logline=request.logline, category=request.category, cover_url=request.cover_url,
    )


@router.get("/by-slug/{slug}", response_model=SeriesDetail)
async def get_series_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    return await explore_service.series_by_slug(db, slug)


@router.get("/{series_id}", response_model=SeriesResponse)
async def get_series(series_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await content_service.get_series(db, series_id)


@router.put("/{series_id}/title", response_model=SeriesResponse)
async def update_series_title(
    series_id: uuid.UUID,
    request: SeriesTitleUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """제목 변경 (첫 회차 공개 후에는 잠김)"""
    return await content_service.update_series_title(db, principal, series_id, request.title)


@router.patch("/{series_id}", response_model=SeriesResponse)
async def update_series_settings(
    series_id: uuid.UUID,
    request: SeriesSettingsUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.update_series_settings(
        db, principal, series_id, **request.model_dump(exclude_unset=True)
    )


@router.post("/{series_id}/drafts", response_model=ChapterResponse, status_code=201)
async def create_draft_chapter(
    series_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.create_draft_chapter(db, principal, series_id)


@router.get("/{series_id}/navigation", response_model=ChapterNavigation)
async def get_chapter_navigation(
    series_id: uuid.UUID,
    index: int,
    db: AsyncSession = Depends(get_db),
):
    return await explore_service.chapter_navigation(db, series_id, index)


@router.post("/{series_id}/coin-metadata", response_model=CoinMetadataResponse)
async def pin_coin_metadata(
    series_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    """코인 배포 전 메타데이터 JSON을 고정하고 ipfs:// URI 반환"""
    return await pin_series_metadata(db, principal, series_id, storage)


@router.put("/{series_id}/launch", response_model=SeriesResponse)
async def launch_series(
    series_id: uuid.UUID,
    request: SeriesLaunch,
    principal: Principal = Depends(get_current_principal),
    ledger: MintLedger = Depends(get_ledger),
):
    """배포된 코인 컨트랙트를 시리즈에 연결 (탐색 피드 노출)"""
    return await ledger.launch_series(
        principal, series_id, request.contract, token_id=request.token_id, tx_hash=request.tx_hash
    )
