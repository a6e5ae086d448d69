"""
회차 API (작성/공개/조회/댓글/수집)
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from qisati.core.database import get_db
from qisati.core.security import Principal, get_current_principal
from qisati.dependencies import get_ledger
from qisati.schemas.chapter import (
    ChapterCreate,
    ChapterCreateResult,
    DraftSave,
    ChapterTitleUpdate,
    ChapterResponse,
    ChapterView,
    CommentCreate,
    CommentResponse,
)
from qisati.schemas.mint import CollectRequest, CollectResult
from qisati.services import content_service, explore_service, social_service
from qisati.services.mint_service import MintLedger

router = APIRouter()


@router.post("/", response_model=ChapterCreateResult, status_code=status.HTTP_201_CREATED)
async def create_chapter(
    request: ChapterCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """회차 생성 (시리즈가 없으면 기본 시리즈 생성)"""
    return await content_service.create_chapter(db, principal, request.title, request.series_id)


@router.get("/{chapter_id}", response_model=ChapterView)
async def get_chapter(chapter_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await explore_service.chapter_view(db, chapter_id)


@router.get("/{chapter_id}/edit", response_model=ChapterResponse)
async def get_chapter_for_edit(
    chapter_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """에디터용 (초안 포함, 작성자만)"""
    chapter, _ = await content_service.load_owned_chapter(db, principal, chapter_id)
    return chapter


@router.put("/{chapter_id}/draft", response_model=ChapterResponse)
async def save_draft(
    chapter_id: uuid.UUID,
    request: DraftSave,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.save_draft(db, principal, chapter_id, request.markdown)


@router.post("/{chapter_id}/publish", response_model=ChapterResponse)
async def publish_chapter(
    chapter_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.publish_chapter(db, principal, chapter_id)


@router.put("/{chapter_id}/title", response_model=ChapterResponse)
async def update_chapter_title(
    chapter_id: uuid.UUID,
    request: ChapterTitleUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.update_chapter_title(db, principal, chapter_id, request.title)


@router.post("/{chapter_id}/collect", response_model=CollectResult)
async def collect_chapter(
    chapter_id: uuid.UUID,
    request: Optional[CollectRequest] = None,
    principal: Principal = Depends(get_current_principal),
    ledger: MintLedger = Depends(get_ledger),
):
    """에디션 1개 수집 (매진 시 409)"""
    return await ledger.collect_chapter(principal, chapter_id, request.tx_hash if request else None)


@router.get("/{chapter_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    chapter_id: uuid.UUID,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    return await social_service.list_comments(db, chapter_id, skip=skip, limit=limit)


@router.post("/{chapter_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    chapter_id: uuid.UUID,
    request: CommentCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await social_service.add_comment(db, principal, chapter_id, request.body)
