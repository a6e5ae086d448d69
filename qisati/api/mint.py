"""
민팅/트랜잭션/정산 API
"""

from fastapi import APIRouter, Depends, status
from typing import List
import uuid

from qisati.core.security import Principal, get_current_principal
from qisati.dependencies import get_ledger
from qisati.schemas.mint import (
    MintRequest,
    MintResult,
    PendingTxCreate,
    PendingTxResponse,
    WithdrawResult,
)
from qisati.services.mint_service import MintLedger

router = APIRouter()


@router.post("/chapters/{chapter_id}", response_model=MintResult)
async def mint_chapter(
    chapter_id: uuid.UUID,
    request: MintRequest,
    principal: Principal = Depends(get_current_principal),
    ledger: MintLedger = Depends(get_ledger),
):
    """회차 민팅 (미공개 회차는 공개 후 민팅)"""
    splits = [s.model_dump() for s in request.splits] if request.splits is not None else None
    return await ledger.mint_chapter(principal, chapter_id, request.edition_size, request.price, splits)


@router.post("/pending", response_model=PendingTxResponse, status_code=status.HTTP_201_CREATED)
async def record_pending_tx(
    request: PendingTxCreate,
    principal: Principal = Depends(get_current_principal),
    ledger: MintLedger = Depends(get_ledger),
):
    return await ledger.record_pending_tx(
        principal, request.hash, request.type, series_id=request.series_id, chapter_id=request.chapter_id
    )


@router.get("/pending", response_model=List[PendingTxResponse])
async def list_pending_txs(
    principal: Principal = Depends(get_current_principal),
    ledger: MintLedger = Depends(get_ledger),
):
    return await ledger.list_pending_txs(principal)


@router.post("/withdraw", response_model=WithdrawResult)
async def withdraw_rewards(
    principal: Principal = Depends(get_current_principal),
    ledger: MintLedger = Depends(get_ledger),
):
    return await ledger.withdraw_rewards(principal)
