"""
민팅/공급 원장 서비스

collect의 잔여 수량 차감은 조건부 UPDATE(remaining > 0)로 저장소 계층에서 원자적으로 처리한다.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Union, List, Dict, Any
import logging
import math
import re
import uuid

from qisati.core.constants import STATUS_LIVE, UNLIMITED_EDITION_SIZE, ZERO_ADDRESS, DEFAULT_SERIES_CATEGORY
from qisati.core.errors import QisatiError, ErrorKind, invalid_input, not_found
from qisati.core.security import Principal
from qisati.models.chapter import Chapter
from qisati.models.series import Series
from qisati.models.pending_tx import PendingTx
from qisati.models.chain import TokenSnapshot
from qisati.services.chain_client import ChainClient, placeholder_tx_hash
from qisati.services.content_service import load_owned_chapter, load_owned_series, apply_publish
from qisati.services.metrics_service import increment_counter
from qisati.services.storage import Storage

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def resolve_edition_size(size: Union[int, str]) -> int:
    if size == "unlimited":
        return UNLIMITED_EDITION_SIZE
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise invalid_input("에디션 수량은 양의 정수 또는 'unlimited'여야 합니다.")
    return size


def validate_price(price: float) -> float:
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise invalid_input("가격은 숫자여야 합니다.")
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise invalid_input("가격은 0 이상이어야 합니다.")
    return value


def validate_splits(splits: Optional[List[Dict[str, Any]]]) -> Optional[List[Dict[str, Any]]]:
    """로열티 분배는 각 항목 > 0, 합계 100"""
    if splits is None:
        return None
    if not splits:
        raise invalid_input("로열티 분배 목록이 비어 있습니다.")
    total = 0.0
    for split in splits:
        pct = float(split.get("percentage", 0))
        if pct <= 0:
            raise invalid_input("로열티 비율은 0보다 커야 합니다.")
        if not split.get("address"):
            raise invalid_input("로열티 주소가 필요합니다.")
        total += pct
    if not math.isclose(total, 100.0, abs_tol=1e-6):
        raise invalid_input("로열티 비율 합계는 100이어야 합니다.")
    return splits


class MintLedger:
    def __init__(self, db: AsyncSession, chain: ChainClient):
        self.db = db
        self.chain = chain

    async def launch_series(
        self,
        principal: Principal,
        series_id: Union[str, uuid.UUID],
        contract: str,
        token_id: int = 0,
        tx_hash: Optional[str] = None,
    ) -> Series:
        """배포된 시리즈 코인을 시리즈에 연결. 이후 탐색 피드에 노출된다."""
        if not _ADDRESS_RE.match(contract or "") or contract.lower() == ZERO_ADDRESS:
            raise invalid_input("코인 컨트랙트 주소가 올바르지 않습니다.")
        if isinstance(token_id, bool) or not isinstance(token_id, int) or token_id < 0:
            raise invalid_input("토큰 ID는 0 이상의 정수여야 합니다.")

        series = await load_owned_series(self.db, principal, series_id)
        series.contract = contract
        series.coin_address = contract
        series.token_id = token_id
        self.db.add(PendingTx(
            hash=tx_hash or placeholder_tx_hash(),
            type="mintSeries",
            user_id=principal.user_id,
            series_id=series.id,
        ))
        await self.db.commit()
        await self.db.refresh(series)
        await increment_counter("series_launched")
        logger.info(f"[mint] series launched id={series.id} contract={contract}")
        return series

    async def mint_chapter(
        self,
        principal: Principal,
        chapter_id: Union[str, uuid.UUID],
        size: Union[int, str],
        price: float,
        splits: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """회차 민팅. 아직 공개 전이면 공개까지 함께 수행한다."""
        edition_size = resolve_edition_size(size)
        price_eth = validate_price(price)
        splits = validate_splits(splits)

        chapter, series = await load_owned_chapter(self.db, principal, chapter_id)
        needs_publish = chapter.status != STATUS_LIVE
        if needs_publish and not (chapter.draft_md or "").strip():
            raise QisatiError(ErrorKind.NO_DRAFT_TO_PUBLISH)

        try:
            receipt = await self.chain.mint_edition(
                contract=series.contract,
                size=edition_size,
                price_eth=price_eth,
                splits=splits,
            )
        except QisatiError:
            raise
        except Exception as e:
            logger.error(f"[mint] chain mint failed chapter={chapter.id}: {e}")
            raise QisatiError(ErrorKind.EXTERNAL_SERVICE_FAILURE, f"민팅 실패: {e}")

        if needs_publish:
            apply_publish(chapter)
        chapter.supply = edition_size
        chapter.remaining = edition_size
        chapter.price_eth = price_eth
        chapter.token_id = receipt.token_id
        chapter.status = STATUS_LIVE

        self.db.add(PendingTx(
            hash=receipt.tx_hash,
            type="mintChapter",
            user_id=principal.user_id,
            series_id=series.id,
            chapter_id=chapter.id,
        ))
        await self.db.commit()
        await self.db.refresh(chapter)
        edition = "unlimited" if edition_size == UNLIMITED_EDITION_SIZE else "limited"
        await increment_counter("chapter_minted", labels={"edition": edition})
        logger.info(f"[mint] chapter={chapter.id} token={receipt.token_id} size={edition_size} price={price_eth}")
        return {"success": True, "tx_hash": receipt.tx_hash, "token_id": receipt.token_id, "chapter": chapter}

    async def collect_chapter(
        self,
        principal: Principal,
        chapter_id: Union[str, uuid.UUID],
        tx_hash: Optional[str] = None,
    ) -> Dict[str, Any]:
        """에디션 1개 수집. remaining == 0이면 SoldOut, PendingTx는 남기지 않는다."""
        result = await self.db.execute(
            update(Chapter)
            .where(Chapter.id == chapter_id, Chapter.remaining > 0)
            .values(remaining=Chapter.remaining - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            exists = await self.db.scalar(select(Chapter.id).where(Chapter.id == chapter_id))
            if exists is None:
                raise not_found("회차")
            raise QisatiError(ErrorKind.SOLD_OUT)

        tx_hash = tx_hash or placeholder_tx_hash()
        self.db.add(PendingTx(
            hash=tx_hash,
            type="collect",
            user_id=principal.user_id,
            chapter_id=chapter_id,
        ))
        await self.db.commit()

        remaining = await self.db.scalar(select(Chapter.remaining).where(Chapter.id == chapter_id))
        await increment_counter("chapter_collected")
        return {"tx_hash": tx_hash, "remaining": remaining}

    async def record_pending_tx(
        self,
        principal: Principal,
        tx_hash: str,
        tx_type: str,
        series_id: Optional[uuid.UUID] = None,
        chapter_id: Optional[uuid.UUID] = None,
    ) -> PendingTx:
        """클라이언트가 제출한 트랜잭션 기록"""
        tx = PendingTx(
            hash=tx_hash,
            type=tx_type,
            user_id=principal.user_id,
            series_id=series_id,
            chapter_id=chapter_id,
        )
        self.db.add(tx)
        await self.db.commit()
        await self.db.refresh(tx)
        return tx

    async def list_pending_txs(self, principal: Principal) -> List[PendingTx]:
        result = await self.db.execute(
            select(PendingTx)
            .where(PendingTx.user_id == principal.user_id)
            .order_by(PendingTx.created_at.desc())
        )
        return list(result.scalars().all())

    async def clear_pending_tx(self, tx_hash: str) -> bool:
        tx = (await self.db.execute(
            select(PendingTx).where(PendingTx.hash == tx_hash)
        )).scalars().first()
        if tx is None:
            return False
        await self.db.delete(tx)
        await self.db.commit()
        return True

    async def withdraw_rewards(self, principal: Principal) -> Dict[str, Any]:
        # TODO: 체인 클라이언트에 withdraw 기능이 생기면 실제 정산 호출로 교체
        logger.info(f"[mint] withdrawal requested user={principal.user_id}")
        return {"ok": True}

    async def sync_active_tokens(self) -> int:
        """live 회차의 온체인 공급량을 읽어 remaining/가격 갱신 + 스냅샷 기록.

        회차별로 격리: 한 회차 실패는 로그만 남기고 다음 회차를 계속 처리한다.
        """
        rows = (await self.db.execute(
            select(Chapter, Series)
            .join(Series, Chapter.series_id == Series.id)
            .where(Chapter.status == STATUS_LIVE)
        )).all()

        synced = 0
        for chapter, series in rows:
            try:
                reading = await self.chain.read_supply(series.contract, chapter.token_id)
            except Exception as e:
                logger.warning(f"[chainsync] read_supply failed chapter={chapter.id}: {e}")
                continue
            if reading is None:
                continue
            chapter.remaining = max(0, min(reading.remaining, chapter.supply))
            chapter.price_eth = reading.price_eth
            self.db.add(TokenSnapshot(
                contract=series.contract,
                token_id=chapter.token_id,
                block=reading.block,
                remaining=reading.remaining,
                total_minted=reading.total_minted,
                price_eth=reading.price_eth,
            ))
            synced += 1
        await self.db.commit()
        logger.info(f"[chainsync] synced {synced}/{len(rows)} live chapters")
        return synced

    async def sync_pending_transactions(self) -> int:
        """영수증이 success인 대기 트랜잭션 정리"""
        txs = (await self.db.execute(select(PendingTx))).scalars().all()
        cleared = 0
        for tx in txs:
            try:
                status = await self.chain.get_receipt(tx.hash)
            except Exception as e:
                logger.warning(f"[chainsync] get_receipt failed hash={tx.hash}: {e}")
                continue
            if status == "success":
                await self.db.delete(tx)
                cleared += 1
        await self.db.commit()
        logger.info(f"[chainsync] cleared {cleared} pending transactions")
        return cleared


def coin_metadata(series: Series) -> Dict[str, Any]:
    """시리즈 코인 메타데이터 (ipfs:// URI로 코인 배포에 사용)"""
    return {
        "name": f"{series.title} Coin",
        "description": series.synopsis_md or "",
        "image": series.cover_url,
        "properties": {"category": series.category or DEFAULT_SERIES_CATEGORY},
    }


async def pin_series_metadata(
    db: AsyncSession,
    principal: Principal,
    series_id: Union[str, uuid.UUID],
    storage: Storage,
) -> Dict[str, str]:
    series = await load_owned_series(db, principal, series_id)
    stored = await storage.pin_json(coin_metadata(series), name=f"{series.slug}-coin")
    return {"content_id": stored.content_id, "url": stored.url, "uri": f"ipfs://{stored.content_id}"}
