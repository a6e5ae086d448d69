"""
온체인 공급량/대기 트랜잭션 동기화 스크립트 (cron 등에서 주기 실행)

    python -m qisati.scripts.sync_chain
"""

import asyncio
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))

from qisati.core.database import AsyncSessionLocal
from qisati.services.chain_client import ChainClient, get_chain_client
from qisati.services.explore_service import snapshot_metrics
from qisati.services.mint_service import MintLedger

logger = logging.getLogger(__name__)


async def run_sync(chain: ChainClient) -> dict:
    async with AsyncSessionLocal() as db:
        ledger = MintLedger(db, chain)
        synced = await ledger.sync_active_tokens()
        cleared = await ledger.sync_pending_transactions()
        snapshot = await snapshot_metrics(db)
    return {
        "synced_tokens": synced,
        "cleared_transactions": cleared,
        "total_series": snapshot.total_series,
        "total_chapters": snapshot.total_chapters,
    }


def main():
    logging.basicConfig(level=logging.INFO)
    result = asyncio.run(run_sync(get_chain_client()))
    logger.info(f"✅ 체인 동기화 완료: {result}")


if __name__ == "__main__":
    main()
