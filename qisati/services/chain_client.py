"""
온체인 협력자 인터페이스

실제 체인 연동 전까지는 PlaceholderChainClient가 토큰 id/트랜잭션 해시를 합성한다.
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any
import logging
import random
import secrets

logger = logging.getLogger(__name__)


@dataclass
class MintReceipt:
    token_id: int
    tx_hash: str


@dataclass
class SupplyReading:
    remaining: int
    total_minted: int
    price_eth: float
    block: int


class ChainClient:
    async def mint_edition(
        self,
        *,
        contract: str,
        size: int,
        price_eth: float,
        splits: Optional[List[Dict[str, Any]]] = None,
    ) -> MintReceipt:
        raise NotImplementedError

    async def read_supply(self, contract: str, token_id: int) -> Optional[SupplyReading]:
        raise NotImplementedError

    async def get_receipt(self, tx_hash: str) -> str:
        """'success' | 'failed' | 'pending'"""
        raise NotImplementedError


def placeholder_tx_hash() -> str:
    return "0x" + secrets.token_hex(32)


class PlaceholderChainClient(ChainClient):
    async def mint_edition(self, *, contract, size, price_eth, splits=None) -> MintReceipt:
        receipt = MintReceipt(token_id=random.randint(1000, 10999), tx_hash=placeholder_tx_hash())
        logger.info(f"[chain] placeholder mint contract={contract} token={receipt.token_id} size={size}")
        return receipt

    async def read_supply(self, contract: str, token_id: int) -> Optional[SupplyReading]:
        # 실제 공급량을 알 수 없으므로 동기화 대상에서 제외
        return None

    async def get_receipt(self, tx_hash: str) -> str:
        return "pending"


def get_chain_client() -> ChainClient:
    return PlaceholderChainClient()
