from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qisati.core.database import get_db, get_redis
from qisati.services.chain_client import ChainClient, get_chain_client
from qisati.services.mint_service import MintLedger
from qisati.services.signature_service import get_signature_verifier
from qisati.services.speech_client import get_speech_client
from qisati.services.storage import get_storage

# 외부 협력자 의존성을 한 곳에 모아 둔다. 테스트는 app.dependency_overrides로 교체한다.


def get_ledger(
    db: AsyncSession = Depends(get_db),
    chain: ChainClient = Depends(get_chain_client),
) -> MintLedger:
    return MintLedger(db, chain)


__all__ = [
    "get_db",
    "get_redis",
    "get_chain_client",
    "get_ledger",
    "get_signature_verifier",
    "get_speech_client",
    "get_storage",
]
