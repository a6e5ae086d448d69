import os
import tempfile

# 앱/설정 임포트 전에 테스트 환경 고정
_TEST_DIR = tempfile.mkdtemp(prefix="qisati-test-")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["UPLOAD_DIRECTORY"] = os.path.join(_TEST_DIR, "uploads")
# 도달 불가 Redis: 메트릭 카운터는 조용히 실패한다
os.environ["REDIS_URL"] = "redis://127.0.0.1:1/0"

import pytest
from httpx import AsyncClient, ASGITransport

from qisati.core.database import engine, AsyncSessionLocal, Base
from qisati.core.security import Principal, create_session_token
from qisati.services import session_service, user_service
from qisati.services.chain_client import ChainClient, MintReceipt, SupplyReading
from qisati.services.signature_service import SignatureVerifier
from qisati.services.speech_client import SpeechClient
from qisati.services.storage import Storage, StoredObject
import qisati.models  # noqa: F401

ALICE = "0xAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAa"
BOB = "0xBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBb"


class FakeVerifier(SignatureVerifier):
    def verify(self, address, message, signature):
        return signature == "valid-signature"


class FakeChain(ChainClient):
    def __init__(self):
        self.minted = []
        self.supply = {}
        self.receipts = {}
        self.fail_mint = False

    async def mint_edition(self, *, contract, size, price_eth, splits=None):
        if self.fail_mint:
            raise RuntimeError("rpc unavailable")
        token_id = 100 + len(self.minted)
        self.minted.append({"contract": contract, "size": size, "price_eth": price_eth, "splits": splits})
        return MintReceipt(token_id=token_id, tx_hash=f"0xmint{token_id}")

    async def read_supply(self, contract, token_id):
        return self.supply.get(token_id)

    async def get_receipt(self, tx_hash):
        return self.receipts.get(tx_hash, "pending")


class FakeSpeech(SpeechClient):
    def __init__(self):
        self.calls = []

    async def synthesize(self, text, voice_id, instructions=None):
        self.calls.append((text, voice_id))
        if text.startswith("FAIL"):
            raise RuntimeError("synthesis failed")
        return f"mp3:{voice_id}:{text}".encode()


class MemoryStorage(Storage):
    def __init__(self):
        self.objects = {}

    async def save(self, data, *, filename=None, content_type=None):
        content_id = f"cid{len(self.objects) + 1}"
        self.objects[content_id] = (data, filename, content_type)
        return StoredObject(content_id=content_id, url=f"https://ipfs.test/{content_id}")


class FakeRedis:
    def __init__(self):
        self.counters = {}

    async def incr(self, key):
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def expire(self, key, seconds):
        return True


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    import qisati.core.database as database
    fake = FakeRedis()
    monkeypatch.setattr(database, "redis_client", fake)
    return fake


@pytest.fixture
async def db(anyio_backend):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def speech():
    return FakeSpeech()


@pytest.fixture
def storage():
    return MemoryStorage()


async def sign_in_as(db, address) -> Principal:
    """서명 검증을 건너뛰고 사용자 + 세션 생성"""
    user = await user_service.ensure_user(db, address)
    session = await session_service.create_session(db, user)
    return Principal(user_id=user.id, wallet_address=session.wallet_address, session_id=session.id)


def auth_headers(principal: Principal, expires_at=None):
    from datetime import datetime, timedelta
    token = create_session_token(principal.session_id, expires_at or datetime.utcnow() + timedelta(days=1))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def alice(db):
    return await sign_in_as(db, ALICE)


@pytest.fixture
async def bob(db):
    return await sign_in_as(db, BOB)


@pytest.fixture
async def client(db, chain, speech, storage):
    from qisati.main import app
    from qisati.dependencies import (
        get_chain_client,
        get_signature_verifier,
        get_speech_client,
        get_storage,
    )

    app.dependency_overrides[get_chain_client] = lambda: chain
    app.dependency_overrides[get_signature_verifier] = lambda: FakeVerifier()
    app.dependency_overrides[get_speech_client] = lambda: speech
    app.dependency_overrides[get_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
