import os

import pytest

from qisati.services.chain_client import PlaceholderChainClient
from qisati.services.signature_service import EthSignatureVerifier
from qisati.services.storage import LocalStorage, PinataStorage

pytestmark = pytest.mark.anyio


async def test_local_storage_writes_under_upload_dir(anyio_backend, tmp_path):
    storage = LocalStorage(base_dir=str(tmp_path), public_base="/static/")
    stored = await storage.save(b"ID3 audio", filename="segment.mp3", content_type="audio/mpeg")

    assert stored.content_id.endswith(".mp3")
    assert stored.url == f"/static/{stored.content_id}"
    with open(os.path.join(tmp_path, stored.content_id), "rb") as f:
        assert f.read() == b"ID3 audio"


async def test_local_storage_infers_extension_from_content_type(anyio_backend, tmp_path):
    stored = await LocalStorage(base_dir=str(tmp_path)).save(b"\x89PNG", content_type="image/png")
    assert stored.content_id.endswith(".png")


def test_pinata_storage_requires_jwt():
    with pytest.raises(RuntimeError):
        PinataStorage(jwt="", api_url="https://api.pinata.test", gateway_url="https://gw.test/ipfs")


async def test_placeholder_chain_client(anyio_backend):
    chain = PlaceholderChainClient()
    receipt = await chain.mint_edition(contract="0x" + "0" * 40, size=10, price_eth=0.01)
    assert receipt.tx_hash.startswith("0x") and len(receipt.tx_hash) == 66
    assert 1000 <= receipt.token_id <= 10999
    assert await chain.read_supply("0x", receipt.token_id) is None
    assert await chain.get_receipt(receipt.tx_hash) == "pending"


def test_eth_signature_verifier_round_trip():
    from eth_account import Account
    from eth_account.messages import encode_defunct

    account = Account.create()
    message = "Sign in to Qisati"
    signed = Account.sign_message(encode_defunct(text=message), private_key=account.key)
    signature = "0x" + bytes(signed.signature).hex()

    verifier = EthSignatureVerifier()
    assert verifier.verify(account.address.lower(), message, signature) is True
    assert verifier.verify(account.address, "different message", signature) is False
    assert verifier.verify(account.address, message, "0xdeadbeef") is False


async def test_local_storage_pins_json(anyio_backend, tmp_path):
    import json

    stored = await LocalStorage(base_dir=str(tmp_path)).pin_json({"name": "Coin", "image": "ipfs://x"}, name="story-coin")
    assert stored.content_id.endswith(".json")
    with open(os.path.join(tmp_path, stored.content_id), encoding="utf-8") as f:
        assert json.load(f) == {"name": "Coin", "image": "ipfs://x"}


def test_pinata_json_endpoint_follows_file_endpoint():
    storage = PinataStorage(
        jwt="token",
        api_url="https://api.pinata.test/pinning/pinFileToIPFS",
        gateway_url="https://gw.test/ipfs",
    )
    assert storage.json_api_url == "https://api.pinata.test/pinning/pinJSONToIPFS"
    assert storage.gateway_url == "https://gw.test/ipfs/"


def test_upload_dir_prefers_setting(tmp_path, monkeypatch):
    from qisati.core.config import settings
    from qisati.services.storage import get_upload_dir

    target = tmp_path / "media"
    monkeypatch.setattr(settings, "UPLOAD_DIRECTORY", str(target))
    assert get_upload_dir() == str(target)
    assert target.is_dir()
