from datetime import datetime, timedelta

import pytest
from sqlalchemy import select, func

from conftest import ALICE, FakeVerifier, sign_in_as
from qisati.core.errors import QisatiError, ErrorKind
from qisati.core.security import create_session_token, decode_session_token, require_owner
from qisati.models import User, WalletSession
from qisati.services import session_service, user_service

pytestmark = pytest.mark.anyio


async def test_sign_in_creates_user_once(db):
    first = await session_service.sign_in(db, FakeVerifier(), ALICE, "valid-signature", "Sign in to Qisati")
    second = await session_service.sign_in(db, FakeVerifier(), ALICE.lower(), "valid-signature", "Sign in to Qisati")

    assert first["user"].id == second["user"].id
    assert first["session_id"] != second["session_id"]
    assert first["user"].wallet_address == ALICE.lower()
    assert first["user"].handle == ALICE.lower()[:6] + ALICE.lower()[-4:]
    assert await db.scalar(select(func.count()).select_from(User)) == 1


async def test_sign_in_rejects_bad_signature(db):
    with pytest.raises(QisatiError) as exc:
        await session_service.sign_in(db, FakeVerifier(), ALICE, "forged", "Sign in to Qisati")
    assert exc.value.kind == ErrorKind.UNAUTHENTICATED
    assert await db.scalar(select(func.count()).select_from(User)) == 0


async def test_wallet_lookup_is_read_only(db):
    assert await user_service.get_user_by_wallet(db, ALICE) is None
    assert await db.scalar(select(func.count()).select_from(User)) == 0


async def test_resolve_session_and_principal(db):
    principal = await sign_in_as(db, ALICE)
    session = await session_service.resolve_session(db, principal.session_id)
    assert session.user_id == principal.user_id

    resolved = await session_service.resolve_principal(db, principal.session_id)
    assert resolved == principal


async def test_expired_session_is_rejected(db):
    principal = await sign_in_as(db, ALICE)
    session = await db.get(WalletSession, principal.session_id)
    session.expires_at = datetime.utcnow() - timedelta(seconds=1)
    await db.commit()

    with pytest.raises(QisatiError) as exc:
        await session_service.resolve_session(db, principal.session_id)
    assert exc.value.kind == ErrorKind.UNAUTHENTICATED

    # 만료 조회는 연장하지 않는다
    await db.refresh(session)
    assert session.expires_at < datetime.utcnow()


async def test_revoked_session_is_rejected(db):
    principal = await sign_in_as(db, ALICE)
    await session_service.revoke_session(db, principal.session_id)

    with pytest.raises(QisatiError) as exc:
        await session_service.resolve_principal(db, principal.session_id)
    assert exc.value.kind == ErrorKind.UNAUTHENTICATED


async def test_session_token_round_trip(db):
    principal = await sign_in_as(db, ALICE)
    token = create_session_token(principal.session_id, datetime.utcnow() + timedelta(hours=1))
    assert decode_session_token(token) == principal.session_id
    assert decode_session_token(token + "x") is None
    assert decode_session_token("not-a-token") is None


async def test_require_owner(db):
    principal = await sign_in_as(db, ALICE)
    require_owner(principal, principal.user_id)
    require_owner(principal, str(principal.user_id))
    with pytest.raises(QisatiError) as exc:
        require_owner(principal, None)
    assert exc.value.kind == ErrorKind.FORBIDDEN


async def test_default_handle_collision_uses_longer_candidate(db):
    other = "0xaaaaaa0000000000000000000000000000bbbbaaaa"
    first = await user_service.ensure_user(db, "0xaaaaaa1111111111111111111111111111111aaaa")
    second = await user_service.ensure_user(db, other)

    assert first.handle == "0xaaaaaaaa"
    assert second.handle == other[:8] + other[-6:]
