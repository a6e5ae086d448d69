from datetime import datetime, timedelta

import pytest

from conftest import ALICE, BOB, auth_headers

pytestmark = pytest.mark.anyio


async def _login(client, address):
    response = await client.post(
        "/auth/login",
        json={"address": address, "signature": "valid-signature", "message": "Sign in to Qisati"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


async def test_login_me_logout(client):
    headers = await _login(client, ALICE)

    me = await client.get("/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["wallet_address"] == ALICE.lower()

    logout = await client.post("/auth/logout", headers=headers)
    assert logout.status_code == 204

    after = await client.get("/auth/me", headers=headers)
    assert after.status_code == 401
    assert after.json()["code"] == "Unauthenticated"


async def test_login_with_bad_signature(client):
    response = await client.post(
        "/auth/login", json={"address": ALICE, "signature": "forged", "message": "hi"}
    )
    assert response.status_code == 401
    assert response.json()["code"] == "Unauthenticated"


async def test_missing_or_garbage_token(client):
    assert (await client.get("/dashboard/")).status_code == 401
    response = await client.get("/dashboard/", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_expired_token_is_rejected(client, alice):
    headers = auth_headers(alice, expires_at=datetime.utcnow() - timedelta(minutes=1))
    assert (await client.get("/auth/me", headers=headers)).status_code == 401


async def test_lifecycle_over_http(client):
    author = await _login(client, ALICE)
    reader = await _login(client, BOB)

    series = await client.post("/series/", json={"title": "Test"}, headers=author)
    assert series.status_code == 201
    series_id = series.json()["id"]

    created = await client.post("/chapters/", json={"title": "Ch1", "series_id": series_id}, headers=author)
    assert created.status_code == 201
    chapter_id = created.json()["chapter_id"]

    foreign = await client.put(f"/series/{series_id}/title", json={"title": "Mine"}, headers=reader)
    assert foreign.status_code == 403
    assert foreign.json()["code"] == "Forbidden"

    empty_publish = await client.post(f"/chapters/{chapter_id}/publish", headers=author)
    assert empty_publish.status_code == 409
    assert empty_publish.json()["code"] == "NoDraftToPublish"

    saved = await client.put(f"/chapters/{chapter_id}/draft", json={"markdown": "# Hello"}, headers=author)
    assert saved.status_code == 200
    assert saved.json()["draft_md"] == "# Hello"

    published = await client.post(f"/chapters/{chapter_id}/publish", headers=author)
    assert published.json()["status"] == "live"
    assert published.json()["body_md"] == "# Hello"

    locked = await client.put(f"/series/{series_id}/title", json={"title": "Renamed"}, headers=author)
    assert locked.status_code == 409
    assert locked.json()["code"] == "SeriesLocked"

    minted = await client.post(
        f"/mint/chapters/{chapter_id}", json={"edition_size": 2, "price": 0.01}, headers=author
    )
    assert minted.status_code == 200, minted.text
    assert minted.json()["chapter"]["supply"] == 2

    for expected in (1, 0):
        collected = await client.post(f"/chapters/{chapter_id}/collect", headers=reader)
        assert collected.status_code == 200
        assert collected.json()["remaining"] == expected

    sold_out = await client.post(f"/chapters/{chapter_id}/collect", headers=reader)
    assert sold_out.status_code == 409
    assert sold_out.json()["code"] == "SoldOut"

    view = await client.get(f"/chapters/{chapter_id}")
    assert view.json()["content"] == "# Hello"
    assert view.json()["supply"] == {"current": 0, "total": 2}

    dashboard = await client.get("/dashboard/", headers=author)
    assert dashboard.json()["earnings"] == pytest.approx(0.02)

    pending = await client.get("/mint/pending", headers=reader)
    assert [tx["type"] for tx in pending.json()] == ["collect", "collect"]


async def test_mint_validation_over_http(client):
    author = await _login(client, ALICE)
    created = await client.post("/chapters/", json={"title": "Ch1"}, headers=author)
    chapter_id = created.json()["chapter_id"]
    await client.put(f"/chapters/{chapter_id}/draft", json={"markdown": "# Hi"}, headers=author)

    bad_splits = await client.post(
        f"/mint/chapters/{chapter_id}",
        json={"edition_size": "unlimited", "price": 0.01, "splits": [{"address": "0xabcd", "percentage": 50}]},
        headers=author,
    )
    assert bad_splits.status_code == 400
    assert bad_splits.json()["code"] == "InvalidInput"


async def test_audio_generation_over_http(client, speech):
    author = await _login(client, ALICE)
    created = await client.post("/chapters/", json={"title": "Ch1"}, headers=author)
    chapter_id = created.json()["chapter_id"]

    voice = await client.post("/character-voices/", json={"name": "Narrator", "voice_id": "nova"}, headers=author)
    assert voice.status_code == 200
    voice_id = voice.json()["id"]

    bad_voice = await client.post("/character-voices/", json={"name": "X", "voice_id": "robot"}, headers=author)
    assert bad_voice.status_code == 422

    result = await client.post(
        f"/audio/chapters/{chapter_id}",
        json={"dialogue_segments": [
            {"text": "Once upon a time", "character_id": voice_id, "start_index": 0, "end_index": 16},
        ]},
        headers=author,
    )
    assert result.status_code == 200
    assert result.json() == {
        "success": True, "generated_count": 1, "total_segments": 1, "remaining_generations": 9,
    }
    assert speech.calls == [("Once upon a time", "nova")]

    view = await client.get(f"/chapters/{chapter_id}")
    assert view.json()["audio_segments"][0]["audio_url"] == "https://ipfs.test/cid1"


async def test_explore_and_stats_over_http(client):
    author = await _login(client, ALICE)
    await client.post("/series/", json={"title": "Hidden"}, headers=author)

    feed = await client.get("/explore/")
    assert feed.status_code == 200
    assert feed.json()["items"] == []

    with_placeholders = await client.get("/explore/", params={"include_no_contract": "true"})
    assert [i["title"] for i in with_placeholders.json()["items"]] == ["Hidden"]

    stats = await client.get("/explore/stats")
    assert stats.json()["stories"] == "1"


async def test_profile_and_follow_over_http(client):
    alice_headers = await _login(client, ALICE)
    await _login(client, BOB)
    bob_handle = BOB.lower()[:6] + BOB.lower()[-4:]

    followed = await client.post(f"/users/{bob_handle}/follow", headers=alice_headers)
    assert followed.json() == {"following": True}

    profile = await client.get(f"/users/{bob_handle}")
    assert profile.status_code == 200
    assert profile.json()["follower_count"] == 1

    update = await client.patch("/users/me", json={"handle": "alice_pen"}, headers=alice_headers)
    assert update.json()["handle"] == "alice_pen"

    check = await client.get("/users/check-handle", params={"handle": bob_handle}, headers=alice_headers)
    assert check.json()["available"] is False

    assert (await client.get("/users/nobody_here")).status_code == 404


async def test_file_upload(client, storage):
    headers = await _login(client, ALICE)
    response = await client.post(
        "/files/upload",
        files={"file": ("cover.png", b"\x89PNG fake", "image/png")},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"content_id": "cid1", "url": "https://ipfs.test/cid1"}

    rejected = await client.post(
        "/files/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert rejected.status_code == 400


async def test_series_launch_over_http(client, storage):
    author = await _login(client, ALICE)
    reader = await _login(client, BOB)
    series_id = (await client.post("/series/", json={"title": "Coin Story"}, headers=author)).json()["id"]
    assert (await client.get("/explore/")).json()["total"] == 0

    metadata = await client.post(f"/series/{series_id}/coin-metadata", headers=author)
    assert metadata.status_code == 200
    assert metadata.json()["uri"] == "ipfs://cid1"

    coin = "0x" + "cd" * 20
    foreign = await client.put(f"/series/{series_id}/launch", json={"contract": coin}, headers=reader)
    assert foreign.status_code == 403

    malformed = await client.put(f"/series/{series_id}/launch", json={"contract": "0x12"}, headers=author)
    assert malformed.status_code == 422

    launched = await client.put(
        f"/series/{series_id}/launch", json={"contract": coin, "tx_hash": "0xdeploy"}, headers=author
    )
    assert launched.status_code == 200
    assert launched.json()["contract"] == coin
    assert launched.json()["coin_address"] == coin

    feed = await client.get("/explore/")
    assert feed.json()["total"] == 1
    assert feed.json()["items"][0]["title"] == "Coin Story"

    pending = await client.get("/mint/pending", headers=author)
    assert [(tx["type"], tx["hash"]) for tx in pending.json()] == [("mintSeries", "0xdeploy")]


async def test_pin_json_document(client, storage):
    headers = await _login(client, ALICE)
    response = await client.post("/files/json", json={"name": "Edition #1"}, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"content_id": "cid1", "url": "https://ipfs.test/cid1"}
    assert storage.objects["cid1"][2] == "application/json"

    assert (await client.post("/files/json", json={}, headers=headers)).status_code == 400
    assert (await client.post("/files/json", json={"name": "x"})).status_code == 401


async def test_wallet_session_is_the_only_identity_route(client):
    headers = await _login(client, ALICE)
    response = await client.post("/auth/link-wallet", json={"wallet_address": BOB}, headers=headers)
    assert response.status_code == 404
