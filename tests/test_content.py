import pytest
from sqlalchemy import select

from conftest import ALICE, BOB, sign_in_as
from qisati.core.constants import ZERO_ADDRESS, DEFAULT_SERIES_TITLE
from qisati.core.errors import QisatiError, ErrorKind
from qisati.models import Chapter, Series
from qisati.services import content_service

pytestmark = pytest.mark.anyio


async def test_create_chapter_without_series_creates_default_series(db, alice):
    result = await content_service.create_chapter(db, alice, "Ch1")

    series = await db.get(Series, result["series_id"])
    chapter = await db.get(Chapter, result["chapter_id"])
    assert series.author_id == alice.user_id
    assert series.title == DEFAULT_SERIES_TITLE
    assert series.contract == ZERO_ADDRESS
    assert series.category == "literary"
    assert series.slug.startswith("untitled-")
    assert (chapter.index, chapter.status, chapter.supply, chapter.remaining) == (1, "draft", 100, 100)
    assert chapter.price_eth == pytest.approx(0.002)
    assert chapter.word_count == 0


async def test_create_chapter_appends_index(db, alice):
    series = await content_service.create_series(db, alice, "Test")
    first = await content_service.create_chapter(db, alice, "Ch1", series.id)
    second = await content_service.create_chapter(db, alice, "Ch2", series.id)

    indexes = (await db.execute(
        select(Chapter.index).where(Chapter.series_id == series.id).order_by(Chapter.index)
    )).scalars().all()
    assert indexes == [1, 2]
    assert first["series_id"] == second["series_id"] == series.id


async def test_create_chapter_in_foreign_series_is_forbidden(db, alice, bob):
    series = await content_service.create_series(db, alice, "Test")
    with pytest.raises(QisatiError) as exc:
        await content_service.create_chapter(db, bob, "Intruder", series.id)
    assert exc.value.kind == ErrorKind.FORBIDDEN


async def test_create_draft_chapter_uses_next_index_title(db, alice):
    series = await content_service.create_series(db, alice, "Test")
    await content_service.create_chapter(db, alice, "Ch1", series.id)
    draft = await content_service.create_draft_chapter(db, alice, series.id)
    assert draft.index == 2
    assert draft.title == "Untitled 2"
    assert draft.status == "draft"


async def test_save_draft_updates_word_count(db, alice):
    created = await content_service.create_chapter(db, alice, "Ch1")
    chapter = await content_service.save_draft(db, alice, created["chapter_id"], "# Hello brave new world")
    assert chapter.draft_md == "# Hello brave new world"
    assert chapter.word_count == 4
    assert chapter.status == "draft"


async def test_save_draft_identical_text_is_noop(db, alice, monkeypatch):
    created = await content_service.create_chapter(db, alice, "Ch1")
    await content_service.save_draft(db, alice, created["chapter_id"], "# Hello")

    commits = []
    original_commit = db.commit

    async def counting_commit():
        commits.append(1)
        await original_commit()

    monkeypatch.setattr(db, "commit", counting_commit)
    chapter = await content_service.save_draft(db, alice, created["chapter_id"], "# Hello")

    assert chapter.draft_md == "# Hello"
    assert commits == []


async def test_save_draft_requires_owner(db, alice, bob):
    created = await content_service.create_chapter(db, alice, "Ch1")
    with pytest.raises(QisatiError) as exc:
        await content_service.save_draft(db, bob, created["chapter_id"], "hijack")
    assert exc.value.kind == ErrorKind.FORBIDDEN

    chapter = await db.get(Chapter, created["chapter_id"])
    assert chapter.draft_md == ""


@pytest.mark.parametrize("draft", ["", "   \n\t"])
async def test_publish_without_draft_fails_and_keeps_status(db, alice, draft):
    created = await content_service.create_chapter(db, alice, "Ch1")
    if draft:
        await content_service.save_draft(db, alice, created["chapter_id"], draft)

    with pytest.raises(QisatiError) as exc:
        await content_service.publish_chapter(db, alice, created["chapter_id"])
    assert exc.value.kind == ErrorKind.NO_DRAFT_TO_PUBLISH

    chapter = (await db.execute(
        select(Chapter).where(Chapter.id == created["chapter_id"]).execution_options(populate_existing=True)
    )).scalar_one()
    assert chapter.status == "draft"


async def test_publish_moves_draft_to_body(db, alice):
    created = await content_service.create_chapter(db, alice, "Ch1")
    await content_service.save_draft(db, alice, created["chapter_id"], "# Hello")

    chapter = await content_service.publish_chapter(db, alice, created["chapter_id"])
    assert chapter.status == "live"
    assert chapter.body_md == "# Hello"
    assert chapter.draft_md is None


async def test_publish_is_owner_only(db, alice, bob):
    created = await content_service.create_chapter(db, alice, "Ch1")
    await content_service.save_draft(db, alice, created["chapter_id"], "# Hello")
    with pytest.raises(QisatiError) as exc:
        await content_service.publish_chapter(db, bob, created["chapter_id"])
    assert exc.value.kind == ErrorKind.FORBIDDEN


async def test_series_title_locks_after_first_live_chapter(db, alice):
    series = await content_service.create_series(db, alice, "Test")
    created = await content_service.create_chapter(db, alice, "Ch1", series.id)

    renamed = await content_service.update_series_title(db, alice, series.id, "Renamed")
    assert renamed.title == "Renamed"

    await content_service.save_draft(db, alice, created["chapter_id"], "# Hello")
    await content_service.publish_chapter(db, alice, created["chapter_id"])

    for title in ("Again", "Renamed", ""):
        with pytest.raises(QisatiError) as exc:
            await content_service.update_series_title(db, alice, series.id, title)
        assert exc.value.kind == ErrorKind.SERIES_LOCKED


async def test_two_users_update_series_title(db):
    author = await sign_in_as(db, ALICE)
    stranger = await sign_in_as(db, BOB)
    series = await content_service.create_series(db, author, "Test")
    await content_service.create_chapter(db, author, "Ch1", series.id)

    with pytest.raises(QisatiError) as exc:
        await content_service.update_series_title(db, stranger, series.id, "Stolen")
    assert exc.value.kind == ErrorKind.FORBIDDEN

    updated = await content_service.update_series_title(db, author, series.id, "Mine")
    assert updated.title == "Mine"


async def test_forbidden_is_reported_before_lock(db, alice, bob):
    series = await content_service.create_series(db, alice, "Test")
    created = await content_service.create_chapter(db, alice, "Ch1", series.id)
    await content_service.save_draft(db, alice, created["chapter_id"], "# Hello")
    await content_service.publish_chapter(db, alice, created["chapter_id"])

    with pytest.raises(QisatiError) as exc:
        await content_service.update_series_title(db, bob, series.id, "Stolen")
    assert exc.value.kind == ErrorKind.FORBIDDEN


async def test_series_settings_are_not_locked(db, alice):
    series = await content_service.create_series(db, alice, "Test")
    created = await content_service.create_chapter(db, alice, "Ch1", series.id)
    await content_service.save_draft(db, alice, created["chapter_id"], "# Hello")
    await content_service.publish_chapter(db, alice, created["chapter_id"])

    updated = await content_service.update_series_settings(
        db, alice, series.id, logline="A new hook", category="fantasy", title="ignored"
    )
    assert updated.logline == "A new hook"
    assert updated.category == "fantasy"
    assert updated.title == "Test"


async def test_update_chapter_title(db, alice, bob):
    created = await content_service.create_chapter(db, alice, "Ch1")
    chapter = await content_service.update_chapter_title(db, alice, created["chapter_id"], "Prologue")
    assert chapter.title == "Prologue"

    with pytest.raises(QisatiError) as exc:
        await content_service.update_chapter_title(db, bob, created["chapter_id"], "Nope")
    assert exc.value.kind == ErrorKind.FORBIDDEN


async def test_missing_chapter_is_not_found(db, alice):
    import uuid
    with pytest.raises(QisatiError) as exc:
        await content_service.publish_chapter(db, alice, uuid.uuid4())
    assert exc.value.kind == ErrorKind.NOT_FOUND
