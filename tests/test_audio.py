import uuid

import pytest

from qisati.core.errors import QisatiError, ErrorKind
from qisati.models import Chapter
from qisati.services import content_service, voice_service
from qisati.services.audio_service import AudioGenerationService

pytestmark = pytest.mark.anyio


async def _chapter_with_count(db, principal, count=0):
    created = await content_service.create_chapter(db, principal, "Ch1")
    chapter = await db.get(Chapter, created["chapter_id"])
    chapter.audio_generation_count = count
    await db.commit()
    return chapter.id


def _segment(text, character_id, start=0):
    return {"text": text, "character_id": str(character_id), "start_index": start, "end_index": start + len(text)}


async def test_generation_respects_remaining_budget_and_skips_unmapped(db, alice, speech, storage):
    narrator = await voice_service.save_character_voice(db, alice, "Narrator", "alloy")
    hero = await voice_service.save_character_voice(db, alice, "Hero", "onyx", instructions="Calm and low")
    chapter_id = await _chapter_with_count(db, alice, count=1)

    segments = []
    for i in range(12):
        if i == 3:
            segments.append(_segment(f"line {i}", uuid.uuid4(), start=i * 10))
        else:
            speaker = narrator if i % 2 else hero
            segments.append(_segment(f"line {i}", speaker.id, start=i * 10))

    service = AudioGenerationService(db, speech, storage)
    result = await service.generate_chapter_audio(alice, chapter_id, segments)

    assert result["success"] is True
    assert result["generated_count"] == 9
    assert result["total_segments"] == 9
    assert result["remaining_generations"] == 10 - (1 + result["generated_count"])
    assert len(speech.calls) == 9
    assert "line 3" not in [text for text, _ in speech.calls]

    chapter = await db.get(Chapter, chapter_id)
    await db.refresh(chapter)
    assert chapter.audio_generation_count == 10
    assert len(chapter.audio_segments) == 9
    assert chapter.audio_segments[0]["audio_url"].startswith("https://ipfs.test/")
    assert chapter.audio_segments[0]["character_id"] == str(hero.id)


async def test_failed_segment_is_isolated(db, alice, speech, storage):
    voice = await voice_service.save_character_voice(db, alice, "Narrator", "sage")
    chapter_id = await _chapter_with_count(db, alice)

    segments = [
        _segment("first", voice.id),
        _segment("FAIL second", voice.id),
        _segment("third", voice.id),
    ]
    result = await AudioGenerationService(db, speech, storage).generate_chapter_audio(alice, chapter_id, segments)

    assert result["generated_count"] == 2
    assert result["remaining_generations"] == 8
    assert len(speech.calls) == 3
    assert len(storage.objects) == 2


async def test_limit_reached_raises(db, alice, speech, storage):
    voice = await voice_service.save_character_voice(db, alice, "Narrator", "sage")
    chapter_id = await _chapter_with_count(db, alice, count=10)

    with pytest.raises(QisatiError) as exc:
        await AudioGenerationService(db, speech, storage).generate_chapter_audio(
            alice, chapter_id, [_segment("hello", voice.id)]
        )
    assert exc.value.kind == ErrorKind.GENERATION_LIMIT_REACHED
    assert speech.calls == []


async def test_generation_is_owner_only(db, alice, bob, speech, storage):
    chapter_id = await _chapter_with_count(db, alice)
    with pytest.raises(QisatiError) as exc:
        await AudioGenerationService(db, speech, storage).generate_chapter_audio(bob, chapter_id, [])
    assert exc.value.kind == ErrorKind.FORBIDDEN


async def test_character_voice_crud(db, alice, bob):
    voice = await voice_service.save_character_voice(db, alice, "Villain", "echo", description="Menacing")
    updated = await voice_service.save_character_voice(
        db, alice, "Villain", "ballad", instructions="Whisper", character_id=voice.id
    )
    assert updated.id == voice.id
    assert updated.voice_id == "ballad"
    assert [v.name for v in await voice_service.list_character_voices(db, alice)] == ["Villain"]
    assert await voice_service.list_character_voices(db, bob) == []

    with pytest.raises(QisatiError) as exc:
        await voice_service.save_character_voice(db, bob, "Thief", "alloy", character_id=voice.id)
    assert exc.value.kind == ErrorKind.FORBIDDEN
    with pytest.raises(QisatiError) as exc:
        await voice_service.delete_character_voice(db, bob, voice.id)
    assert exc.value.kind == ErrorKind.FORBIDDEN

    await voice_service.delete_character_voice(db, alice, voice.id)
    assert await voice_service.list_character_voices(db, alice) == []


async def test_generation_limit_setting_cannot_raise_ceiling(db, alice, speech, storage, monkeypatch):
    from qisati.core.config import settings
    monkeypatch.setattr(settings, "AUDIO_GENERATION_LIMIT", 50)

    voice = await voice_service.save_character_voice(db, alice, "Narrator", "nova")
    chapter_id = await _chapter_with_count(db, alice, count=10)

    with pytest.raises(QisatiError) as exc:
        await AudioGenerationService(db, speech, storage).generate_chapter_audio(
            alice, chapter_id, [_segment("one more", voice.id)]
        )
    assert exc.value.kind == ErrorKind.GENERATION_LIMIT_REACHED
    assert speech.calls == []


async def test_generation_limit_setting_can_lower_ceiling(db, alice, speech, storage, monkeypatch):
    from qisati.core.config import settings
    monkeypatch.setattr(settings, "AUDIO_GENERATION_LIMIT", 3)

    voice = await voice_service.save_character_voice(db, alice, "Narrator", "nova")
    chapter_id = await _chapter_with_count(db, alice)

    result = await AudioGenerationService(db, speech, storage).generate_chapter_audio(
        alice, chapter_id, [_segment(f"line {i}", voice.id, start=i * 10) for i in range(5)]
    )
    assert result["generated_count"] == 3
    assert result["remaining_generations"] == 0
