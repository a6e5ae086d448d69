"""
회차 오디오 생성 서비스

대사 구간마다 합성 → 업로드를 수행한다. 구간 하나의 실패는 로그만 남기고 건너뛰며,
회차당 누적 생성 횟수는 MAX_AUDIO_GENERATIONS(10)를 넘지 않는다. AUDIO_GENERATION_LIMIT 설정은 더 낮추는 용도로만 쓰인다.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Dict, Any, Union
import logging
import uuid

from qisati.core.config import settings
from qisati.core.constants import MAX_AUDIO_GENERATIONS
from qisati.core.errors import QisatiError, ErrorKind
from qisati.core.security import Principal
from qisati.services.content_service import load_owned_chapter
from qisati.services.voice_service import list_character_voices
from qisati.services.speech_client import SpeechClient
from qisati.services.storage import Storage
from qisati.services.metrics_service import increment_counter

logger = logging.getLogger(__name__)


class AudioGenerationService:
    def __init__(self, db: AsyncSession, speech: SpeechClient, storage: Storage):
        self.db = db
        self.speech = speech
        self.storage = storage

    async def generate_chapter_audio(
        self,
        principal: Principal,
        chapter_id: Union[str, uuid.UUID],
        segments: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        limit = min(settings.AUDIO_GENERATION_LIMIT, MAX_AUDIO_GENERATIONS)
        chapter, _ = await load_owned_chapter(self.db, principal, chapter_id)

        prior = chapter.audio_generation_count or 0
        if prior >= limit:
            raise QisatiError(ErrorKind.GENERATION_LIMIT_REACHED)

        voices = await list_character_voices(self.db, principal)
        voice_map = {str(v.id): v for v in voices}

        audio_segments: List[Dict[str, Any]] = []
        generated = 0
        for position, segment in enumerate(segments):
            if prior + generated >= limit:
                logger.info(f"[audio] generation limit reached chapter={chapter.id}, stopping")
                break

            voice = voice_map.get(str(segment["character_id"]))
            if voice is None:
                logger.info(f"[audio] no voice for character {segment['character_id']}, skipping")
                continue

            try:
                audio = await self.speech.synthesize(segment["text"], voice.voice_id, voice.instructions)
                stored = await self.storage.save(
                    audio,
                    filename=f"audio-{chapter.id}-{generated}.mp3",
                    content_type="audio/mpeg",
                )
            except Exception as e:
                logger.error(f"[audio] segment {position} failed chapter={chapter.id}: {e}")
                continue

            audio_segments.append({
                "text": segment["text"],
                "audio_url": stored.url,
                "character_id": str(segment["character_id"]),
                "start_index": segment["start_index"],
                "end_index": segment["end_index"],
            })
            generated += 1

        # 이번 배치 결과로 교체 (누적 횟수는 유지)
        chapter.audio_segments = audio_segments
        chapter.audio_generation_count = prior + generated
        await self.db.commit()

        if generated:
            await increment_counter("audio_segments_generated")
        return {
            "success": True,
            "generated_count": generated,
            "total_segments": len(audio_segments),
            "remaining_generations": limit - (prior + generated),
        }
