"""
회차 오디오 생성 API
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from qisati.core.database import get_db
from qisati.core.security import Principal, get_current_principal
from qisati.dependencies import get_speech_client, get_storage
from qisati.schemas.audio import AudioGenerationRequest, AudioGenerationResult
from qisati.services.audio_service import AudioGenerationService
from qisati.services.speech_client import SpeechClient
from qisati.services.storage import Storage

router = APIRouter()


@router.post("/chapters/{chapter_id}", response_model=AudioGenerationResult)
async def generate_chapter_audio(
    chapter_id: uuid.UUID,
    request: AudioGenerationRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    speech: SpeechClient = Depends(get_speech_client),
    storage: Storage = Depends(get_storage),
):
    """대사 구간별 음성 생성 (회차당 최대 10회, 구간별 실패 격리)"""
    service = AudioGenerationService(db, speech, storage)
    segments = [s.model_dump() for s in request.dialogue_segments]
    return await service.generate_chapter_audio(principal, chapter_id, segments)
