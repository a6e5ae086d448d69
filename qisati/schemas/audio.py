"""
캐릭터 보이스/오디오 생성 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid

from qisati.core.constants import VoiceId


class CharacterVoiceSave(BaseModel):
    """생성 또는 수정 (character_id가 있으면 수정)"""
    name: str = Field(..., min_length=1, max_length=100)
    voice_id: VoiceId
    instructions: Optional[str] = None
    description: Optional[str] = None
    character_id: Optional[uuid.UUID] = None


class CharacterVoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    voice_id: VoiceId
    instructions: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class DialogueSegment(BaseModel):
    text: str = Field(..., min_length=1, max_length=4096)
    character_id: str
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)


class AudioGenerationRequest(BaseModel):
    dialogue_segments: List[DialogueSegment]


class AudioGenerationResult(BaseModel):
    success: bool = True
    generated_count: int
    total_segments: int
    remaining_generations: int


class UploadResponse(BaseModel):
    content_id: str
    url: str
