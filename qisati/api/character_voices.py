"""
캐릭터 보이스 API
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from qisati.core.database import get_db
from qisati.core.security import Principal, get_current_principal
from qisati.schemas.audio import CharacterVoiceSave, CharacterVoiceResponse
from qisati.services import voice_service

router = APIRouter()


@router.get("/", response_model=List[CharacterVoiceResponse])
async def list_character_voices(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await voice_service.list_character_voices(db, principal)


@router.post("/", response_model=CharacterVoiceResponse)
async def save_character_voice(
    request: CharacterVoiceSave,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """생성 또는 수정 (character_id 지정 시 수정)"""
    return await voice_service.save_character_voice(
        db,
        principal,
        name=request.name,
        voice_id=request.voice_id,
        instructions=request.instructions,
        description=request.description,
        character_id=request.character_id,
    )


@router.delete("/{character_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_character_voice(
    character_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    await voice_service.delete_character_voice(db, principal, character_id)
