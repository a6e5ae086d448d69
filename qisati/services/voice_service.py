"""
캐릭터 보이스 서비스
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Union, List
import uuid

from qisati.core.errors import not_found
from qisati.core.security import Principal, require_owner
from qisati.models.character_voice import CharacterVoice


async def list_character_voices(db: AsyncSession, principal: Principal) -> List[CharacterVoice]:
    result = await db.execute(
        select(CharacterVoice)
        .where(CharacterVoice.user_id == principal.user_id)
        .order_by(CharacterVoice.created_at.asc())
    )
    return list(result.scalars().all())


async def get_owned_voice(
    db: AsyncSession, principal: Principal, character_id: Union[str, uuid.UUID]
) -> CharacterVoice:
    voice = await db.get(CharacterVoice, character_id)
    if voice is None:
        raise not_found("캐릭터")
    require_owner(principal, voice.user_id)
    return voice


async def save_character_voice(
    db: AsyncSession,
    principal: Principal,
    name: str,
    voice_id: str,
    instructions: Optional[str] = None,
    description: Optional[str] = None,
    character_id: Optional[Union[str, uuid.UUID]] = None,
) -> CharacterVoice:
    """character_id가 있으면 본인 캐릭터 수정, 없으면 생성"""
    if character_id is not None:
        voice = await get_owned_voice(db, principal, character_id)
        voice.name = name
        voice.voice_id = voice_id
        voice.instructions = instructions
        voice.description = description
    else:
        voice = CharacterVoice(
            user_id=principal.user_id,
            name=name,
            voice_id=voice_id,
            instructions=instructions,
            description=description,
        )
        db.add(voice)
    await db.commit()
    await db.refresh(voice)
    return voice


async def delete_character_voice(
    db: AsyncSession, principal: Principal, character_id: Union[str, uuid.UUID]
) -> None:
    voice = await get_owned_voice(db, principal, character_id)
    await db.delete(voice)
    await db.commit()
