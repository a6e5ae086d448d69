"""
회차 댓글 서비스
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Union
import uuid

from qisati.core.security import Principal
from qisati.models.social import ChapterComment
from qisati.services.content_service import get_chapter


async def add_comment(
    db: AsyncSession, principal: Principal, chapter_id: Union[str, uuid.UUID], body: str
) -> ChapterComment:
    chapter = await get_chapter(db, chapter_id)
    comment = ChapterComment(chapter_id=chapter.id, author_id=principal.user_id, body=body)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


async def list_comments(
    db: AsyncSession, chapter_id: Union[str, uuid.UUID], skip: int = 0, limit: int = 20
) -> List[ChapterComment]:
    """최신순 댓글 목록"""
    await get_chapter(db, chapter_id)
    result = await db.execute(
        select(ChapterComment)
        .where(ChapterComment.chapter_id == chapter_id)
        .order_by(ChapterComment.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())
