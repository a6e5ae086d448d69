"""
댓글/팔로우 모델
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
import uuid

from qisati.core.database import Base, UUID


class ChapterComment(Base):
    """회차 댓글 모델"""
    __tablename__ = "chapter_comments"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    chapter_id = Column(UUID(), ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    chapter = relationship("Chapter", back_populates="comments")
    author = relationship("User")

    def __repr__(self):
        return f"<ChapterComment(id={self.id}, chapter_id={self.chapter_id}, author_id={self.author_id})>"


class Follow(Base):
    """팔로우 관계"""
    __tablename__ = "follows"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    follower_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    following_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
    )
