"""
회차 모델
"""

from sqlalchemy import (
    Column, String, Text, Integer, BigInteger, Float, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint, func,
)
from sqlalchemy.orm import relationship
import uuid

from qisati.core.database import Base, UUID, JSON


class Chapter(Base):
    """회차 모델

    draft_md(스테이징)와 body_md(공개본)는 별도 필드다. publish가 draft → body로 옮긴다.
    """
    __tablename__ = "chapters"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    series_id = Column(UUID(), ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True)
    index = Column(Integer, nullable=False)  # 1부터 시작하는 회차 번호
    title = Column(String(200), nullable=False)
    word_count = Column(Integer, nullable=False, default=0)
    status = Column(String(10), nullable=False, default="draft")  # draft, live, coming
    price_eth = Column(Float, nullable=False, default=0.002)
    # unlimited 에디션(2**32-1)을 담기 위해 BigInteger
    supply = Column(BigInteger, nullable=False, default=100)
    remaining = Column(BigInteger, nullable=False, default=100)
    token_id = Column(Integer, nullable=False, default=0)
    markdown_cid = Column(String(200), nullable=False, default="")
    draft_md = Column(Text)
    body_md = Column(Text)
    # [{text, audio_url, character_id, start_index, end_index}]
    audio_segments = Column(JSON, nullable=False, default=list)
    audio_generation_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("series_id", "index", name="uq_series_chapter_index"),
        CheckConstraint("remaining >= 0 AND remaining <= supply", name="remaining_within_supply"),
    )

    # 관계
    series = relationship("Series", back_populates="chapters")
    comments = relationship("ChapterComment", back_populates="chapter", cascade="all, delete-orphan")

    @property
    def sold(self) -> int:
        return self.supply - self.remaining

    def __repr__(self):
        return f"<Chapter(series_id={self.series_id}, index={self.index}, status={self.status})>"
