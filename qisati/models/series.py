"""
시리즈 모델
"""

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
import uuid

from qisati.core.database import Base, UUID


class Series(Base):
    """시리즈 모델

    제목은 live 회차가 하나라도 생기면 잠긴다. 잠금은 저장된 플래그가 아니라
    하위 회차를 조회해서 판단한다.
    """
    __tablename__ = "series"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    slug = Column(String(200), unique=True, index=True, nullable=False)
    title = Column(String(200), nullable=False)
    cover_url = Column(String(500), nullable=False)
    logline = Column(String(500), nullable=False, default="")
    synopsis_md = Column(Text, nullable=False, default="")
    author_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    contract = Column(String(64), nullable=False)
    token_id = Column(Integer, nullable=False, default=0)
    category = Column(String(20), index=True)  # sci-fi, fantasy, thriller, romance, mystery, literary
    coin_address = Column(String(64))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # 관계 설정
    author = relationship("User", back_populates="series")
    chapters = relationship(
        "Chapter",
        back_populates="series",
        cascade="all, delete-orphan",
        order_by="Chapter.index",
    )

    def __repr__(self):
        return f"<Series(id={self.id}, slug={self.slug}, author_id={self.author_id})>"
