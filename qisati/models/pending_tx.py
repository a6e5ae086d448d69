"""
대기 트랜잭션 모델: 온체인 확인을 기다리는 외부 액션 기록 (추가 전용)
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from datetime import datetime
import uuid

from qisati.core.database import Base, UUID


class PendingTx(Base):
    __tablename__ = "pending_txs"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    hash = Column(String(100), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # mintSeries, mintChapter, collect
    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    series_id = Column(UUID(), ForeignKey("series.id", ondelete="SET NULL"), nullable=True)
    chapter_id = Column(UUID(), ForeignKey("chapters.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<PendingTx(hash={self.hash}, type={self.type}, user_id={self.user_id})>"
