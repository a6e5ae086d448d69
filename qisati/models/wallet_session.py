"""
지갑 세션 모델
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from qisati.core.database import Base, UUID


class WalletSession(Base):
    """서명 검증 성공 시 생성되는 세션. 만료 후에는 무효지만 삭제하지 않는다."""
    __tablename__ = "wallet_sessions"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    wallet_address = Column(String(64), nullable=False, index=True)
    # UTC naive 시각으로 저장 (SQLite/PostgreSQL 비교 일관성)
    created_at = Column(DateTime(), nullable=False, default=datetime.utcnow)
    expires_at = Column(DateTime(), nullable=False)

    user = relationship("User", back_populates="sessions")

    def __repr__(self):
        return f"<WalletSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
