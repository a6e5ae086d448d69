"""
체인 동기화 스냅샷 모델
"""

from sqlalchemy import Column, String, Integer, BigInteger, Float, DateTime, func
import uuid

from qisati.core.database import Base, UUID


class TokenSnapshot(Base):
    """토큰 공급량 스냅샷 (동기화 잡이 기록)"""
    __tablename__ = "token_snapshots"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    contract = Column(String(64), nullable=False, index=True)
    token_id = Column(Integer, nullable=False)
    block = Column(Integer, nullable=False)
    remaining = Column(BigInteger, nullable=False)
    total_minted = Column(BigInteger, nullable=False)
    price_eth = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class MetricsSnapshot(Base):
    """플랫폼 누적 지표 스냅샷"""
    __tablename__ = "metrics_snapshots"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    total_series = Column(Integer, nullable=False)
    total_chapters = Column(Integer, nullable=False)
    total_eth_earned = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
