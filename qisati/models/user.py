"""
사용자 모델
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
import uuid

from qisati.core.database import Base, UUID


class User(Base):
    """사용자 모델 (지갑 주소로 식별)"""
    __tablename__ = "users"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    handle = Column(String(20), unique=True, index=True, nullable=False)
    avatar_url = Column(String(500), nullable=False)
    about = Column(String(1000))
    banner_url = Column(String(500))
    wallet_address = Column(String(64), unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # 관계 설정
    sessions = relationship("WalletSession", back_populates="user", cascade="all, delete-orphan")
    series = relationship("Series", back_populates="author", cascade="all, delete-orphan")
    socials = relationship("UserSocial", back_populates="user", cascade="all, delete-orphan")
    character_voices = relationship("CharacterVoice", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, handle={self.handle}, wallet={self.wallet_address})>"


class UserSocial(Base):
    """프로필 소셜 링크"""
    __tablename__ = "user_socials"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String(50), nullable=False)
    url = Column(String(500), nullable=False)
    display_text = Column(String(100))

    user = relationship("User", back_populates="socials")
