"""
캐릭터 보이스 모델: 대사 구간에 음성 프리셋을 매핑
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
import uuid

from qisati.core.database import Base, UUID


class CharacterVoice(Base):
    __tablename__ = "character_voices"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    voice_id = Column(String(20), nullable=False)
    instructions = Column(Text)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="character_voices")

    def __repr__(self):
        return f"<CharacterVoice(id={self.id}, name={self.name}, voice_id={self.voice_id})>"
