"""
모델 패키지
"""

from .user import User, UserSocial
from .wallet_session import WalletSession
from .series import Series
from .chapter import Chapter
from .pending_tx import PendingTx
from .character_voice import CharacterVoice
from .social import ChapterComment, Follow
from .chain import TokenSnapshot, MetricsSnapshot

__all__ = [
    "User",
    "UserSocial",
    "WalletSession",
    "Series",
    "Chapter",
    "PendingTx",
    "CharacterVoice",
    "ChapterComment",
    "Follow",
    "TokenSnapshot",
    "MetricsSnapshot",
]
