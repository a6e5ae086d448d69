"""
Pydantic 스키마 패키지
"""

from .user import (
    UserResponse,
    UserSocialItem,
    ProfileUpdate,
    ProfileResponse,
    HandleAvailability,
    FollowResponse,
)
from .auth import WalletLoginRequest, SessionResponse
from .series import (
    SeriesResponse,
    SeriesCreate,
    SeriesTitleUpdate,
    SeriesSettingsUpdate,
    SeriesLaunch,
    CoinMetadataResponse,
    SeriesDetail,
    ExploreItem,
    ExploreResponse,
    HomeStats,
)
from .chapter import (
    ChapterCreate,
    ChapterCreateResult,
    DraftChapterCreate,
    DraftSave,
    ChapterTitleUpdate,
    ChapterResponse,
    ChapterView,
    ChapterNavigation,
    CommentCreate,
    CommentResponse,
)
from .mint import (
    RoyaltySplit,
    MintRequest,
    MintResult,
    CollectRequest,
    CollectResult,
    PendingTxCreate,
    PendingTxResponse,
    WithdrawResult,
    DashboardResponse,
)
from .audio import (
    CharacterVoiceSave,
    CharacterVoiceResponse,
    DialogueSegment,
    AudioGenerationRequest,
    AudioGenerationResult,
    UploadResponse,
)
