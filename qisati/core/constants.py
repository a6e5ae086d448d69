"""
도메인 상수 (닫힌 열거형과 기본값)
"""

from typing import Literal, get_args


Category = Literal["sci-fi", "fantasy", "thriller", "romance", "mystery", "literary"]
CATEGORIES = get_args(Category)

# coming은 시드 데이터 전용 표시 상태 (전이 없음)
ChapterStatus = Literal["draft", "live", "coming"]
STATUS_DRAFT = "draft"
STATUS_LIVE = "live"
STATUS_COMING = "coming"

PendingTxType = Literal["mintSeries", "mintChapter", "collect"]

# 음성 합성 협력자가 받는 프리셋
VoiceId = Literal[
    "alloy", "ash", "ballad", "coral", "echo", "fable",
    "onyx", "nova", "sage", "shimmer", "verse",
]
VOICE_IDS = get_args(VoiceId)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# "unlimited" 에디션은 uint32 최대값으로 저장
UNLIMITED_EDITION_SIZE = 2**32 - 1

# 회차당 오디오 생성 상한 (설정으로 낮출 수만 있다)
MAX_AUDIO_GENERATIONS = 10

DEFAULT_SERIES_TITLE = "Untitled Series"
DEFAULT_SERIES_COVER = "https://picsum.photos/240/360?random=new"
DEFAULT_SERIES_LOGLINE = "A new story in progress..."
DEFAULT_SERIES_SYNOPSIS = "# About This Series\n\nThis is a new series."
DEFAULT_SERIES_CATEGORY = "literary"

DEFAULT_USER_ABOUT = "New writer on Qisati"
AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/identicon/svg?seed={address}"

UNPUBLISHED_PLACEHOLDER = "Draft not published yet."
