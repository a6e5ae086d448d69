"""
애플리케이션 설정
"""

from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv


"""env 로딩 우선순위
1) OS 환경변수
2) 프로젝트 루트의 .env
3) 패키지 디렉터리의 .env (qisati/.env)
"""

# .env 사전 로드 (OS 환경변수 우선, override=False)
_here = Path(__file__).resolve()
_repo_root_env = _here.parents[2] / ".env"
_package_env = _here.parents[1] / ".env"
for _p in (_repo_root_env, _package_env):
    try:
        if _p.exists():
            load_dotenv(dotenv_path=str(_p), override=False)
    except Exception:
        pass


DEFAULT_SESSION_SECRET = "change-this-session-secret-in-production"


class Settings(BaseSettings):
    """애플리케이션 설정"""
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite+aiosqlite:///./data/qisati.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # 지갑 세션 (Bearer 토큰은 세션 id를 감싼 JWT)
    SESSION_SECRET_KEY: str = DEFAULT_SESSION_SECRET
    SESSION_ALGORITHM: str = "HS256"
    SESSION_TTL_DAYS: int = 30

    # 외부 협력자 (없어도 부팅 가능)
    OPENAI_API_KEY: Optional[str] = None
    TTS_MODEL: str = "tts-1"
    PINATA_JWT: Optional[str] = None
    PINATA_API_URL: str = "https://api.pinata.cloud/pinning/pinFileToIPFS"
    PINATA_JSON_API_URL: str = "https://api.pinata.cloud/pinning/pinJSONToIPFS"
    PINATA_GATEWAY_URL: str = "https://gateway.pinata.cloud/ipfs/"
    STORAGE_BACKEND: str = "local"  # local | ipfs
    UPLOAD_DIRECTORY: Optional[str] = None

    FRONTEND_BASE_URL: str = "http://localhost:5173"

    # 콘텐츠/민팅 기본값
    AUDIO_GENERATION_LIMIT: int = 10
    EXPLORE_PAGE_SIZE: int = 12
    DEFAULT_CHAPTER_SUPPLY: int = 100
    DEFAULT_CHAPTER_PRICE_ETH: float = 0.002

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'


settings = Settings()


def validate_settings():
    """설정 검증"""
    if settings.ENVIRONMENT == "production":
        if settings.SESSION_SECRET_KEY == DEFAULT_SESSION_SECRET:
            raise ValueError("프로덕션 환경에서는 SESSION_SECRET_KEY를 변경해야 합니다.")
        if settings.STORAGE_BACKEND == "ipfs" and not settings.PINATA_JWT:
            raise ValueError("IPFS 스토리지를 사용하려면 PINATA_JWT가 필요합니다.")
    return True


validate_settings()
