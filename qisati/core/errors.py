"""
도메인 에러 정의

서비스 계층은 QisatiError만 던지고, HTTP 변환은 main의 예외 핸들러가 담당한다.
"""

from enum import Enum
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "Unauthenticated"
    NOT_FOUND = "NotFound"
    FORBIDDEN = "Forbidden"
    SERIES_LOCKED = "SeriesLocked"
    NO_DRAFT_TO_PUBLISH = "NoDraftToPublish"
    SOLD_OUT = "SoldOut"
    GENERATION_LIMIT_REACHED = "GenerationLimitReached"
    EXTERNAL_SERVICE_FAILURE = "ExternalServiceFailure"
    INVALID_INPUT = "InvalidInput"


_STATUS_BY_KIND = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.SERIES_LOCKED: status.HTTP_409_CONFLICT,
    ErrorKind.NO_DRAFT_TO_PUBLISH: status.HTTP_409_CONFLICT,
    ErrorKind.SOLD_OUT: status.HTTP_409_CONFLICT,
    ErrorKind.GENERATION_LIMIT_REACHED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.EXTERNAL_SERVICE_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
}

_DEFAULT_MESSAGES = {
    ErrorKind.UNAUTHENTICATED: "로그인이 필요합니다.",
    ErrorKind.NOT_FOUND: "대상을 찾을 수 없습니다.",
    ErrorKind.FORBIDDEN: "권한이 없습니다.",
    ErrorKind.SERIES_LOCKED: "첫 회차가 공개된 시리즈는 제목을 바꿀 수 없습니다.",
    ErrorKind.NO_DRAFT_TO_PUBLISH: "공개할 초안이 없습니다.",
    ErrorKind.SOLD_OUT: "모든 에디션이 판매되었습니다.",
    ErrorKind.GENERATION_LIMIT_REACHED: "회차당 오디오 생성 한도에 도달했습니다.",
    ErrorKind.EXTERNAL_SERVICE_FAILURE: "외부 서비스 호출에 실패했습니다.",
    ErrorKind.INVALID_INPUT: "요청 값이 올바르지 않습니다.",
}


class QisatiError(Exception):
    """서비스 계층 공통 예외"""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or _DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]

    def __repr__(self):
        return f"<QisatiError(kind={self.kind.value}, message={self.message})>"


def not_found(what: str) -> QisatiError:
    return QisatiError(ErrorKind.NOT_FOUND, f"{what}을(를) 찾을 수 없습니다.")


def invalid_input(message: str) -> QisatiError:
    return QisatiError(ErrorKind.INVALID_INPUT, message)


async def qisati_error_handler(request: Request, exc: QisatiError) -> JSONResponse:
    """QisatiError → {"detail", "code"} JSON 응답"""
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind == ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.kind.value},
        headers=headers,
    )
