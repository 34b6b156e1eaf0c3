"""
배너 생성 오류 분류

- 입력 검증 오류: 작업 시작 전에 즉시 발생, 메시지 그대로 UI에 노출
- 외부 의존성 오류: 콘텐츠/패턴 생성기 경계에서 흡수되어 fallback 데이터로 대체
- 이미지 디코드 오류: 오케스트레이터에서 흡수, 이미지 없이 렌더링 계속
- 그 외 예외: 최상위 오케스트레이터에서 로깅 후 False 반환
"""
from __future__ import annotations

from enum import Enum


class BannerError(Exception):
    """banner_agent 예외의 최상위 클래스."""


class PromptRequiredError(BannerError):
    def __init__(self, message: str = "No prompt provided") -> None:
        super().__init__(message)


class ImageLoadError(BannerError):
    def __init__(self, detail: str = "") -> None:
        message = "Failed to load image"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class GenerationInProgressError(BannerError):
    def __init__(self) -> None:
        super().__init__("A banner generation is already in progress")


class ExternalServiceError(BannerError):
    """원격 LLM API 호출 실패 (항상 생성기 경계에서 흡수됨)."""


class MissingCredentialError(ExternalServiceError):
    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"No API key configured for provider '{provider}'")


class ContentAPIError(ExternalServiceError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"API request failed with status {status_code}")


class ContentNetworkError(ExternalServiceError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"API request failed: {detail}")


class MalformedReplyError(ExternalServiceError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Unparseable API reply: {detail}")


class ErrorCategory(str, Enum):
    MISSING_PROMPT = "missing_prompt"
    IMAGE_LOAD = "image_load"
    API_FAILURE = "api_failure"
    BUSY = "busy"
    UNEXPECTED = "unexpected"


_USER_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.MISSING_PROMPT: "Please enter a product description.",
    ErrorCategory.IMAGE_LOAD: "Unable to load the provided image. Please try another image.",
    ErrorCategory.API_FAILURE: "Unable to connect to the AI service. Please try again later.",
    ErrorCategory.BUSY: "A banner is already being generated. Please wait for it to finish.",
    ErrorCategory.UNEXPECTED: "An unexpected error occurred.",
}


def classify_error(error: BaseException) -> ErrorCategory:
    """예외를 UI 메시지용 대분류로 매핑합니다."""
    if isinstance(error, PromptRequiredError):
        return ErrorCategory.MISSING_PROMPT
    if isinstance(error, ImageLoadError):
        return ErrorCategory.IMAGE_LOAD
    if isinstance(error, ExternalServiceError):
        return ErrorCategory.API_FAILURE
    if isinstance(error, GenerationInProgressError):
        return ErrorCategory.BUSY
    return ErrorCategory.UNEXPECTED


def describe_error(error: BaseException) -> str:
    """사용자에게 보여줄 오류 메시지를 반환합니다."""
    return _USER_MESSAGES[classify_error(error)]
