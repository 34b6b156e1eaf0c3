"""
공유 LLM 클라이언트 팩토리

기업 프록시 환경의 SSL 인증서 오류를 처리합니다.
SSL_VERIFY=false 또는 CA_BUNDLE_PATH 설정으로 동작을 제어합니다.
SDK 자체 재시도는 끄고 사용자 동작 1회당 정확히 한 번만 호출합니다.
"""
import os
import ssl
import warnings

import certifi
import httpx
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from banner_agent.config import Settings, get_settings


def configure_ssl_globally(settings: Settings | None = None) -> None:
    """SSL 설정을 전역으로 적용합니다.

    requests/urllib 계열처럼 자체 컨텍스트를 만드는 라이브러리에도
    CA 번들 설정이 적용되도록 환경변수를 지정합니다.
    CLI 시작 시 가장 먼저 호출해야 합니다.
    """
    settings = settings or get_settings()

    if not settings.ssl_verify:
        warnings.warn(
            "SSL verification disabled globally (SSL_VERIFY=false). "
            "Use only in development / corporate proxy environments.",
            stacklevel=2,
        )
        # http.client (urllib 계열) 도 커버
        ssl._create_default_https_context = ssl._create_unverified_context  # noqa: SLF001
        os.environ.setdefault("PYTHONHTTPSVERIFY", "0")

    elif settings.ca_bundle_path:
        # 기업 CA 번들을 환경변수로 지정 → requests / httpx 모두 인식
        os.environ["SSL_CERT_FILE"] = settings.ca_bundle_path
        os.environ["REQUESTS_CA_BUNDLE"] = settings.ca_bundle_path


def build_ssl_context(settings: Settings | None = None) -> ssl.SSLContext | bool | str:
    """환경설정에 따라 httpx verify 인자를 반환합니다.

    Returns:
        - ssl.SSLContext: 커스텀 CA 번들 사용 시
        - str (certifi 경로): 기본 동작
        - False: SSL 검증 완전 비활성화 (비권장, 프록시 환경 임시 우회용)
    """
    settings = settings or get_settings()

    if not settings.ssl_verify:
        return False

    if settings.ca_bundle_path:
        # 기업 CA 인증서를 certifi 기본 번들과 합쳐서 사용
        ctx = ssl.create_default_context(cafile=certifi.where())
        ctx.load_verify_locations(cafile=settings.ca_bundle_path)
        return ctx

    return certifi.where()


def create_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """SSL 설정이 적용된 httpx.AsyncClient (이미지 URL 다운로드 등)."""
    return httpx.AsyncClient(verify=build_ssl_context(settings))


def create_openai_client(settings: Settings | None = None) -> AsyncOpenAI:
    """SSL 설정이 적용된 AsyncOpenAI 클라이언트를 생성합니다."""
    settings = settings or get_settings()
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        http_client=create_http_client(settings),
        max_retries=0,
    )


def create_anthropic_client(settings: Settings | None = None) -> AsyncAnthropic:
    """SSL 설정이 적용된 AsyncAnthropic 클라이언트를 생성합니다."""
    settings = settings or get_settings()
    return AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        http_client=create_http_client(settings),
        max_retries=0,
    )
