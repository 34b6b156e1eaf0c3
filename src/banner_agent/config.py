from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # LLM APIs
    # 키가 비어 있으면 오류가 아니라 fallback 콘텐츠를 사용하라는 신호
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    llm_provider: Literal["openai", "anthropic"] = "openai"

    # Model Configuration
    content_model: str = "gpt-4o-mini"
    pattern_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-haiku-4-5-20251001"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 500

    # Render Configuration
    default_layout: str = "modernAgency"
    # 렌더링 직전 대기 시간 (초) — 앞선 비동기 작업이 정리될 시간을 줌
    render_settle_delay: float = 0.1
    output_dir: str = "output"
    # 비워두면 패키지 내 assets/fonts/ 사용
    font_dir: str = ""

    # SSL / Proxy Configuration
    # 기업 프록시 환경에서 SSL 검증 오류 발생 시 false로 설정
    ssl_verify: bool = True
    # 커스텀 CA 인증서 경로 (비워두면 certifi 기본값 사용)
    ca_bundle_path: str = ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
