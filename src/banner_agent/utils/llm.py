"""
LLM JSON 요청 헬퍼

호출 1회 = POST 1회. 재시도 없음. 전송 계층 오류를 banner_agent 오류
분류(ContentAPIError / ContentNetworkError / MalformedReplyError)로 변환합니다.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

import anthropic
import httpx
import openai
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from banner_agent.config import Settings, get_settings
from banner_agent.errors import (
    ContentAPIError,
    ContentNetworkError,
    MalformedReplyError,
    MissingCredentialError,
)
from banner_agent.utils.http_client import create_anthropic_client, create_openai_client

logger = logging.getLogger(__name__)

PROMPT_DIR = Path(__file__).parent / "prompt_templates"


def load_prompt(name: str) -> str:
    return (PROMPT_DIR / name).read_text(encoding="utf-8")


def has_credential(settings: Settings) -> bool:
    """현재 provider의 API 키가 설정되어 있는지 확인합니다."""
    if settings.llm_provider == "anthropic":
        return bool(settings.anthropic_api_key)
    return bool(settings.openai_api_key)


def parse_json_object(text: str | None) -> dict:
    """모델 응답 텍스트를 JSON 객체로 파싱합니다 (마크다운 코드 블록 허용)."""
    if not text:
        raise MalformedReplyError("empty reply")

    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1])

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedReplyError(str(exc)) from exc

    if not isinstance(data, dict):
        raise MalformedReplyError(f"expected JSON object, got {type(data).__name__}")
    return data


async def _complete_openai(
    client: AsyncOpenAI,
    system_prompt: str,
    user_prompt: str,
    model: str,
    settings: Settings,
) -> str | None:
    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        response_format={"type": "json_object"},
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )
    # 비정상 본문은 SDK가 검증 없이 통과시키므로 choices 존재를 직접 확인
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    return choices[0].message.content


async def _complete_anthropic(
    client: AsyncAnthropic,
    system_prompt: str,
    user_prompt: str,
    settings: Settings,
) -> str | None:
    response = await client.messages.create(
        model=settings.anthropic_model,
        system=system_prompt,
        messages=[{"role": "user", "content": user_prompt}],
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )
    texts = [block.text for block in response.content if getattr(block, "type", "") == "text"]
    return "".join(texts) or None


async def request_json(
    system_prompt: str,
    user_prompt: str,
    model: str,
    settings: Settings | None = None,
    client: AsyncOpenAI | AsyncAnthropic | None = None,
) -> dict:
    """시스템/사용자 프롬프트로 한 번 호출하고 JSON 객체를 반환합니다.

    Args:
        system_prompt: 응답 JSON 형태를 지정하는 고정 시스템 지시문
        user_prompt: 사용자 입력이 포함된 지시문
        model: OpenAI 모델명 (anthropic provider는 settings.anthropic_model 사용)
        client: 주입할 SDK 클라이언트 (없으면 생성 후 호출 종료 시 닫음)

    Raises:
        MissingCredentialError, ContentAPIError, ContentNetworkError, MalformedReplyError
    """
    settings = settings or get_settings()
    provider = settings.llm_provider
    if not has_credential(settings):
        raise MissingCredentialError(provider)

    owns_client = client is None
    if client is None:
        client = (
            create_anthropic_client(settings)
            if provider == "anthropic"
            else create_openai_client(settings)
        )

    try:
        if provider == "anthropic":
            text = await _complete_anthropic(client, system_prompt, user_prompt, settings)
        else:
            text = await _complete_openai(client, system_prompt, user_prompt, model, settings)
    except (openai.APIStatusError, anthropic.APIStatusError) as exc:
        raise ContentAPIError(exc.status_code) from exc
    except (openai.APIConnectionError, anthropic.APIConnectionError, httpx.HTTPError) as exc:
        raise ContentNetworkError(str(exc)) from exc
    except (openai.OpenAIError, anthropic.AnthropicError) as exc:
        # 응답 본문 검증 실패 등 나머지 SDK 오류
        raise MalformedReplyError(str(exc)) from exc
    finally:
        if owns_client:
            await client.close()

    logger.debug("LLM reply (%s): %s", provider, text)
    return parse_json_object(text)
