"""LLM JSON 요청 헬퍼 테스트 — httpx.MockTransport 로 원격 API 시뮬레이션"""
import json

import httpx
import pytest
from openai import AsyncOpenAI

from banner_agent.config import Settings
from banner_agent.errors import (
    ContentAPIError,
    ContentNetworkError,
    MalformedReplyError,
    MissingCredentialError,
)
from banner_agent.utils.llm import has_credential, load_prompt, parse_json_object, request_json


def _make_settings(**overrides):
    values = {"openai_api_key": "sk-test", "anthropic_api_key": "", "_env_file": None}
    values.update(overrides)
    return Settings(**values)


def _make_client(handler):
    return AsyncOpenAI(
        api_key="sk-test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        max_retries=0,
    )


def _chat_reply(content):
    return httpx.Response(
        200,
        json={
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 0,
            "model": "gpt-4o-mini",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        },
    )


def test_parse_json_object_strips_code_fence():
    assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}


@pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]"])
def test_parse_json_object_rejects_non_objects(text):
    with pytest.raises(MalformedReplyError):
        parse_json_object(text)


def test_has_credential_follows_provider():
    assert has_credential(_make_settings()) is True
    assert has_credential(_make_settings(openai_api_key="")) is False
    assert has_credential(_make_settings(llm_provider="anthropic")) is False


def test_prompt_templates_require_hex_colors():
    for name in ("content_system.txt", "pattern_system.txt"):
        assert "6 digits" in load_prompt(name)


@pytest.mark.asyncio
async def test_request_json_returns_parsed_object():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return _chat_reply('{"mainHeading": "Fresh"}')

    result = await request_json("system", "user", "gpt-4o-mini", _make_settings(), _make_client(handler))

    assert result == {"mainHeading": "Fresh"}
    body = json.loads(requests[0].content)
    assert body["response_format"] == {"type": "json_object"}
    assert body["messages"][1] == {"role": "user", "content": "user"}


@pytest.mark.asyncio
async def test_http_500_maps_to_api_error_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"error": {"message": "boom"}})

    with pytest.raises(ContentAPIError) as exc_info:
        await request_json("system", "user", "gpt-4o-mini", _make_settings(), _make_client(handler))

    assert exc_info.value.status_code == 500
    assert str(exc_info.value) == "API request failed with status 500"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_connection_failure_maps_to_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ContentNetworkError):
        await request_json("system", "user", "gpt-4o-mini", _make_settings(), _make_client(handler))


@pytest.mark.asyncio
async def test_non_json_content_maps_to_malformed_reply():
    def handler(request: httpx.Request) -> httpx.Response:
        return _chat_reply("Sure! Here is your banner.")

    with pytest.raises(MalformedReplyError):
        await request_json("system", "user", "gpt-4o-mini", _make_settings(), _make_client(handler))


@pytest.mark.asyncio
async def test_missing_key_raises_before_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(MissingCredentialError):
        await request_json(
            "system", "user", "gpt-4o-mini", _make_settings(openai_api_key=""), _make_client(handler)
        )
