"""배경 패턴 생성기 테스트"""
import json
from unittest.mock import AsyncMock, patch

import pytest

from banner_agent.agents.pattern_designer import (
    DEFAULT_BACKGROUND_COLORS,
    _build_user_prompt,
    generate_background_pattern,
    get_default_pattern,
    validate_pattern_colors,
)
from banner_agent.config import Settings
from banner_agent.errors import ContentAPIError, ContentNetworkError
from banner_agent.models.content import DesignStyle, GenerationSource
from banner_agent.models.layout import BackgroundSpec
from banner_agent.utils.color_utils import HEX_COLOR_PATTERN, ColorTier


def _make_settings(api_key="sk-test"):
    return Settings(openai_api_key=api_key, anthropic_api_key="", _env_file=None)


def _make_reply(**colors):
    return {
        "pattern": {
            "type": "organic",
            "elements": [
                {"shape": "wave", "count": 4, "size": {"min": 10, "max": 30}, "opacity": 0.2, "distribution": "grid"}
            ],
            "colors": colors,
        }
    }


def test_default_pattern():
    pattern = get_default_pattern()
    assert pattern.colors.background == ["#4B0082", "#6A0DAD"]
    assert pattern.colors.elements == ["#FFFFFF"]
    assert pattern.elements[0].shape == "circle"
    assert pattern.elements[0].count == 20


def test_valid_reply_is_kept():
    pattern, tiers = validate_pattern_colors(
        _make_reply(background=["#111111", "#222222"], elements=["#FAFAFA", "#EEEEEE"])
    )
    assert pattern.type == "organic"
    assert pattern.colors.background == ["#111111", "#222222"]
    assert pattern.elements[0].distribution == "grid"
    assert tiers == {"background": ColorTier.HEX, "elements": ColorTier.HEX}


def test_short_lists_are_replaced():
    pattern, tiers = validate_pattern_colors(_make_reply(background=["#111111"], elements=[]))
    assert pattern.colors.background == DEFAULT_BACKGROUND_COLORS
    assert pattern.colors.elements == ["#FFFFFF"]
    assert tiers["background"] is ColorTier.DEFAULT


def test_named_colors_report_worst_tier():
    pattern, tiers = validate_pattern_colors(
        _make_reply(background=["#000000", "navy"], elements=["white"]), mood="modern"
    )
    assert pattern.colors.background == ["#000000", "#000080"]
    assert tiers["background"] is ColorTier.NAMED


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"pattern": None},
        {"pattern": {"colors": "red"}},
        {"pattern": {"colors": {"background": "oops", "elements": None}}},
        {"pattern": {"elements": [{"count": -1}], "colors": {"background": [1, 2], "elements": [3]}}},
    ],
)
@pytest.mark.parametrize("mood", [None, "", "elegant", "nonsense"])
def test_validate_never_raises_and_keeps_list_lengths(raw, mood):
    pattern, _ = validate_pattern_colors(raw, mood=mood)
    assert len(pattern.colors.background) >= 2
    assert len(pattern.colors.elements) >= 1
    for color in pattern.colors.background + pattern.colors.elements:
        assert HEX_COLOR_PATTERN.match(color)
    assert pattern.elements


def test_user_prompt_carries_mood_and_layout_hints():
    prompt = _build_user_prompt(
        DesignStyle(mood="playful", elements=["dots", "confetti"]),
        BackgroundSpec(base="gradient", pattern="dots", accent="wave"),
    )
    assert prompt.startswith("Create background pattern for style: playful")
    assert "accent=wave" in prompt
    assert "dots, confetti" in prompt


@pytest.mark.asyncio
async def test_no_credential_returns_default_pattern():
    result = await generate_background_pattern(DesignStyle(), settings=_make_settings(api_key=""))
    assert result.source is GenerationSource.NO_CREDENTIAL
    assert result.pattern == get_default_pattern()


@pytest.mark.asyncio
async def test_live_reply_uses_style_mood_for_normalization():
    reply = _make_reply(background=["nope", "#222222"], elements=["#FFFFFF"])
    with patch(
        "banner_agent.agents.pattern_designer.request_json", new=AsyncMock(return_value=reply)
    ) as mock_request:
        result = await generate_background_pattern(
            DesignStyle(mood="vintage"), settings=_make_settings()
        )

    assert result.source is GenerationSource.LIVE
    assert result.color_tiers["background"] is ColorTier.MOOD_PALETTE
    assert "vintage" in mock_request.call_args.kwargs["user_prompt"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, source",
    [
        (ContentAPIError(503), GenerationSource.API_ERROR),
        (ContentNetworkError("reset by peer"), GenerationSource.NETWORK_ERROR),
    ],
)
async def test_remote_failures_return_default_pattern(error, source):
    with patch(
        "banner_agent.agents.pattern_designer.request_json", new=AsyncMock(side_effect=error)
    ):
        result = await generate_background_pattern(DesignStyle(), settings=_make_settings())

    assert result.source is source
    assert result.used_fallback is True
    assert result.pattern.colors.background == DEFAULT_BACKGROUND_COLORS
    assert json.loads(result.pattern.model_dump_json())["type"] == "geometric"
