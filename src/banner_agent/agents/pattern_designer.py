"""
배경 패턴 생성기

디자인 무드 → LLM → 배경 그라디언트 색상 + 장식 요소 사양.
콘텐츠 생성기와 동일하게 실패 시 기본 패턴으로 대체하며 예외를 던지지 않습니다.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from pydantic import ValidationError

from banner_agent.config import Settings, get_settings
from banner_agent.errors import (
    ContentAPIError,
    ContentNetworkError,
    MalformedReplyError,
)
from banner_agent.models.content import DesignStyle, GenerationSource
from banner_agent.models.layout import BackgroundSpec
from banner_agent.models.pattern import (
    PatternColors,
    PatternConfig,
    PatternElement,
    SizeRange,
)
from banner_agent.utils.color_utils import ColorTier, normalize_color
from banner_agent.utils.llm import has_credential, load_prompt, request_json

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT_FILE = "pattern_system.txt"

DEFAULT_BACKGROUND_COLORS = ["#4B0082", "#6A0DAD"]
DEFAULT_ELEMENT_COLORS = ["#FFFFFF"]


@dataclass
class PatternResult:
    pattern: PatternConfig
    source: GenerationSource
    # "background" / "elements" 목록별로 적용된 가장 낮은 단계
    color_tiers: dict[str, ColorTier] = field(default_factory=dict)
    error: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.source is not GenerationSource.LIVE


def _default_elements() -> list[PatternElement]:
    return [
        PatternElement(
            shape="circle",
            count=20,
            size=SizeRange(min=5, max=15),
            opacity=0.1,
            distribution="random",
        )
    ]


def get_default_pattern() -> PatternConfig:
    return PatternConfig(
        type="geometric",
        elements=_default_elements(),
        colors=PatternColors(
            background=list(DEFAULT_BACKGROUND_COLORS),
            elements=list(DEFAULT_ELEMENT_COLORS),
        ),
    )


_TIER_ORDER = [
    ColorTier.HEX,
    ColorTier.NAMED,
    ColorTier.MOOD_PALETTE,
    ColorTier.DEFAULT_PALETTE,
    ColorTier.DEFAULT,
]


def _normalize_list(
    colors: object,
    min_length: int,
    default: list[str],
    mood: str | None,
    rng: random.Random | None,
) -> tuple[list[str], ColorTier]:
    if not isinstance(colors, list) or len(colors) < min_length:
        return list(default), ColorTier.DEFAULT

    resolutions = [normalize_color(c, mood=mood, rng=rng) for c in colors]
    worst = max((r.tier for r in resolutions), key=_TIER_ORDER.index)
    return [r.value for r in resolutions], worst


def _parse_elements(raw_elements: object) -> list[PatternElement]:
    if not isinstance(raw_elements, list) or not raw_elements:
        return _default_elements()
    try:
        return [PatternElement.model_validate(e) for e in raw_elements]
    except ValidationError as exc:
        logger.warning("Invalid pattern elements, using defaults: %s", exc.errors()[:3])
        return _default_elements()


def validate_pattern_colors(
    raw: dict,
    mood: str | None = None,
    rng: random.Random | None = None,
) -> tuple[PatternConfig, dict[str, ColorTier]]:
    """패턴 설정의 색상 목록 길이와 HEX 형식을 보장합니다.

    - pattern / pattern.colors 가 없으면 기본 패턴
    - background 2개 미만 → 기본 그라디언트, elements 1개 미만 → 흰색
    - 모든 색상은 normalize_color 통과
    - 요소 사양이 잘못되면 기본 요소 사양
    """
    pattern = raw.get("pattern") if isinstance(raw, dict) else None
    colors = pattern.get("colors") if isinstance(pattern, dict) else None
    if not isinstance(colors, dict):
        logger.warning("Reply has no pattern colors, using default pattern")
        return get_default_pattern(), {
            "background": ColorTier.DEFAULT,
            "elements": ColorTier.DEFAULT,
        }

    background, bg_tier = _normalize_list(
        colors.get("background"), 2, DEFAULT_BACKGROUND_COLORS, mood, rng
    )
    elements, el_tier = _normalize_list(
        colors.get("elements"), 1, DEFAULT_ELEMENT_COLORS, mood, rng
    )

    pattern_type = pattern.get("type")
    config = PatternConfig(
        type=str(pattern_type) if pattern_type else "geometric",
        elements=_parse_elements(pattern.get("elements")),
        colors=PatternColors(background=background, elements=elements),
    )
    return config, {"background": bg_tier, "elements": el_tier}


def _fallback(source: GenerationSource, error: str | None = None) -> PatternResult:
    return PatternResult(
        pattern=get_default_pattern(),
        source=source,
        color_tiers={"background": ColorTier.DEFAULT, "elements": ColorTier.DEFAULT},
        error=error,
    )


def _build_user_prompt(style: DesignStyle, background: BackgroundSpec | None) -> str:
    prompt = f"Create background pattern for style: {style.mood}"
    if background is not None:
        prompt += (
            f"\nLayout background hints: base={background.base}, "
            f"pattern={background.pattern}, accent={background.accent}"
        )
    if style.elements:
        prompt += f"\nDesign elements: {', '.join(style.elements)}"
    return prompt


async def generate_background_pattern(
    style: DesignStyle,
    background: BackgroundSpec | None = None,
    settings: Settings | None = None,
    client=None,
) -> PatternResult:
    """디자인 무드에 맞는 배경 패턴을 생성합니다. 실패 시 기본 패턴을 반환합니다."""
    settings = settings or get_settings()

    if not has_credential(settings):
        logger.warning("No API key provided. Using default pattern.")
        return _fallback(GenerationSource.NO_CREDENTIAL)

    try:
        raw = await request_json(
            system_prompt=load_prompt(_SYSTEM_PROMPT_FILE),
            user_prompt=_build_user_prompt(style, background),
            model=settings.pattern_model,
            settings=settings,
            client=client,
        )
    except ContentAPIError as exc:
        logger.error("Error generating background pattern: %s", exc)
        return _fallback(GenerationSource.API_ERROR, str(exc))
    except ContentNetworkError as exc:
        logger.error("Error generating background pattern: %s", exc)
        return _fallback(GenerationSource.NETWORK_ERROR, str(exc))
    except MalformedReplyError as exc:
        logger.error("Error generating background pattern: %s", exc)
        return _fallback(GenerationSource.MALFORMED_REPLY, str(exc))

    pattern, tiers = validate_pattern_colors(raw, mood=style.mood)
    logger.info(
        "Background pattern generated: type=%s, %d element spec(s)",
        pattern.type,
        len(pattern.elements),
    )
    return PatternResult(pattern=pattern, source=GenerationSource.LIVE, color_tiers=tiers)
