"""
콘텐츠 생성기

사용자 프롬프트 → LLM → 배너 카피 + 디자인 색상.
어떤 실패에도 예외를 던지지 않고 고정 fallback 콘텐츠로 대체하며,
결과의 source 태그로 실제 API 데이터인지 fallback인지 구분합니다.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from banner_agent.config import Settings, get_settings
from banner_agent.errors import (
    ContentAPIError,
    ContentNetworkError,
    MalformedReplyError,
)
from banner_agent.models.content import (
    Design,
    DesignColors,
    DesignStyle,
    GeneratedContent,
    GenerationSource,
)
from banner_agent.utils.color_utils import ColorTier, normalize_color
from banner_agent.utils.llm import has_credential, load_prompt, request_json

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT_FILE = "content_system.txt"

_FALLBACK_MOOD = "luxurious"
_DEFAULT_MOOD = "modern"

_TEXT_FIELDS = ("topLabel", "mainHeading", "description", "tagline", "ctaText")


@dataclass
class ContentResult:
    content: GeneratedContent
    source: GenerationSource
    color_tiers: dict[str, ColorTier] = field(default_factory=dict)
    error: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.source is not GenerationSource.LIVE


def _default_design() -> Design:
    return Design(
        colors=DesignColors(primary="#4B0082", secondary="#f4b942", text="#ffffff"),
        style=DesignStyle(mood=_FALLBACK_MOOD, elements=["gradient", "geometric"]),
    )


def get_fallback_content() -> GeneratedContent:
    """API를 사용할 수 없을 때의 고정 콘텐츠."""
    return GeneratedContent(
        top_label="FEATURED",
        main_heading="Premium Quality",
        description="Experience excellence in every detail",
        tagline="Elevate Your Style",
        design=_default_design(),
    )


def _coerce_style(raw_style: object) -> DesignStyle:
    if not isinstance(raw_style, dict):
        return DesignStyle()
    mood = raw_style.get("mood")
    elements = raw_style.get("elements")
    return DesignStyle(
        mood=str(mood) if mood else _DEFAULT_MOOD,
        elements=[str(e) for e in elements] if isinstance(elements, list) else [],
    )


def validate_content_colors(
    raw: dict,
    mood: str | None = None,
    rng: random.Random | None = None,
) -> tuple[GeneratedContent, dict[str, ColorTier]]:
    """LLM 응답의 디자인 색상을 검증·보정하여 GeneratedContent를 만듭니다.

    - design / design.colors 가 없으면 디자인 블록 전체를 기본값으로 교체
    - 있으면 primary / secondary / text 를 각각 정규화
      (정규화 무드: mood 인자 → 응답의 style.mood → "modern")

    Returns:
        (GeneratedContent, 필드별 ColorTier)
    """
    texts = {
        key: str(raw[key]) for key in _TEXT_FIELDS if raw.get(key) not in (None, "")
    }

    design = raw.get("design")
    colors = design.get("colors") if isinstance(design, dict) else None
    if not isinstance(colors, dict):
        logger.warning("Reply has no design colors, using default design block")
        content = GeneratedContent(**texts, design=_default_design())
        return content, {"design": ColorTier.DEFAULT}

    style = _coerce_style(design.get("style"))
    palette_mood = mood or style.mood

    tiers: dict[str, ColorTier] = {}
    resolved: dict[str, str] = {}
    for name in ("primary", "secondary", "text"):
        resolution = normalize_color(colors.get(name), mood=palette_mood, rng=rng)
        resolved[name] = resolution.value
        tiers[name] = resolution.tier
        if resolution.tier is not ColorTier.HEX:
            logger.info(
                "Color %s=%r normalized to %s (%s)",
                name, colors.get(name), resolution.value, resolution.tier.value,
            )

    content = GeneratedContent(
        **texts,
        design=Design(colors=DesignColors(**resolved), style=style),
    )
    return content, tiers


def _fallback(source: GenerationSource, error: str | None = None) -> ContentResult:
    return ContentResult(
        content=get_fallback_content(),
        source=source,
        color_tiers={"design": ColorTier.DEFAULT},
        error=error,
    )


async def generate_content(
    prompt: str,
    settings: Settings | None = None,
    client=None,
) -> ContentResult:
    """프롬프트로 배너 콘텐츠를 생성합니다. 실패 시 fallback 콘텐츠를 반환합니다."""
    settings = settings or get_settings()

    if not prompt or not prompt.strip():
        logger.warning("Empty prompt. Using fallback content.")
        return _fallback(GenerationSource.INVALID_PROMPT, "No prompt provided")

    if not has_credential(settings):
        logger.warning("No API key provided. Using fallback content.")
        return _fallback(GenerationSource.NO_CREDENTIAL)

    try:
        raw = await request_json(
            system_prompt=load_prompt(_SYSTEM_PROMPT_FILE),
            user_prompt=f"Create banner content for: {prompt}",
            model=settings.content_model,
            settings=settings,
            client=client,
        )
    except ContentAPIError as exc:
        logger.error("Error generating content: %s", exc)
        return _fallback(GenerationSource.API_ERROR, str(exc))
    except ContentNetworkError as exc:
        logger.error("Error generating content: %s", exc)
        return _fallback(GenerationSource.NETWORK_ERROR, str(exc))
    except MalformedReplyError as exc:
        logger.error("Error generating content: %s", exc)
        return _fallback(GenerationSource.MALFORMED_REPLY, str(exc))

    content, tiers = validate_content_colors(raw)
    logger.info("Content generated: %s", content.model_dump(by_alias=True))
    return ContentResult(content=content, source=GenerationSource.LIVE, color_tiers=tiers)
