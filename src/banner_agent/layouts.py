"""
배너 레이아웃 템플릿

모든 위치·너비는 캔버스 크기 대비 퍼센트입니다. 콘텐츠 요소의 위치는
콘텐츠 영역 오프셋에 더해져 캔버스 기준으로 환산됩니다.
"""
from __future__ import annotations

import logging
import random
import re

from banner_agent.models.layout import (
    BackgroundSpec,
    CanvasSize,
    ContentArea,
    ContentElement,
    ElementStyle,
    ElementType,
    ImageArea,
    LayoutTemplate,
    MaskShape,
    Position,
)

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "modernAgency"

_BANNER_CANVAS = CanvasSize(width=1200, height=600)


def _el(element_type: ElementType, x: float, y: float, **style) -> ContentElement:
    return ContentElement(
        type=element_type,
        position=Position(x=x, y=y),
        style=ElementStyle(**style),
    )


LAYOUTS: dict[str, LayoutTemplate] = {
    # 좌측 카피 + 우측 원형 제품 이미지
    "modernAgency": LayoutTemplate(
        name="modernAgency",
        canvas=_BANNER_CANVAS,
        content_area=ContentArea(
            position=Position(x=8, y=12),
            width=45,
            elements=(
                _el(ElementType.LABEL, 0, 0, font_size=24, font_weight="bold",
                    with_background=True, background_color=(255, 255, 255, 77)),
                _el(ElementType.HEADING, 0, 8, font_size=72, font_weight="bold", line_height=1.1),
                _el(ElementType.DESCRIPTION, 0, 38, font_size=24, line_height=1.4),
                _el(ElementType.TAGLINE, 0, 55, font_size=32, font_style="italic"),
                _el(ElementType.CTA, 0, 68, width=200, height=60),
            ),
        ),
        image_area=ImageArea(position=Position(x=75, y=50), width=45, mask=MaskShape.CIRCLE),
        background=BackgroundSpec(base="gradient", pattern="dots", accent="wave"),
    ),
    # 좌측 라운드 사각형 제품 이미지 + 우측 카피
    "productShowcase": LayoutTemplate(
        name="productShowcase",
        canvas=_BANNER_CANVAS,
        content_area=ContentArea(
            position=Position(x=52, y=16),
            width=42,
            elements=(
                _el(ElementType.LABEL, 0, 0, font_size=22, font_weight="bold",
                    with_background=True, background_color=(255, 255, 255, 102)),
                _el(ElementType.HEADING, 0, 9, font_size=64, font_weight="bold", line_height=1.1),
                _el(ElementType.DESCRIPTION, 0, 38, font_size=24, line_height=1.4),
                _el(ElementType.CTA, 0, 60, width=220, height=60),
            ),
        ),
        image_area=ImageArea(position=Position(x=28, y=50), width=70, mask=MaskShape.RECTANGLE),
        background=BackgroundSpec(base="solid", pattern="geometric", accent="none"),
    ),
    # 중앙 정렬 카피 + 반투명 전면 이미지
    "minimalDesign": LayoutTemplate(
        name="minimalDesign",
        canvas=_BANNER_CANVAS,
        content_area=ContentArea(
            position=Position(x=50, y=22),
            width=80,
            elements=(
                _el(ElementType.HEADING, 0, 0, font_size=82, font_weight="bold",
                    text_align="center", centered=True),
                _el(ElementType.DESCRIPTION, 0, 26, font_size=28, text_align="center",
                    centered=True, line_height=1.5),
                _el(ElementType.CTA, 0, 50, width=220, height=60, centered=True),
            ),
        ),
        image_area=ImageArea(
            position=Position(x=50, y=50), width=100, mask=MaskShape.OVERLAY, opacity=0.2
        ),
        background=BackgroundSpec(base="solid", pattern="minimal", accent="none"),
    ),
    "luxuryProduct": LayoutTemplate(
        name="luxuryProduct",
        canvas=_BANNER_CANVAS,
        content_area=ContentArea(
            position=Position(x=8, y=10),
            width=40,
            elements=(
                _el(ElementType.LABEL, 0, 0, font_size=24, font_weight="bold"),
                _el(ElementType.HEADING, 0, 8, font_size=70, font_weight="bold", line_height=1.1),
                _el(ElementType.TAGLINE, 0, 38, font_size=30, font_style="italic"),
                _el(ElementType.DESCRIPTION, 0, 50, font_size=22, line_height=1.5),
                _el(ElementType.CTA, 0, 70, width=200, height=60),
            ),
        ),
        image_area=ImageArea(position=Position(x=75, y=50), width=40, mask=MaskShape.CIRCLE),
        background=BackgroundSpec(base="gradient", pattern="minimal", accent="line"),
    ),
    "minimalProduct": LayoutTemplate(
        name="minimalProduct",
        canvas=_BANNER_CANVAS,
        content_area=ContentArea(
            position=Position(x=5, y=10),
            width=45,
            elements=(
                _el(ElementType.LABEL, 0, 0, font_size=20, font_weight="bold",
                    with_background=True, background_color=(0, 0, 0, 64)),
                _el(ElementType.HEADING, 0, 10, font_size=48, font_weight="bold", line_height=1.3),
                _el(ElementType.DESCRIPTION, 0, 35, font_size=24, line_height=1.5),
                _el(ElementType.CTA, 0, 62, width=160, height=50, border_radius=25),
            ),
        ),
        image_area=ImageArea(position=Position(x=75, y=50), width=50, mask=MaskShape.RECTANGLE),
        background=BackgroundSpec(base="solid", pattern="geometric", accent="none"),
    ),
    "vibrantRetail": LayoutTemplate(
        name="vibrantRetail",
        canvas=_BANNER_CANVAS,
        content_area=ContentArea(
            position=Position(x=0, y=0),
            width=50,
            elements=(
                _el(ElementType.LABEL, 5, 10, font_size=28, font_weight="bold"),
                _el(ElementType.HEADING, 5, 25, font_size=56, font_weight="bold", line_height=1.2),
                _el(ElementType.DESCRIPTION, 5, 50, font_size=24, line_height=1.4),
                _el(ElementType.TAGLINE, 5, 65, font_size=28, font_weight="bold"),
                _el(ElementType.CTA, 5, 78, width=220, height=60, border_radius=4, font_size=22),
            ),
        ),
        image_area=ImageArea(position=Position(x=75, y=50), width=50, mask=MaskShape.CIRCLE),
        background=BackgroundSpec(base="split", pattern="none", accent="curved"),
    ),
}


def get_layout(name: str | None) -> LayoutTemplate:
    """이름으로 레이아웃을 찾습니다. 알 수 없는 이름이면 기본 레이아웃을 반환합니다."""
    layout = LAYOUTS.get(name or "")
    if layout is None:
        logger.warning("Unknown layout %r, using default '%s'", name, DEFAULT_LAYOUT)
        return LAYOUTS[DEFAULT_LAYOUT]
    return layout


def available_layouts() -> list[str]:
    return list(LAYOUTS)


def get_random_layout(rng: random.Random | None = None) -> LayoutTemplate:
    rng = rng or random
    return LAYOUTS[rng.choice(available_layouts())]


def format_layout_name(name: str) -> str:
    """camelCase 레이아웃 이름을 표시용으로 변환합니다 (modernAgency → Modern Agency)."""
    spaced = re.sub(r"([A-Z])", r" \1", name)
    return spaced[:1].upper() + spaced[1:]
