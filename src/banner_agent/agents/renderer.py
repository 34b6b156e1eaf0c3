"""
배너 렌더러

레이아웃 + 콘텐츠 + 배경 패턴 + 제품 이미지 → 불변 DisplayList.

명령 순서 (뒤가 위):
  1. 배경 그라디언트 → 비네트 → 텍스처 → 패턴 도형
  2. 제품 이미지 (원형 마스크일 때 글로우 링이 먼저)
  3. 콘텐츠 요소 (레이아웃 정의 순서)
"""
from __future__ import annotations

import logging
import math
import random

from PIL import Image

from banner_agent.agents.pattern_designer import get_default_pattern
from banner_agent.models.content import GeneratedContent
from banner_agent.models.display_list import (
    Button,
    CircleShape,
    DisplayList,
    DrawOp,
    GlowRing,
    LinearGradient,
    LineShape,
    ProductImage,
    RadialVignette,
    RectShape,
    Shadow,
    TextBlock,
    TextureOverlay,
    WaveShape,
)
from banner_agent.models.layout import (
    ContentElement,
    ElementType,
    LayoutTemplate,
    MaskShape,
)
from banner_agent.models.pattern import PatternConfig, PatternElement
from banner_agent.utils.canvas import DrawingBackend, RenderTarget
from banner_agent.utils.color_utils import is_color_dark, lightify_colors

logger = logging.getLogger(__name__)

LUXURY_MOODS = frozenset({"luxury", "elegant"})
LUXURY_GRADIENT = ("#000000", "#2C2415")

_PATTERN_BOOST = 1.5
_IMAGE_SCALE_RATIO = 0.6

_GLOW_COLOR = "#FFFFFF"
_GLOW_OFFSET = 10
_GLOW_WIDTH = 5
_GLOW_OPACITY = 0.3
_RECT_CORNER_RADIUS = 20

_STROKE_MIN_SIZE = 32
_SHADOW_MIN_SIZE = 48
_STROKE_ON_DARK = (255, 255, 255, 77)
_STROKE_ON_LIGHT = (0, 0, 0, 77)
_TEXT_SHADOW = Shadow(color=(0, 0, 0, 128), blur=10, offset_x=5, offset_y=5)
_CHIP_DEFAULT = (0, 0, 0, 128)
_DEFAULT_FONT_SIZE = 24

_BUTTON_WIDTH = 180
_BUTTON_HEIGHT = 56
_BUTTON_RADIUS = 28
_BUTTON_FONT_SIZE = 18
_BUTTON_SHADOW = Shadow(color=(0, 0, 0, 102), blur=8, offset_x=3, offset_y=3)

_SERIF_FAMILY = "Playfair Display"
_SANS_FAMILY = "Montserrat"

PATTERN_SHAPES = frozenset({"circle", "rectangle", "wave", "line"})


def resolve_gradient(background: list[str], mood: str) -> tuple[str, str]:
    """배경 그라디언트 양 끝 색을 결정합니다.

    두 색이 모두 어두우면 럭셔리 무드는 검정→짙은 골드, 그 외는 밝게 보정합니다.
    """
    start, end = background[0], background[1]
    if is_color_dark(start) and is_color_dark(end):
        if mood.lower() in LUXURY_MOODS:
            return LUXURY_GRADIENT
        start, end = lightify_colors([start, end])
    return start, end


def _build_background(
    width: int,
    height: int,
    pattern: PatternConfig,
    mood: str,
    rng: random.Random,
) -> list[DrawOp]:
    start, end = resolve_gradient(pattern.colors.background, mood)
    ops: list[DrawOp] = [
        LinearGradient(start=start, end=end),
        RadialVignette(),
        TextureOverlay(
            base_color=start,
            element_color=pattern.colors.elements[0],
            seed=rng.getrandbits(32),
        ),
    ]
    for spec in pattern.elements:
        ops.extend(_build_pattern_shapes(width, height, spec, pattern.colors.elements, rng))
    return ops


def _build_pattern_shapes(
    width: int,
    height: int,
    spec: PatternElement,
    colors: list[str],
    rng: random.Random,
) -> list[DrawOp]:
    if spec.shape not in PATTERN_SHAPES:
        logger.debug("Unknown pattern shape %r, skipping", spec.shape)
        return []

    # distribution 값은 보존만 하고 위치는 균등 분포
    count = math.ceil(spec.count * _PATTERN_BOOST)
    opacity = min(1.0, spec.opacity * _PATTERN_BOOST)
    low, high = sorted((spec.size.min, spec.size.max))

    shapes: list[DrawOp] = []
    for i in range(count):
        x = rng.uniform(0, width)
        y = rng.uniform(0, height)
        size = rng.uniform(low, high)
        color = colors[i % len(colors)]

        if spec.shape == "circle":
            shapes.append(CircleShape(center=(x, y), radius=size / 2, fill=color, opacity=opacity))
        elif spec.shape == "rectangle":
            shapes.append(
                RectShape(
                    origin=(x, y),
                    width=size,
                    height=size * (0.5 + rng.random()),
                    angle=rng.uniform(0, 45),
                    fill=color,
                    opacity=opacity,
                )
            )
        elif spec.shape == "wave":
            shapes.append(
                WaveShape(
                    origin=(x, y),
                    width=width / 4,
                    height=50,
                    stroke=color,
                    stroke_width=2,
                    opacity=opacity,
                )
            )
        else:
            shapes.append(
                LineShape(
                    origin=(x, y),
                    length=size * 2,
                    angle=rng.uniform(0, 180),
                    stroke=color,
                    stroke_width=rng.randint(1, 3),
                    opacity=opacity,
                )
            )
    return shapes


def _build_product_image(layout: LayoutTemplate, image: Image.Image) -> list[DrawOp]:
    canvas = layout.canvas
    area = layout.image_area
    scale = _IMAGE_SCALE_RATIO * min(canvas.width, canvas.height) / max(image.width, image.height)
    center = (canvas.width * area.position.x / 100, canvas.height * area.position.y / 100)

    ops: list[DrawOp] = []
    if area.mask is MaskShape.CIRCLE:
        radius = min(image.width, image.height) * scale / 2
        ops.append(
            GlowRing(
                center=center,
                radius=radius + _GLOW_OFFSET,
                stroke=_GLOW_COLOR,
                stroke_width=_GLOW_WIDTH,
                opacity=_GLOW_OPACITY,
            )
        )
    ops.append(
        ProductImage(
            image=image,
            center=center,
            scale=scale,
            mask=area.mask,
            corner_radius=_RECT_CORNER_RADIUS,
            opacity=area.opacity if area.mask is MaskShape.OVERLAY else 1.0,
        )
    )
    return ops


def _element_text(element_type: ElementType, content: GeneratedContent) -> str:
    return {
        ElementType.LABEL: content.top_label,
        ElementType.HEADING: content.main_heading,
        ElementType.DESCRIPTION: content.description,
        ElementType.TAGLINE: content.tagline,
        ElementType.CTA: content.cta_text,
    }[element_type]


def _build_element(
    layout: LayoutTemplate,
    element: ContentElement,
    content: GeneratedContent,
    font_family: str,
) -> DrawOp:
    canvas = layout.canvas
    area = layout.content_area
    origin = (
        canvas.width * (area.position.x + element.position.x) / 100,
        canvas.height * (area.position.y + element.position.y) / 100,
    )
    style = element.style
    colors = content.design.colors

    if element.type is ElementType.CTA:
        return Button(
            text=content.cta_text,
            origin=origin,
            width=style.width or _BUTTON_WIDTH,
            height=style.height or _BUTTON_HEIGHT,
            fill=colors.secondary,
            text_color=colors.primary,
            radius=style.border_radius if style.border_radius is not None else _BUTTON_RADIUS,
            font_size=style.font_size or _BUTTON_FONT_SIZE,
            font_family=font_family,
            centered=style.centered,
            shadow=_BUTTON_SHADOW,
        )

    font_size = style.font_size or _DEFAULT_FONT_SIZE
    stroke = None
    if font_size >= _STROKE_MIN_SIZE:
        stroke = _STROKE_ON_DARK if is_color_dark(colors.text) else _STROKE_ON_LIGHT
    return TextBlock(
        text=_element_text(element.type, content),
        origin=origin,
        width=canvas.width * area.width / 100,
        font_size=font_size,
        font_family=font_family,
        fill=colors.text,
        bold=style.font_weight == "bold",
        italic=style.font_style == "italic",
        line_height=style.line_height,
        align=style.text_align,
        centered=style.centered,
        stroke=stroke,
        shadow=_TEXT_SHADOW if font_size >= _SHADOW_MIN_SIZE else None,
        background=(style.background_color or _CHIP_DEFAULT) if style.with_background else None,
    )


def build_display_list(
    layout: LayoutTemplate,
    content: GeneratedContent,
    pattern: PatternConfig,
    image: Image.Image | None = None,
    rng: random.Random | None = None,
) -> DisplayList:
    """한 번의 렌더링에 필요한 드로잉 명령 목록을 만듭니다."""
    rng = rng or random.Random()
    width, height = layout.canvas.width, layout.canvas.height
    mood = content.design.style.mood

    ops = _build_background(width, height, pattern, mood, rng)

    if image is not None:
        ops.extend(_build_product_image(layout, image))

    font_family = _SERIF_FAMILY if mood == "luxurious" else _SANS_FAMILY
    for element in layout.content_area.elements:
        try:
            ops.append(_build_element(layout, element, content, font_family))
        except (KeyError, ValueError, TypeError) as exc:
            logger.error("Error building %s element: %s", element.type.value, exc)

    return DisplayList(width=width, height=height, ops=tuple(ops))


class BannerRenderer:
    """RenderTarget 위에 배너를 그립니다. 매 렌더마다 표면을 초기화합니다."""

    def __init__(
        self,
        target: RenderTarget,
        backend: DrawingBackend | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.target = target
        if backend is not None:
            self.target.backend = backend
        self.rng = rng or random.Random()

    @property
    def backend(self) -> DrawingBackend:
        return self.target.backend

    def render(
        self,
        layout: LayoutTemplate,
        content: GeneratedContent,
        image: Image.Image | None = None,
        pattern: PatternConfig | None = None,
    ) -> DisplayList:
        pattern = pattern or get_default_pattern()
        display_list = build_display_list(layout, content, pattern, image=image, rng=self.rng)
        logger.info(
            "Rendering layout '%s' (%d ops, image=%s)",
            layout.name,
            len(display_list.ops),
            image is not None,
        )
        self.target.draw(display_list)
        return display_list
