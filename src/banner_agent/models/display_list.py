"""
렌더링 디스플레이 리스트

렌더러는 매 프레임 불변 드로잉 명령 목록을 만들고, 드로잉 백엔드는 이를
순서대로 그립니다. 뒤에 오는 명령이 위에 그려집니다 (z-order = 리스트 순서).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from PIL import Image

from banner_agent.models.layout import MaskShape

RGBA = tuple[int, int, int, int]
Point = tuple[float, float]


@dataclass(frozen=True)
class Shadow:
    color: RGBA
    blur: float
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class LinearGradient:
    """캔버스 좌상단 → 우하단 선형 그라디언트."""

    start: str
    end: str


@dataclass(frozen=True)
class RadialVignette:
    # inner_ratio × 짧은 변 안쪽은 투명, 긴 변 거리에서 max_alpha
    inner_ratio: float = 0.8
    max_alpha: int = 102


@dataclass(frozen=True)
class TextureOverlay:
    base_color: str
    element_color: str
    seed: int
    tile_size: int = 250
    opacity: float = 0.8


@dataclass(frozen=True)
class CircleShape:
    center: Point
    radius: float
    fill: str
    opacity: float


@dataclass(frozen=True)
class RectShape:
    origin: Point
    width: float
    height: float
    angle: float
    fill: str
    opacity: float


@dataclass(frozen=True)
class WaveShape:
    origin: Point
    width: float
    height: float
    stroke: str
    stroke_width: int
    opacity: float


@dataclass(frozen=True)
class LineShape:
    origin: Point
    length: float
    angle: float
    stroke: str
    stroke_width: int
    opacity: float


@dataclass(frozen=True)
class GlowRing:
    center: Point
    radius: float
    stroke: str
    stroke_width: int
    opacity: float


@dataclass(frozen=True)
class ProductImage:
    image: Image.Image = field(compare=False, repr=False)
    center: Point
    scale: float
    mask: MaskShape
    corner_radius: int = 20
    opacity: float = 1.0


@dataclass(frozen=True)
class TextBlock:
    text: str
    origin: Point
    width: float
    font_size: int
    font_family: str
    fill: str
    bold: bool = False
    italic: bool = False
    line_height: float = 1.2
    align: str = "left"
    centered: bool = False
    stroke: RGBA | None = None
    shadow: Shadow | None = None
    background: RGBA | None = None


@dataclass(frozen=True)
class Button:
    text: str
    origin: Point
    width: int
    height: int
    fill: str
    text_color: str
    radius: int
    font_size: int
    font_family: str
    centered: bool = False
    shadow: Shadow | None = None


DrawOp = Union[
    LinearGradient,
    RadialVignette,
    TextureOverlay,
    CircleShape,
    RectShape,
    WaveShape,
    LineShape,
    GlowRing,
    ProductImage,
    TextBlock,
    Button,
]


@dataclass(frozen=True)
class DisplayList:
    width: int
    height: int
    ops: tuple[DrawOp, ...] = ()

    def of_type(self, op_type: type) -> list:
        return [op for op in self.ops if isinstance(op, op_type)]
