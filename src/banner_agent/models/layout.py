from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ElementType(str, Enum):
    LABEL = "label"
    HEADING = "heading"
    DESCRIPTION = "description"
    TAGLINE = "tagline"
    CTA = "cta"


class MaskShape(str, Enum):
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    OVERLAY = "overlay"


class Position(_Frozen):
    x: float = Field(description="캔버스 너비 대비 % (0~100)")
    y: float = Field(description="캔버스 높이 대비 % (0~100)")


class CanvasSize(_Frozen):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class ElementStyle(_Frozen):
    font_size: int | None = None
    font_weight: str = "normal"
    font_style: str = "normal"
    line_height: float = 1.2
    text_align: str = "left"
    centered: bool = False
    with_background: bool = False
    background_color: tuple[int, int, int, int] | None = Field(
        default=None, description="텍스트 배경 칩 색상 (RGBA)"
    )
    # CTA 버튼 전용
    width: int | None = None
    height: int | None = None
    border_radius: int | None = None


class ContentElement(_Frozen):
    type: ElementType
    position: Position = Field(description="콘텐츠 영역 기준 상대 위치 (%)")
    style: ElementStyle = ElementStyle()


class ContentArea(_Frozen):
    position: Position
    width: float = Field(description="캔버스 너비 대비 % — 텍스트 줄바꿈 폭")
    elements: tuple[ContentElement, ...]


class ImageArea(_Frozen):
    position: Position = Field(description="제품 이미지 중심점 (%)")
    width: float
    mask: MaskShape
    opacity: float = Field(default=1.0, ge=0, le=1)


class BackgroundSpec(_Frozen):
    """배경 스타일 힌트 (패턴 생성 요청에 함께 전달됨)."""

    base: str = "gradient"
    pattern: str = "dots"
    accent: str = "none"


class LayoutTemplate(_Frozen):
    name: str
    canvas: CanvasSize
    content_area: ContentArea
    image_area: ImageArea
    background: BackgroundSpec
