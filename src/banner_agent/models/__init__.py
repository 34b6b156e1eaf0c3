from .content import Design, DesignColors, DesignStyle, GeneratedContent, GenerationSource
from .display_list import DisplayList
from .layout import (
    ContentArea,
    ContentElement,
    ElementStyle,
    ElementType,
    ImageArea,
    LayoutTemplate,
    MaskShape,
)
from .pattern import PatternColors, PatternConfig, PatternElement, SizeRange

__all__ = [
    "GenerationSource",
    "DesignColors",
    "DesignStyle",
    "Design",
    "GeneratedContent",
    "ElementType",
    "MaskShape",
    "ElementStyle",
    "ContentElement",
    "ContentArea",
    "ImageArea",
    "LayoutTemplate",
    "SizeRange",
    "PatternElement",
    "PatternColors",
    "PatternConfig",
    "DisplayList",
]
