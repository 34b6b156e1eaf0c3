from .copywriter import generate_content
from .pattern_designer import generate_background_pattern
from .renderer import BannerRenderer, build_display_list

__all__ = [
    "generate_content",
    "generate_background_pattern",
    "build_display_list",
    "BannerRenderer",
]
