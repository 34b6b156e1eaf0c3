"""
색상 정규화 유틸리티

AI 응답의 색상 값은 신뢰할 수 없으므로 렌더링을 막지 않도록 항상 유효한
6자리 HEX 문자열로 수렴시킵니다.

  1) 이미 유효한 HEX → 그대로
  2) 알려진 색상 이름 → 고정 테이블 조회
  3) 그 외 → 무드별 팔레트에서 무작위 선택 (알 수 없는 무드는 기본 팔레트)
"""
from __future__ import annotations

import random
import re
from dataclasses import dataclass
from enum import Enum

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

COLOR_NAME_MAP: dict[str, str] = {
    "red": "#FF0000",
    "green": "#008000",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "purple": "#800080",
    "gold": "#FFD700",
    "silver": "#C0C0C0",
    "black": "#000000",
    "white": "#FFFFFF",
    "gray": "#808080",
    "pink": "#FFC0CB",
    "brown": "#A52A2A",
    "orange": "#FFA500",
    "teal": "#008080",
    "navy": "#000080",
    "maroon": "#800000",
    "coral": "#FF7F50",
    "lime": "#00FF00",
    "dark gold": "#B8860B",
    "dark blue": "#00008B",
    "dark purple": "#301934",
    "turquoise": "#40E0D0",
    "indigo": "#4B0082",
    "violet": "#8A2BE2",
    "magenta": "#FF00FF",
    "cyan": "#00FFFF",
}

MOOD_PALETTES: dict[str, list[str]] = {
    "luxurious": ["#4B0082", "#6A0DAD", "#8A2BE2", "#800080"],
    "modern": ["#2980b9", "#3498db", "#7f8c8d", "#95a5a6"],
    "playful": ["#e74c3c", "#f1c40f", "#2ecc71", "#3498db"],
    "elegant": ["#2c3e50", "#34495e", "#7f8c8d", "#95a5a6"],
    "vintage": ["#c0392b", "#d35400", "#e67e22", "#f39c12"],
    "minimalist": ["#2c3e50", "#34495e", "#7f8c8d", "#95a5a6"],
}

DEFAULT_PALETTE: list[str] = ["#4B0082", "#6A0DAD", "#8A2BE2", "#800080"]

_LIGHTEN_OFFSET = 102  # 채널당 +40%
_DARK_THRESHOLD = 128


class ColorTier(str, Enum):
    """색상이 어느 단계에서 결정되었는지 나타냅니다."""

    HEX = "hex"
    NAMED = "named"
    MOOD_PALETTE = "mood_palette"
    DEFAULT_PALETTE = "default_palette"
    # 상위 블록 전체가 고정 기본값으로 대체된 경우
    DEFAULT = "default"


@dataclass(frozen=True)
class ColorResolution:
    value: str
    tier: ColorTier


def normalize_color(
    color: object,
    mood: str | None = None,
    rng: random.Random | None = None,
) -> ColorResolution:
    """색상 후보를 유효한 HEX로 정규화하고 적용된 단계를 함께 반환합니다.

    실패를 알리지 않으며 어떤 입력에도 예외를 던지지 않습니다.
    """
    if isinstance(color, str):
        candidate = color.strip()
        if HEX_COLOR_PATTERN.match(candidate):
            return ColorResolution(candidate, ColorTier.HEX)

        named = COLOR_NAME_MAP.get(candidate.lower())
        if named:
            return ColorResolution(named, ColorTier.NAMED)

    rng = rng or random
    palette = MOOD_PALETTES.get((mood or "").strip().lower())
    if palette:
        return ColorResolution(rng.choice(palette), ColorTier.MOOD_PALETTE)
    return ColorResolution(rng.choice(DEFAULT_PALETTE), ColorTier.DEFAULT_PALETTE)


def ensure_valid_color(
    color: object,
    mood: str | None = None,
    rng: random.Random | None = None,
) -> str:
    """항상 유효한 6자리 HEX 문자열을 반환합니다."""
    return normalize_color(color, mood=mood, rng=rng).value


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def hex_to_rgba(hex_color: str, alpha: float) -> tuple[int, int, int, int]:
    """HEX와 0~1 불투명도를 Pillow용 RGBA 튜플로 변환합니다."""
    r, g, b = hex_to_rgb(hex_color)
    a = max(0, min(255, round(alpha * 255)))
    return r, g, b, a


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def is_color_dark(hex_color: str) -> bool:
    """YIQ 밝기((299R + 587G + 114B) / 1000)가 128 미만이면 어두운 색."""
    r, g, b = hex_to_rgb(hex_color)
    yiq = (r * 299 + g * 587 + b * 114) / 1000
    return yiq < _DARK_THRESHOLD


def lightify_colors(colors: list[str]) -> list[str]:
    """각 채널을 +102 (최대 255) 만큼 밝게 조정합니다."""
    lightened = []
    for color in colors:
        r, g, b = hex_to_rgb(color)
        lightened.append(
            rgb_to_hex(
                (
                    min(255, r + _LIGHTEN_OFFSET),
                    min(255, g + _LIGHTEN_OFFSET),
                    min(255, b + _LIGHTEN_OFFSET),
                )
            )
        )
    return lightened
