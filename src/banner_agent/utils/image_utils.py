from __future__ import annotations

import io
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO

import httpx
from PIL import Image, ImageFont, UnidentifiedImageError

from banner_agent.config import Settings, get_settings
from banner_agent.errors import ImageLoadError
from banner_agent.utils.http_client import create_http_client

# 기본 폰트 경로 — 패키지 내 assets/fonts/ (Montserrat, PlayfairDisplay 등)
_FONT_DIR = Path(__file__).parent.parent / "assets/fonts"

ImageSource = str | Path | bytes | BinaryIO


def _font_filename(family: str, bold: bool, italic: bool) -> str:
    if bold and italic:
        variant = "BoldItalic"
    elif bold:
        variant = "Bold"
    elif italic:
        variant = "Italic"
    else:
        variant = "Regular"
    return f"{family.replace(' ', '')}-{variant}.ttf"


@lru_cache(maxsize=64)
def _load_font_cached(
    font_dir: str, family: str, size: int, bold: bool, italic: bool
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    base = Path(font_dir)
    for name in (_font_filename(family, bold, italic), _font_filename(family, bold, False)):
        font_path = base / name
        if font_path.exists():
            return ImageFont.truetype(str(font_path), size=size)
    # Fallback: 폰트 파일이 없으면 Pillow 기본 폰트 — assets/fonts/ 에 TTF를 추가하세요
    return ImageFont.load_default(size=size)


def load_font(
    family: str,
    size: int,
    bold: bool = False,
    italic: bool = False,
    settings: Settings | None = None,
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """폰트 패밀리/굵기/기울임에 맞는 폰트를 로드합니다. 없으면 기본 폰트로 fallback."""
    settings = settings or get_settings()
    font_dir = settings.font_dir or str(_FONT_DIR)
    return _load_font_cached(font_dir, family, max(1, int(size)), bold, italic)


def text_width(text: str, font) -> int:
    bbox = font.getbbox(text)
    return bbox[2] - bbox[0]


def wrap_text(text: str, font, max_width: float) -> list[str]:
    """텍스트를 max_width에 맞게 단어 단위로 자동 줄바꿈합니다.

    단어 하나가 max_width보다 길면 문자 단위로 나눕니다.
    """
    lines: list[str] = []
    for paragraph in text.split("\n"):
        current_line = ""
        for word in paragraph.split():
            test_line = f"{current_line} {word}".strip()
            if text_width(test_line, font) <= max_width:
                current_line = test_line
                continue
            if current_line:
                lines.append(current_line)
            current_line = ""
            for char in word:
                if current_line and text_width(current_line + char, font) > max_width:
                    lines.append(current_line)
                    current_line = char
                else:
                    current_line += char
        lines.append(current_line)
    return lines


def _decode(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ImageLoadError(str(exc)) from exc
    return image.convert("RGBA")


async def download_image(url: str, settings: Settings | None = None) -> Image.Image:
    """URL에서 이미지를 다운로드하여 PIL Image로 반환합니다."""
    try:
        async with create_http_client(settings) as client:
            response = await client.get(url, timeout=30)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        raise ImageLoadError(str(exc)) from exc
    return _decode(response.content)


async def load_image(source: ImageSource, settings: Settings | None = None) -> Image.Image:
    """사용자가 선택한 이미지를 디코드된 RGBA PIL Image로 로드합니다.

    - HTTPS/HTTP URL → httpx로 다운로드
    - 로컬 파일 경로 / bytes / 바이너리 파일 객체 → 직접 디코드

    Raises:
        ImageLoadError: 읽기 또는 디코드 실패
    """
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return await download_image(source, settings)

    if isinstance(source, bytes):
        return _decode(source)

    if isinstance(source, (str, Path)):
        try:
            data = Path(source).read_bytes()
        except OSError as exc:
            raise ImageLoadError(str(exc)) from exc
        return _decode(data)

    try:
        data = source.read()
    except (OSError, ValueError) as exc:
        raise ImageLoadError(str(exc)) from exc
    return _decode(data)


def image_to_bytes(image: Image.Image, format: str = "PNG") -> bytes:
    """PIL Image를 bytes로 변환합니다."""
    buffer = io.BytesIO()
    if format.upper() == "PNG":
        image.save(buffer, format=format)
    else:
        image.convert("RGB").save(buffer, format=format)
    return buffer.getvalue()
