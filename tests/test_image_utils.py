"""이미지 로더 / 폰트 유틸리티 테스트"""
import io

import httpx
import pytest
from PIL import Image

from banner_agent.config import Settings
from banner_agent.errors import ImageLoadError
from banner_agent.utils import image_utils
from banner_agent.utils.image_utils import image_to_bytes, load_font, load_image, wrap_text


def _make_png(size=(40, 20), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.mark.asyncio
async def test_load_image_from_path(tmp_path):
    path = tmp_path / "product.png"
    path.write_bytes(_make_png())

    image = await load_image(path)
    assert image.size == (40, 20)
    assert image.mode == "RGBA"


@pytest.mark.asyncio
async def test_load_image_from_bytes_and_file_object():
    data = _make_png(size=(8, 8))
    assert (await load_image(data)).size == (8, 8)
    assert (await load_image(io.BytesIO(data))).size == (8, 8)


@pytest.mark.asyncio
async def test_undecodable_data_raises_image_load_error():
    with pytest.raises(ImageLoadError, match="Failed to load image"):
        await load_image(b"this is not an image")


@pytest.mark.asyncio
async def test_missing_file_raises_image_load_error(tmp_path):
    with pytest.raises(ImageLoadError):
        await load_image(tmp_path / "missing.png")


@pytest.mark.asyncio
async def test_download_failure_raises_image_load_error(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    monkeypatch.setattr(
        image_utils,
        "create_http_client",
        lambda settings=None: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    with pytest.raises(ImageLoadError):
        await load_image("https://example.com/product.png")


@pytest.mark.asyncio
async def test_download_success(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_make_png(size=(12, 6)))

    monkeypatch.setattr(
        image_utils,
        "create_http_client",
        lambda settings=None: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    image = await load_image("https://example.com/product.png")
    assert image.size == (12, 6)


def test_missing_font_falls_back_to_default(tmp_path):
    settings = Settings(font_dir=str(tmp_path), _env_file=None)
    font = load_font("Montserrat", 24, bold=True, settings=settings)
    assert font.getbbox("Hello")[2] > 0


def test_wrap_text_respects_width():
    font = load_font("Montserrat", 20, settings=Settings(_env_file=None))
    lines = wrap_text("Experience excellence in every detail", font, 120)
    assert len(lines) > 1
    assert " ".join(lines) == "Experience excellence in every detail"


def test_wrap_text_splits_long_words():
    font = load_font("Montserrat", 20, settings=Settings(_env_file=None))
    lines = wrap_text("Supercalifragilisticexpialidocious", font, 60)
    assert len(lines) > 1
    assert "".join(lines) == "Supercalifragilisticexpialidocious"


def test_image_to_bytes_png_signature():
    data = image_to_bytes(Image.new("RGBA", (4, 4)))
    assert data.startswith(b"\x89PNG")


@pytest.mark.asyncio
async def test_oversized_image_raises_image_load_error(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ImageLoadError):
        await load_image(_make_png(size=(40, 20)))
