"""Pillow 드로잉 백엔드 / 렌더 타깃 테스트"""
import io
import random
from unittest.mock import patch

import pytest
from PIL import Image

from banner_agent.agents.copywriter import get_fallback_content
from banner_agent.agents.pattern_designer import get_default_pattern
from banner_agent.agents.renderer import BannerRenderer, build_display_list
from banner_agent.layouts import get_layout
from banner_agent.models.display_list import (
    CircleShape,
    DisplayList,
    LinearGradient,
    ProductImage,
    TextBlock,
)
from banner_agent.models.layout import MaskShape
from banner_agent.utils.canvas import PillowBackend, RenderTarget


def _make_target():
    return RenderTarget("bannerCanvas")


def test_gradient_runs_top_left_to_bottom_right():
    image = PillowBackend().rasterize(
        DisplayList(width=120, height=60, ops=(LinearGradient(start="#000000", end="#FFFFFF"),))
    )
    assert image.size == (120, 60)
    top_left = image.getpixel((0, 0))
    bottom_right = image.getpixel((119, 59))
    assert top_left[0] < 10
    assert bottom_right[0] > 245


def test_later_ops_draw_on_top():
    ops = (
        LinearGradient(start="#000000", end="#000000"),
        CircleShape(center=(50, 50), radius=20, fill="#FF0000", opacity=1.0),
        CircleShape(center=(50, 50), radius=20, fill="#0000FF", opacity=1.0),
    )
    image = PillowBackend().rasterize(DisplayList(width=100, height=100, ops=ops))
    assert image.getpixel((50, 50))[:3] == (0, 0, 255)


def test_translucent_shape_blends():
    ops = (
        LinearGradient(start="#000000", end="#000000"),
        CircleShape(center=(50, 50), radius=20, fill="#FFFFFF", opacity=0.5),
    )
    image = PillowBackend().rasterize(DisplayList(width=100, height=100, ops=ops))
    assert 100 < image.getpixel((50, 50))[0] < 160


def test_circle_mask_clips_product_image():
    product = Image.new("RGBA", (100, 100), (255, 0, 0, 255))
    ops = (
        LinearGradient(start="#000000", end="#000000"),
        ProductImage(image=product, center=(100, 100), scale=1.0, mask=MaskShape.CIRCLE),
    )
    image = PillowBackend().rasterize(DisplayList(width=200, height=200, ops=ops))
    assert image.getpixel((100, 100))[:3] == (255, 0, 0)
    # 사각형 모서리는 원형 마스크 밖
    assert image.getpixel((52, 52))[:3] == (0, 0, 0)


@pytest.mark.parametrize("error", [OSError("font broken"), AttributeError("no glyph"), IndexError("line index")])
def test_failed_op_is_skipped(caplog, error):
    ops = (
        LinearGradient(start="#000000", end="#000000"),
        TextBlock(text="Hello", origin=(10, 10), width=100, font_size=20, font_family="Montserrat", fill="#FFFFFF"),
        CircleShape(center=(50, 50), radius=10, fill="#00FF00", opacity=1.0),
    )
    with patch.object(PillowBackend, "_draw_text_block", side_effect=error):
        image = PillowBackend().rasterize(DisplayList(width=100, height=100, ops=ops))

    assert image.getpixel((50, 50))[:3] == (0, 255, 0)
    assert "Failed to draw TextBlock" in caplog.text


def test_render_target_lifecycle():
    target = _make_target()
    assert target.has_render is False
    assert target.to_png_bytes() is None

    target.draw(DisplayList(width=64, height=32, ops=(LinearGradient(start="#112233", end="#445566"),)))
    assert target.has_render is True
    assert (target.width, target.height) == (64, 32)

    target.reset(1200, 600)
    assert target.has_render is False


def test_full_banner_render_to_png():
    target = _make_target()
    renderer = BannerRenderer(target, rng=random.Random(5))
    product = Image.new("RGBA", (400, 300), (10, 200, 120, 255))

    display_list = renderer.render(get_layout("modernAgency"), get_fallback_content(), image=product)

    png = target.to_png_bytes()
    assert png.startswith(b"\x89PNG")
    assert Image.open(io.BytesIO(png)).size == (1200, 600)
    assert display_list.of_type(ProductImage)
    assert target.display_list is display_list


def test_every_layout_rasterizes():
    backend = PillowBackend()
    product = Image.new("RGBA", (200, 200), (255, 255, 255, 255))
    for name in ("productShowcase", "minimalDesign", "luxuryProduct", "minimalProduct", "vibrantRetail"):
        display_list = build_display_list(
            get_layout(name), get_fallback_content(), get_default_pattern(), image=product, rng=random.Random(1)
        )
        assert backend.rasterize(display_list).size == (1200, 600)
