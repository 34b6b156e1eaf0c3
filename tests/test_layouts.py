"""레이아웃 템플릿 테스트"""
import random

import pytest

from banner_agent.layouts import (
    DEFAULT_LAYOUT,
    LAYOUTS,
    available_layouts,
    format_layout_name,
    get_layout,
    get_random_layout,
)
from banner_agent.models.layout import ElementType, MaskShape


def test_known_layout_lookup():
    layout = get_layout("modernAgency")
    assert layout.name == "modernAgency"
    assert layout.image_area.mask is MaskShape.CIRCLE


@pytest.mark.parametrize("name", ["doesNotExist", "", None])
def test_unknown_layout_returns_default(name):
    assert get_layout(name) is LAYOUTS[DEFAULT_LAYOUT]


def test_six_layouts_available():
    assert available_layouts() == [
        "modernAgency",
        "productShowcase",
        "minimalDesign",
        "luxuryProduct",
        "minimalProduct",
        "vibrantRetail",
    ]


@pytest.mark.parametrize("name", list(LAYOUTS))
def test_layout_elements_stay_on_canvas(name):
    layout = LAYOUTS[name]
    assert (layout.canvas.width, layout.canvas.height) == (1200, 600)
    area = layout.content_area
    for element in area.elements:
        assert 0 <= area.position.x + element.position.x <= 100
        assert 0 <= area.position.y + element.position.y <= 100


@pytest.mark.parametrize("name", list(LAYOUTS))
def test_every_layout_has_cta(name):
    types = [e.type for e in LAYOUTS[name].content_area.elements]
    assert ElementType.CTA in types


def test_minimal_design_overlay_is_translucent():
    area = get_layout("minimalDesign").image_area
    assert area.mask is MaskShape.OVERLAY
    assert area.opacity == pytest.approx(0.2)


def test_random_layout_uses_rng():
    assert get_random_layout(random.Random(7)).name in LAYOUTS


def test_format_layout_name():
    assert format_layout_name("modernAgency") == "Modern Agency"
    assert format_layout_name("vibrantRetail") == "Vibrant Retail"
