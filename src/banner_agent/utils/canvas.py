"""
Pillow 드로잉 백엔드 + 렌더 타깃

디스플레이 리스트의 명령을 순서대로 RGBA 캔버스에 합성합니다.
각 명령은 투명 레이어에 그린 뒤 alpha_composite 하므로 불투명도가 보존됩니다.
개별 명령 실패는 로깅만 하고 나머지 렌더링은 계속합니다.
"""
from __future__ import annotations

import logging
import math
import random
from typing import Protocol

from PIL import Image, ImageChops, ImageDraw, ImageFilter

from banner_agent.config import Settings
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
from banner_agent.models.layout import MaskShape
from banner_agent.utils.color_utils import hex_to_rgb, hex_to_rgba
from banner_agent.utils.image_utils import image_to_bytes, load_font, text_width, wrap_text

logger = logging.getLogger(__name__)

_CHIP_PADDING = 15
_BUTTON_BORDER = (255, 255, 255, 128)
_BUTTON_HIGHLIGHT = (255, 255, 255, 51)
_BUTTON_TEXT_SHADOW = Shadow(color=(0, 0, 0, 77), blur=2, offset_x=1, offset_y=1)
_WAVE_SAMPLES = 24


class DrawingBackend(Protocol):
    def rasterize(self, display_list: DisplayList) -> Image.Image: ...


def _layer(size: tuple[int, int]) -> Image.Image:
    return Image.new("RGBA", size, (0, 0, 0, 0))


def _composite_shadow(canvas: Image.Image, shape_layer: Image.Image, shadow: Shadow) -> Image.Image:
    """shape_layer의 알파를 그림자 색으로 칠해 흐림·오프셋 후 합성합니다."""
    alpha = shape_layer.getchannel("A").point(lambda a: a * shadow.color[3] // 255)
    tinted = Image.new("RGBA", canvas.size, shadow.color[:3] + (0,))
    tinted.putalpha(alpha)
    if shadow.blur > 0:
        tinted = tinted.filter(ImageFilter.GaussianBlur(shadow.blur / 2))
    shifted = _layer(canvas.size)
    shifted.paste(tinted, (round(shadow.offset_x), round(shadow.offset_y)))
    return Image.alpha_composite(canvas, shifted)


class PillowBackend:
    """DisplayList → PIL Image."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    def rasterize(self, display_list: DisplayList) -> Image.Image:
        canvas = Image.new("RGBA", (display_list.width, display_list.height), (0, 0, 0, 255))
        for op in display_list.ops:
            try:
                if isinstance(op, ProductImage):
                    canvas, applied = self._draw_product_image(canvas, op)
                    logger.info("Product image applied: %s", applied)
                else:
                    canvas = self._draw(canvas, op)
            except Exception:
                logger.exception("Failed to draw %s, skipping", type(op).__name__)
        return canvas

    def _draw(self, canvas: Image.Image, op: DrawOp) -> Image.Image:
        handlers = {
            LinearGradient: self._draw_linear_gradient,
            RadialVignette: self._draw_vignette,
            TextureOverlay: self._draw_texture,
            CircleShape: self._draw_circle,
            RectShape: self._draw_rect,
            WaveShape: self._draw_wave,
            LineShape: self._draw_line,
            GlowRing: self._draw_glow_ring,
            TextBlock: self._draw_text_block,
            Button: self._draw_button,
        }
        handler = handlers.get(type(op))
        if handler is None:
            logger.warning("No handler for draw op %s", type(op).__name__)
            return canvas
        return handler(canvas, op)

    # ── 배경 ────────────────────────────────────────────────────────────────
    def _draw_linear_gradient(self, canvas: Image.Image, op: LinearGradient) -> Image.Image:
        w, h = canvas.size
        denom = w * w + h * h
        # t(x, y) = (x·w + y·h) / (w² + h²) — 좌상단 0, 우하단 1
        base = Image.linear_gradient("L")
        vertical = base.resize((w, h)).point(lambda v: v * (h * h) / denom)
        horizontal = base.transpose(Image.Transpose.TRANSPOSE).resize((w, h)).point(
            lambda v: v * (w * w) / denom
        )
        mask = ImageChops.add(vertical, horizontal)
        start = Image.new("RGBA", (w, h), hex_to_rgb(op.start) + (255,))
        end = Image.new("RGBA", (w, h), hex_to_rgb(op.end) + (255,))
        return Image.composite(end, start, mask)

    def _draw_vignette(self, canvas: Image.Image, op: RadialVignette) -> Image.Image:
        w, h = canvas.size
        outer = max(w, h)
        inner = min(w, h) * op.inner_ratio
        # radial_gradient: 중심 0 → 반지름 128px 에서 255
        size = outer * 2
        distance = Image.radial_gradient("L").resize((size, size))
        left, top = (size - w) // 2, (size - h) // 2
        distance = distance.crop((left, top, left + w, top + h))

        def to_alpha(v: int) -> int:
            d = v / 255 * outer
            if d <= inner:
                return 0
            return min(op.max_alpha, round(op.max_alpha * (d - inner) / (outer - inner)))

        vignette = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        vignette.putalpha(distance.point(to_alpha))
        return Image.alpha_composite(canvas, vignette)

    def _build_texture_tile(self, op: TextureOverlay) -> Image.Image:
        rng = random.Random(op.seed)
        size = op.tile_size
        tile = Image.new("RGBA", (size, size), hex_to_rgba(op.base_color, 0.1))
        draw = ImageDraw.Draw(tile)

        # 노이즈 점
        for _ in range(size * size // 20):
            x = rng.random() * size
            y = rng.random() * size
            r = rng.random() * 2 + 1
            opacity = rng.random() * 0.1 + 0.05
            draw.ellipse([x - r, y - r, x + r, y + r], fill=hex_to_rgba(op.element_color, opacity))

        # 대각선
        line_color = hex_to_rgba(op.element_color, 0.05)
        for i in range(size // 15):
            spacing = i * 15
            draw.line([(0, spacing), (spacing, 0)], fill=line_color, width=1)
            draw.line([(size, spacing), (spacing, size)], fill=line_color, width=1)
        return tile

    def _draw_texture(self, canvas: Image.Image, op: TextureOverlay) -> Image.Image:
        tile = self._build_texture_tile(op)
        w, h = canvas.size
        overlay = _layer((w, h))
        for x in range(0, w, op.tile_size):
            for y in range(0, h, op.tile_size):
                overlay.paste(tile, (x, y))
        alpha = overlay.getchannel("A").point(lambda a: round(a * op.opacity))
        overlay.putalpha(alpha)
        return Image.alpha_composite(canvas, overlay)

    # ── 장식 도형 ───────────────────────────────────────────────────────────
    def _draw_circle(self, canvas: Image.Image, op: CircleShape) -> Image.Image:
        overlay = _layer(canvas.size)
        x, y = op.center
        r = op.radius
        ImageDraw.Draw(overlay).ellipse(
            [x - r, y - r, x + r, y + r], fill=hex_to_rgba(op.fill, op.opacity)
        )
        return Image.alpha_composite(canvas, overlay)

    def _draw_rect(self, canvas: Image.Image, op: RectShape) -> Image.Image:
        overlay = _layer(canvas.size)
        ox, oy = op.origin
        theta = math.radians(op.angle)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        corners = [(0, 0), (op.width, 0), (op.width, op.height), (0, op.height)]
        polygon = [(ox + cx * cos_t - cy * sin_t, oy + cx * sin_t + cy * cos_t) for cx, cy in corners]
        ImageDraw.Draw(overlay).polygon(polygon, fill=hex_to_rgba(op.fill, op.opacity))
        return Image.alpha_composite(canvas, overlay)

    def _draw_wave(self, canvas: Image.Image, op: WaveShape) -> Image.Image:
        overlay = _layer(canvas.size)
        ox, oy = op.origin
        w, h = op.width, op.height
        # M 0 h/2  Q w/4 0, w/2 h/2  T w h/2 (T 제어점 = 이전 제어점의 반사)
        segments = [
            ((0, h / 2), (w / 4, 0), (w / 2, h / 2)),
            ((w / 2, h / 2), (3 * w / 4, h), (w, h / 2)),
        ]
        points = []
        for p0, c, p1 in segments:
            for i in range(_WAVE_SAMPLES + 1):
                t = i / _WAVE_SAMPLES
                x = (1 - t) ** 2 * p0[0] + 2 * (1 - t) * t * c[0] + t ** 2 * p1[0]
                y = (1 - t) ** 2 * p0[1] + 2 * (1 - t) * t * c[1] + t ** 2 * p1[1]
                points.append((ox + x, oy + y))
        ImageDraw.Draw(overlay).line(
            points, fill=hex_to_rgba(op.stroke, op.opacity), width=op.stroke_width, joint="curve"
        )
        return Image.alpha_composite(canvas, overlay)

    def _draw_line(self, canvas: Image.Image, op: LineShape) -> Image.Image:
        overlay = _layer(canvas.size)
        ox, oy = op.origin
        theta = math.radians(op.angle)
        end = (ox + op.length * math.cos(theta), oy + op.length * math.sin(theta))
        ImageDraw.Draw(overlay).line(
            [(ox, oy), end], fill=hex_to_rgba(op.stroke, op.opacity), width=op.stroke_width
        )
        return Image.alpha_composite(canvas, overlay)

    def _draw_glow_ring(self, canvas: Image.Image, op: GlowRing) -> Image.Image:
        overlay = _layer(canvas.size)
        x, y = op.center
        r = op.radius
        ImageDraw.Draw(overlay).ellipse(
            [x - r, y - r, x + r, y + r],
            outline=hex_to_rgba(op.stroke, op.opacity),
            width=op.stroke_width,
        )
        return Image.alpha_composite(canvas, overlay)

    # ── 제품 이미지 ─────────────────────────────────────────────────────────
    def _draw_product_image(
        self, canvas: Image.Image, op: ProductImage
    ) -> tuple[Image.Image, bool]:
        """제품 이미지를 마스크와 함께 합성합니다. (캔버스, 성공 여부)를 반환합니다."""
        try:
            src = op.image.convert("RGBA")
            new_w = max(1, round(src.width * op.scale))
            new_h = max(1, round(src.height * op.scale))
            product = src.resize((new_w, new_h), Image.Resampling.LANCZOS)

            mask = Image.new("L", (new_w, new_h), 0)
            mask_draw = ImageDraw.Draw(mask)
            if op.mask is MaskShape.CIRCLE:
                r = min(new_w, new_h) / 2
                cx, cy = new_w / 2, new_h / 2
                mask_draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=255)
            elif op.mask is MaskShape.RECTANGLE:
                mask_draw.rounded_rectangle(
                    [0, 0, new_w - 1, new_h - 1], radius=op.corner_radius, fill=255
                )
            else:
                mask.paste(255, (0, 0, new_w, new_h))

            alpha = ImageChops.multiply(product.getchannel("A"), mask)
            if op.opacity < 1:
                alpha = alpha.point(lambda a: round(a * op.opacity))
            product.putalpha(alpha)

            overlay = _layer(canvas.size)
            cx, cy = op.center
            overlay.paste(product, (round(cx - new_w / 2), round(cy - new_h / 2)), product)
            return Image.alpha_composite(canvas, overlay), True
        except (OSError, ValueError) as exc:
            logger.error("Error applying product image: %s", exc)
            return canvas, False

    # ── 텍스트 ──────────────────────────────────────────────────────────────
    def _draw_text_block(self, canvas: Image.Image, op: TextBlock) -> Image.Image:
        font = load_font(op.font_family, op.font_size, op.bold, op.italic, self.settings)
        lines = wrap_text(op.text, font, op.width)
        line_h = op.font_size * op.line_height
        block_h = line_h * len(lines)
        line_widths = [text_width(line, font) for line in lines]
        block_w = max(line_widths, default=0)

        x, y = op.origin
        if op.centered:
            left, top = x - block_w / 2, y - block_h / 2
        else:
            left, top = x, y

        if op.background is not None:
            chip = _layer(canvas.size)
            ImageDraw.Draw(chip).rounded_rectangle(
                [
                    left - _CHIP_PADDING,
                    top - _CHIP_PADDING / 2,
                    left + block_w + _CHIP_PADDING,
                    top + block_h + _CHIP_PADDING / 2,
                ],
                radius=4,
                fill=op.background,
            )
            canvas = Image.alpha_composite(canvas, chip)

        text_layer = _layer(canvas.size)
        draw = ImageDraw.Draw(text_layer)
        fill = hex_to_rgba(op.fill, 1.0)
        for i, (line, line_w) in enumerate(zip(lines, line_widths)):
            if op.centered or op.align == "center":
                line_x = left + (block_w - line_w) / 2 if op.centered else x + (op.width - line_w) / 2
            elif op.align == "right":
                line_x = x + op.width - line_w
            else:
                line_x = left
            line_y = top + i * line_h
            if op.stroke is not None:
                draw.text((line_x, line_y), line, font=font, fill=fill, stroke_width=1, stroke_fill=op.stroke)
            else:
                draw.text((line_x, line_y), line, font=font, fill=fill)

        if op.shadow is not None:
            canvas = _composite_shadow(canvas, text_layer, op.shadow)
        return Image.alpha_composite(canvas, text_layer)

    def _draw_button(self, canvas: Image.Image, op: Button) -> Image.Image:
        x, y = op.origin
        if op.centered:
            x, y = x - op.width / 2, y - op.height / 2
        box = [x, y, x + op.width, y + op.height]

        body = _layer(canvas.size)
        ImageDraw.Draw(body).rounded_rectangle(box, radius=op.radius, fill=hex_to_rgba(op.fill, 1.0))
        if op.shadow is not None:
            canvas = _composite_shadow(canvas, body, op.shadow)

        border = _layer(canvas.size)
        ImageDraw.Draw(border).rounded_rectangle(
            [x - 1, y - 1, x + op.width + 1, y + op.height + 1],
            radius=op.radius + 1,
            outline=_BUTTON_BORDER,
            width=1,
        )
        canvas = Image.alpha_composite(canvas, border)
        canvas = Image.alpha_composite(canvas, body)

        highlight = _layer(canvas.size)
        ImageDraw.Draw(highlight).rounded_rectangle(
            [x, y, x + op.width, y + op.height / 2],
            radius=min(op.radius, op.height // 4),
            fill=_BUTTON_HIGHLIGHT,
        )
        canvas = Image.alpha_composite(canvas, highlight)

        font = load_font(op.font_family, op.font_size, True, False, self.settings)
        label = _layer(canvas.size)
        ImageDraw.Draw(label).text(
            (x + op.width / 2, y + op.height / 2),
            op.text,
            font=font,
            fill=hex_to_rgba(op.text_color, 1.0),
            anchor="mm",
        )
        canvas = _composite_shadow(canvas, label, _BUTTON_TEXT_SHADOW)
        return Image.alpha_composite(canvas, label)


class RenderTarget:
    """세션 동안 유지되는 단일 드로잉 표면. 매 렌더 시작 시 초기화됩니다."""

    def __init__(
        self,
        surface_id: str,
        width: int = 1200,
        height: int = 600,
        backend: DrawingBackend | None = None,
    ) -> None:
        self.surface_id = surface_id
        self.width = width
        self.height = height
        self.backend = backend or PillowBackend()
        self.image: Image.Image | None = None
        self.display_list: DisplayList | None = None

    @property
    def has_render(self) -> bool:
        return self.image is not None

    def reset(self, width: int, height: int) -> None:
        """표면을 비우고 크기를 변경합니다."""
        self.width = width
        self.height = height
        self.image = None
        self.display_list = None

    def draw(self, display_list: DisplayList) -> Image.Image:
        self.reset(display_list.width, display_list.height)
        self.image = self.backend.rasterize(display_list)
        self.display_list = display_list
        return self.image

    def to_png_bytes(self) -> bytes | None:
        if self.image is None:
            return None
        return image_to_bytes(self.image, format="PNG")
