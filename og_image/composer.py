from __future__ import annotations

"""
Card renderer for wallet previews (Pillow + numpy).

Two layouts, picked once per request by `select_layout`:
  - EmptyCard:   centred display name over the onview.art logotype
  - PreviewGrid: up to six overlapping 280 px tiles + bottom-right branding

All geometry is fixed so identical inputs give byte-identical PNGs.
"""

import io
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont, ImageOps

from common.types import EmptyCard, Layout, PreviewGrid
from common.utils import tile_position


log = logging.getLogger(__name__)

WIDTH = 1200
HEIGHT = 630

# 135deg: top-left -> bottom-right
BACKGROUND_STOPS: Tuple[Tuple[float, str], ...] = (
    (0.0, "#1a1a2e"),
    (0.5, "#16213e"),
    (1.0, "#0f0f23"),
)
TEXT_COLOR = "#ffffff"
ACCENT_COLOR = "#6366f1"
LOGO_WORD = "onview"
LOGO_TLD = ".art"

MAX_TILES = 6
TILE_SIZE = 280
TILE_RADIUS = 12
TILE_BORDER_PX = 2
TILE_BORDER_RGBA = (255, 255, 255, 26)      # rgba(255,255,255,0.1)
TILE_PLACEHOLDER_RGBA = (255, 255, 255, 13)
TILE_SHADOW_RGBA = (0, 0, 0, 102)           # 0 8px 32px rgba(0,0,0,0.4)
TILE_SHADOW_OFFSET_Y = 8
TILE_SHADOW_BLUR = 16                       # css blur 32px ~ sigma 16
GRID_ORIGIN = (40, 40)

TEXT_SHADOW_RGBA = (0, 0, 0, 204)           # 0 2px 12px rgba(0,0,0,0.8)
TEXT_SHADOW_OFFSET_Y = 2
TEXT_SHADOW_BLUR = 6

FALLBACK_FONT = "DejaVuSans.ttf"

FontT = ImageFont.FreeTypeFont


def select_layout(urls: Sequence[str]) -> Layout:
    """EmptyCard for no previews, else a grid of at most six."""
    if not urls:
        return EmptyCard()
    return PreviewGrid(urls=tuple(urls[:MAX_TILES]))


def linear_gradient(
    size: Tuple[int, int] = (WIDTH, HEIGHT),
    stops: Sequence[Tuple[float, str]] = BACKGROUND_STOPS,
) -> Image.Image:
    """
    CSS-style 135deg linear gradient as an RGBA image.

    For 135deg the gradient line runs corner to corner and has length
    (w + h) * sin(45deg); projecting each pixel centre onto it reduces to
    t = ((x - cx) + (y - cy)) / (w + h) + 0.5.
    """
    w, h = size
    xs = np.arange(w, dtype=np.float64) + 0.5
    ys = np.arange(h, dtype=np.float64) + 0.5
    t = ((xs[None, :] - w / 2.0) + (ys[:, None] - h / 2.0)) / float(w + h) + 0.5

    positions = [float(p) for p, _ in stops]
    colors = [ImageColor.getrgb(c) for _, c in stops]
    channels = [np.interp(t, positions, [c[k] for c in colors]) for k in range(3)]
    rgb = np.clip(np.rint(np.stack(channels, axis=-1)), 0, 255).astype(np.uint8)
    return Image.fromarray(rgb).convert("RGBA")


def load_font(size: int, path: Optional[str] = None) -> FontT:
    """Configured font, then DejaVu Sans, then Pillow's bundled font."""
    for candidate in (path, FALLBACK_FONT):
        if not candidate:
            continue
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            log.debug("Font %s unavailable, trying next", candidate)
    return ImageFont.load_default(size=size)


def cover_tile(image: Image.Image, size: int = TILE_SIZE) -> Image.Image:
    """
    Cover-fit `image` into a size x size square with rounded corners and
    a thin translucent border.
    """
    fitted = ImageOps.fit(image.convert("RGBA"), (size, size), method=Image.Resampling.LANCZOS)
    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, size - 1, size - 1), radius=TILE_RADIUS, fill=255)

    tile = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    tile.paste(fitted, (0, 0), mask)
    return Image.alpha_composite(tile, _border_layer(size))


def placeholder_tile(size: int = TILE_SIZE) -> Image.Image:
    """Empty frosted panel used when a tile's artwork could not be loaded."""
    tile = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    ImageDraw.Draw(tile).rounded_rectangle(
        (0, 0, size - 1, size - 1), radius=TILE_RADIUS, fill=TILE_PLACEHOLDER_RGBA
    )
    return Image.alpha_composite(tile, _border_layer(size))


def _border_layer(size: int) -> Image.Image:
    layer = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    ImageDraw.Draw(layer).rounded_rectangle(
        (0, 0, size - 1, size - 1), radius=TILE_RADIUS, outline=TILE_BORDER_RGBA, width=TILE_BORDER_PX
    )
    return layer


class CardComposer:
    """
    Renders the 1200x630 card. Holds only fonts, so one instance can be
    shared across requests.
    """

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path
        self._fonts: Dict[int, FontT] = {}

    # ----------------------------
    # Public API
    # ----------------------------
    def render(
        self,
        layout: Layout,
        display_name: str,
        images: Sequence[Optional[Image.Image]] = (),
    ) -> Image.Image:
        if isinstance(layout, PreviewGrid):
            return self.render_preview_grid(display_name, images)
        return self.render_empty_card(display_name)

    def render_empty_card(self, display_name: str) -> Image.Image:
        canvas = linear_gradient()
        draw = ImageDraw.Draw(canvas)
        name_font = self.font(48)
        logo_font = self.font(32)

        name_asc, name_desc = name_font.getmetrics()
        logo_asc, logo_desc = logo_font.getmetrics()
        gap = 16
        block_h = (name_asc + name_desc) + gap + (logo_asc + logo_desc)
        top = (HEIGHT - block_h) / 2.0

        name_w = name_font.getlength(display_name)
        draw.text(
            ((WIDTH - name_w) / 2.0, top + name_asc),
            display_name, font=name_font, fill=TEXT_COLOR, anchor="ls",
        )

        logo_w = self._logotype_width(logo_font)
        baseline = top + name_asc + name_desc + gap + logo_asc
        self._draw_logotype(draw, ((WIDTH - logo_w) / 2.0, baseline), logo_font)
        return canvas

    def render_preview_grid(
        self,
        display_name: str,
        images: Sequence[Optional[Image.Image]],
    ) -> Image.Image:
        canvas = linear_gradient()
        for i, img in enumerate(list(images)[:MAX_TILES]):
            left, top = tile_position(i)
            x, y = GRID_ORIGIN[0] + left, GRID_ORIGIN[1] + top
            canvas = self._drop_shadow(canvas, (x, y))
            tile = cover_tile(img) if img is not None else placeholder_tile()
            canvas.alpha_composite(tile, dest=(x, y))
        return self._draw_branding(canvas, display_name)

    def font(self, size: int) -> FontT:
        if size not in self._fonts:
            self._fonts[size] = load_font(size, self.font_path)
        return self._fonts[size]

    # ----------------------------
    # Internals
    # ----------------------------
    def _logotype_width(self, font: FontT) -> float:
        return font.getlength(LOGO_WORD) + font.getlength(LOGO_TLD)

    def _draw_logotype(
        self,
        draw: ImageDraw.ImageDraw,
        baseline_xy: Tuple[float, float],
        font: FontT,
        colors: Tuple[object, object] = (TEXT_COLOR, ACCENT_COLOR),
    ) -> None:
        x, y = baseline_xy
        draw.text((x, y), LOGO_WORD, font=font, fill=colors[0], anchor="ls")
        draw.text((x + font.getlength(LOGO_WORD), y), LOGO_TLD, font=font, fill=colors[1], anchor="ls")

    def _drop_shadow(self, canvas: Image.Image, xy: Tuple[int, int]) -> Image.Image:
        """Blur a tile-sized layer padded by 3 sigma, then composite it in place."""
        pad = 3 * TILE_SHADOW_BLUR
        side = TILE_SIZE + 2 * pad
        layer = Image.new("RGBA", (side, side), (0, 0, 0, 0))
        ImageDraw.Draw(layer).rounded_rectangle(
            (pad, pad, pad + TILE_SIZE - 1, pad + TILE_SIZE - 1), radius=TILE_RADIUS, fill=TILE_SHADOW_RGBA
        )
        layer = layer.filter(ImageFilter.GaussianBlur(TILE_SHADOW_BLUR))

        # alpha_composite needs non-negative offsets; clip the layer instead
        dx = xy[0] - pad
        dy = xy[1] + TILE_SHADOW_OFFSET_Y - pad
        canvas.alpha_composite(layer, dest=(max(dx, 0), max(dy, 0)), source=(max(-dx, 0), max(-dy, 0)))
        return canvas

    def _draw_branding(self, canvas: Image.Image, display_name: str) -> Image.Image:
        """Display name + logotype, right-aligned 40 px from the bottom-right corner."""
        name_font = self.font(36)
        logo_font = self.font(24)
        right = WIDTH - 40
        bottom = HEIGHT - 40

        logo_asc, logo_desc = logo_font.getmetrics()
        logo_baseline = bottom - logo_desc
        logo_x = right - self._logotype_width(logo_font)

        _, name_desc = name_font.getmetrics()
        name_baseline = bottom - (logo_asc + logo_desc) - 8 - name_desc
        name_x = right - name_font.getlength(display_name)

        runs: List[Tuple[Tuple[float, float], str, FontT]] = [
            ((name_x, name_baseline), display_name, name_font),
            ((logo_x, logo_baseline), LOGO_WORD, logo_font),
            ((logo_x + logo_font.getlength(LOGO_WORD), logo_baseline), LOGO_TLD, logo_font),
        ]
        canvas = self._text_shadow(canvas, runs)

        draw = ImageDraw.Draw(canvas)
        draw.text((name_x, name_baseline), display_name, font=name_font, fill=TEXT_COLOR, anchor="ls")
        self._draw_logotype(draw, (logo_x, logo_baseline), logo_font)
        return canvas

    def _text_shadow(
        self,
        canvas: Image.Image,
        runs: Iterable[Tuple[Tuple[float, float], str, FontT]],
    ) -> Image.Image:
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        for (x, y), text, font in runs:
            draw.text((x, y + TEXT_SHADOW_OFFSET_Y), text, font=font, fill=TEXT_SHADOW_RGBA, anchor="ls")
        layer = layer.filter(ImageFilter.GaussianBlur(TEXT_SHADOW_BLUR))
        return Image.alpha_composite(canvas, layer)


def encode_png(image: Image.Image) -> bytes:
    """Flatten to RGB and encode. Errors propagate to the caller."""
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="PNG")
    return buf.getvalue()
