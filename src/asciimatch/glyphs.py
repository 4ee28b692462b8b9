from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

GLYPH_SIZE = 16
INK_THRESHOLD = 128


class GlyphRasterizer:
    """Renders characters into fixed-size boolean bitmaps and measures their ink coverage.

    Brightness is cached per character, so each glyph is drawn at most once.
    """

    def __init__(self, font_path: str | Path | None = None, size: int = GLYPH_SIZE):
        self.size = size
        self.font_path = font_path
        if font_path is None:
            self.font = ImageFont.load_default(size=size)
        else:
            self.font = ImageFont.truetype(str(font_path), size)
        self._cache: dict[str, float] = {}

    def bitmap(self, char: str) -> np.ndarray:
        """Boolean (size, size) array, True where the glyph has ink."""
        img = Image.new("L", (self.size, self.size), 0)
        draw = ImageDraw.Draw(img)
        left, top, right, bottom = self.font.getbbox(char)
        # Center the glyph's ink box in the cell
        x = (self.size - (right - left)) / 2 - left
        y = (self.size - (bottom - top)) / 2 - top
        draw.text((x, y), char, fill=255, font=self.font)
        return np.asarray(img) >= INK_THRESHOLD

    def brightness(self, char: str) -> float:
        """Fraction of the bitmap covered by ink, in [0, 1]."""
        if char not in self._cache:
            bits = self.bitmap(char)
            self._cache[char] = float(bits.sum()) / bits.size
            logger.debug("Glyph %r brightness %.4f", char, self._cache[char])
        return self._cache[char]

    __call__ = brightness


_default: GlyphRasterizer | None = None


def default_rasterizer() -> GlyphRasterizer:
    global _default
    if _default is None:
        _default = GlyphRasterizer()
    return _default


def glyph_brightness(char: str) -> float:
    return default_rasterizer().brightness(char)
