from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from asciimatch.errors import ImageLoadError

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)


@dataclass(frozen=True, eq=False)
class Image:
    """Immutable RGB pixel grid backed by a read-only (height, width, 3) uint8 array."""

    pixels: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.pixels, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected a (height, width, 3) array, got shape {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ValueError("Image dimensions must be positive")
        if arr.flags.writeable:
            arr = arr.copy()
            arr.flags.writeable = False
        object.__setattr__(self, "pixels", arr)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def pixel(self, row: int, col: int) -> tuple[int, int, int]:
        r, g, b = self.pixels[row, col]
        return int(r), int(g), int(b)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[tuple[int, int, int]]]) -> "Image":
        """Build an image from a row-major buffer of (r, g, b) triples."""
        return cls(np.array(rows, dtype=np.uint8).reshape(len(rows), -1, 3))

    @classmethod
    def solid(cls, width: int, height: int, colour: tuple[int, int, int] = WHITE) -> "Image":
        return cls(np.full((height, width, 3), colour, dtype=np.uint8))

    @classmethod
    def from_pil(cls, image: PILImage.Image) -> "Image":
        return cls(np.asarray(image.convert("RGB"), dtype=np.uint8))

    @classmethod
    def open(cls, path: str | Path) -> "Image":
        """Decode an image file with Pillow.

        Any decode failure is reported as ImageLoadError so callers never see
        a partially constructed image.
        """
        path = Path(path)
        try:
            with PILImage.open(path) as im:
                image = cls.from_pil(im)
        except (OSError, SyntaxError, ValueError, PILImage.DecompressionBombError) as e:
            raise ImageLoadError("Did not execute due to problem with image file.") from e
        logger.debug("Loaded %s (%dx%d)", path, image.width, image.height)
        return image

    def to_pil(self) -> PILImage.Image:
        return PILImage.fromarray(np.ascontiguousarray(self.pixels))
