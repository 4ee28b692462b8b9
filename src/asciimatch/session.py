from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from asciimatch.errors import ResolutionOutOfBoundsError
from asciimatch.image import Image
from asciimatch.processing import brightness_grid, is_power_of_two, pad_image

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = 128

OUT_OF_BOUNDS_MESSAGE = "Did not change resolution due to exceeding boundaries."


def _coerce(image: Image | PILImage.Image | str | Path) -> Image:
    if isinstance(image, Image):
        return image
    if isinstance(image, PILImage.Image):
        return Image.from_pil(image)
    return Image.open(image)


class ImageSession:
    """Owns the padded source image and the current resolution.

    The brightness grid is cached until either of them changes. A failed load
    leaves the previous image active.
    """

    def __init__(self, image: Image | PILImage.Image | str | Path, resolution: int = DEFAULT_RESOLUTION):
        self.image = pad_image(_coerce(image))
        self.resolution = self._clamp(resolution)
        self._brightness: np.ndarray | None = None

    @classmethod
    def open(cls, path: str | Path, resolution: int = DEFAULT_RESOLUTION) -> "ImageSession":
        return cls(Image.open(path), resolution)

    @property
    def min_resolution(self) -> int:
        """Smallest resolution whose tiles still fit inside the padded height."""
        return max(1, self.image.width // self.image.height)

    def _clamp(self, resolution: int) -> int:
        resolution = max(self.min_resolution, min(resolution, self.image.width))
        # Largest power of two not above the requested value
        return 1 << (resolution.bit_length() - 1)

    def load(self, image: Image | PILImage.Image | str | Path) -> None:
        padded = pad_image(_coerce(image))
        self.image = padded
        if not self.min_resolution <= self.resolution <= padded.width:
            self.resolution = self._clamp(self.resolution)
        self._brightness = None
        logger.info("Image set to %dx%d (padded)", padded.width, padded.height)

    def set_resolution(self, resolution: int) -> None:
        if not self.min_resolution <= resolution <= self.image.width or not is_power_of_two(resolution):
            raise ResolutionOutOfBoundsError(OUT_OF_BOUNDS_MESSAGE)
        if resolution != self.resolution:
            self.resolution = resolution
            self._brightness = None
        logger.info("Resolution set to %d.", self.resolution)

    def resolution_up(self) -> int:
        if self.resolution * 2 > self.image.width:
            raise ResolutionOutOfBoundsError(OUT_OF_BOUNDS_MESSAGE)
        self.set_resolution(self.resolution * 2)
        return self.resolution

    def resolution_down(self) -> int:
        if self.resolution // 2 < self.min_resolution:
            raise ResolutionOutOfBoundsError(OUT_OF_BOUNDS_MESSAGE)
        self.set_resolution(self.resolution // 2)
        return self.resolution

    def brightness(self) -> np.ndarray:
        """Grid of tile brightness values in [0, 1], shape (rows, resolution)."""
        if self._brightness is None:
            self._brightness = brightness_grid(self.image, self.resolution)
            logger.debug("Computed %s brightness grid", self._brightness.shape)
        return self._brightness
