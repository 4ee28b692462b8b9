from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from asciimatch.charsets import CharacterSet
from asciimatch.image import Image
from asciimatch.matcher import CharacterBrightnessIndex
from asciimatch.session import DEFAULT_RESOLUTION, ImageSession


def match_grid(brightness: np.ndarray, index: CharacterBrightnessIndex) -> list[str]:
    """Map each cell's brightness to its nearest character. Returns one string per row."""
    return ["".join(index.query(float(value)) for value in row) for row in brightness]


def image_to_ascii(
    image: ImageSession | Image | PILImage.Image | str | Path,
    charset: CharacterSet,
    resolution: int | None = None,
) -> str:
    charset.validate()
    if isinstance(image, ImageSession):
        session = image
        if resolution is not None:
            session.set_resolution(resolution)
    else:
        session = ImageSession(image, resolution if resolution is not None else DEFAULT_RESOLUTION)
    return "\n".join(match_grid(session.brightness(), charset.index))
