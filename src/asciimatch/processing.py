import numpy as np

from asciimatch.image import WHITE, Image

MAX_INTENSITY = 255.0

# ITU-R BT.709 luma weights for R, G, B
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n."""
    if n < 1:
        raise ValueError(f"Expected a positive integer, got {n}")
    return 1 << (n - 1).bit_length()


def pad_image(image: Image) -> Image:
    """Pad with white to power-of-two dimensions, keeping the original centered.

    Odd leftovers go to the right and bottom edges.
    """
    new_width = next_power_of_two(image.width)
    new_height = next_power_of_two(image.height)
    if (new_width, new_height) == (image.width, image.height):
        return image

    pad_x = (new_width - image.width) // 2
    pad_y = (new_height - image.height) // 2

    padded = np.empty((new_height, new_width, 3), dtype=np.uint8)
    padded[:] = WHITE
    padded[pad_y : pad_y + image.height, pad_x : pad_x + image.width] = image.pixels
    return Image(padded)


def _check_resolution(image: Image, resolution: int) -> int:
    if not 1 <= resolution <= image.width:
        raise ValueError(f"Resolution {resolution} outside [1, {image.width}]")
    if image.width % resolution:
        raise ValueError(f"Resolution {resolution} does not divide image width {image.width}")
    if image.width // resolution > image.height:
        raise ValueError(f"Resolution {resolution} gives tiles taller than image height {image.height}")
    return image.width // resolution


def partition(image: Image, resolution: int) -> list[list[Image]]:
    """Split an image into square tiles, `resolution` tiles per row, row-major.

    Rows that would run past the bottom edge are dropped, so callers should
    pass a padded image. Tiles may not be taller than the image itself.
    """
    size = _check_resolution(image, resolution)
    rows = image.height // size
    return [
        [Image(image.pixels[r * size : (r + 1) * size, c * size : (c + 1) * size]) for c in range(resolution)]
        for r in range(rows)
    ]


def grayscale_average(image: Image) -> float:
    """Mean BT.709 luminance of the image, scaled to [0, 1]."""
    luma = image.pixels.astype(np.float64) @ LUMA_WEIGHTS
    return float(luma.mean() / MAX_INTENSITY)


def brightness_grid(image: Image, resolution: int) -> np.ndarray:
    """Grayscale average of every tile at once. Returns an array of shape (rows, resolution)."""
    size = _check_resolution(image, resolution)
    rows = image.height // size

    luma = image.pixels.astype(np.float64) @ LUMA_WEIGHTS
    # Trim to exact grid and reshape into (rows, size, cols, size)
    trimmed = luma[: rows * size, : resolution * size]
    cells = trimmed.reshape(rows, size, resolution, size)
    return cells.mean(axis=(1, 3)) / MAX_INTENSITY
