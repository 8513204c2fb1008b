import numpy as np
from PIL import Image

from textelart.glyphs import FULL_BLOCK
from textelart.grid import TextelGrid

# Each cell is averaged from a 3x3 grid of samples: corners, edge midpoints, centre
SAMPLES_PER_AXIS = 3
NUM_SAMPLES = SAMPLES_PER_AXIS * SAMPLES_PER_AXIS


class RasterTooSmallError(ValueError):
    """The source raster has fewer pixels than the grid has cells along an axis."""


def sample_offsets(ratio: int) -> tuple[int, int, int]:
    """Pixel offsets of the three samples along one axis of a cell `ratio` pixels wide."""
    if ratio < 1:
        raise ValueError(f"Pixel to cell ratio must be at least 1, got {ratio}")
    return (0, (ratio - 1) // 2, ratio - 1)


def as_raster(image) -> np.ndarray:
    """Return an (height, width, 3) uint8 view of a Pillow image or array-like."""
    if isinstance(image, Image.Image):
        image = image.convert("RGB")
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError(f"Expected an RGB raster of shape (height, width, 3), got {arr.shape}")
    if arr.dtype == np.uint8:
        return arr
    if not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"Expected an 8-bit integer raster, got dtype {arr.dtype}")
    if arr.size and (arr.min() < 0 or arr.max() > 255):
        raise ValueError(f"Raster values must be within 0-255, got {arr.min()}..{arr.max()}")
    return arr.astype(np.uint8)


def pixel_ratio(raster: np.ndarray, width: int, height: int) -> tuple[int, int]:
    """Integer pixels per cell on each axis, (ratio_x, ratio_y)."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    img_h, img_w = raster.shape[:2]
    if img_w < width or img_h < height:
        raise RasterTooSmallError(f"Image of {img_w}x{img_h} pixels is smaller than the {width}x{height} grid")
    return (img_w // width, img_h // height)


def sample_colours(image, width: int, height: int) -> np.ndarray:
    """Average colour of every cell. Returns array of shape (height, width, 3) as uint8.

    The image is divided into width x height blocks of ratio_x by ratio_y
    pixels (remainder pixels on the right and bottom are ignored). From each
    block nine pixels are read, at offsets 0, (ratio - 1) // 2 and ratio - 1
    on each axis, and their channels averaged with truncating integer
    division. When the ratio is 1 all nine samples land on the same pixel.
    """
    raster = as_raster(image)
    ratio_x, ratio_y = pixel_ratio(raster, width, height)

    # (width, 3) column indices and (height, 3) row indices of every sample
    xs = np.arange(width)[:, None] * ratio_x + np.array(sample_offsets(ratio_x))[None, :]
    ys = np.arange(height)[:, None] * ratio_y + np.array(sample_offsets(ratio_y))[None, :]

    # (height, width, 3, 3, channels): sample (j, i) of cell (x, y) is pixel (xs[x, i], ys[y, j])
    samples = raster[ys[:, None, :, None], xs[None, :, None, :]]
    sums = samples.astype(np.uint32).sum(axis=(2, 3))
    return (sums // NUM_SAMPLES).astype(np.uint8)


def sample(image, width: int, height: int, char: str = FULL_BLOCK) -> TextelGrid:
    """Downsample a raster to a width x height grid of `char` textels."""
    return TextelGrid.from_colours(sample_colours(image, width, height), char=char)
