import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from textelart.glyphs import DEFAULT_HEIGHT, DEFAULT_WIDTH, FULL_BLOCK
from textelart.grid import TextelGrid
from textelart.sampling import sample

logger = logging.getLogger(__name__)


def load_image(image: Image.Image | str | Path | bytes) -> Image.Image:
    """Open a path or decode in-memory image bytes, returning an RGB image."""
    if isinstance(image, (bytes, bytearray, memoryview)):
        image = Image.open(io.BytesIO(image))
    elif not isinstance(image, Image.Image):
        image = Image.open(image)
    if image.mode != "RGB":
        logger.debug("Converting %s image to RGB", image.mode)
        # Alpha is discarded, not composited
        image = image.convert("RGB")
    return image


def image_to_grid(
    image: Image.Image | str | Path | bytes | np.ndarray,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    char: str = FULL_BLOCK,
) -> TextelGrid:
    if not isinstance(image, np.ndarray):
        image = load_image(image)
        logger.debug("Sampling %dx%d image to %dx%d grid", image.width, image.height, width, height)
    return sample(image, width, height, char=char)
