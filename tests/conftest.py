import numpy as np
import pytest
from PIL import Image


def solid_image(width, height, colour):
    return Image.new("RGB", (width, height), colour)


def checkerboard(width, height, block_w, block_h):
    """RGB image of alternating black and white blocks, black in the top-left."""
    ys, xs = np.mgrid[0:height, 0:width]
    white = ((xs // block_w + ys // block_h) % 2).astype(bool)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[white] = 255
    return Image.fromarray(arr)


@pytest.fixture
def gradient():
    """64x48 image whose red channel follows x and green channel follows y."""
    ys, xs = np.mgrid[0:48, 0:64]
    arr = np.stack([xs * 4, ys * 5, np.full_like(xs, 7)], axis=-1).astype(np.uint8)
    return Image.fromarray(arr)
