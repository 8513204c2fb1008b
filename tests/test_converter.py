import io

import numpy as np
import pytest
from PIL import Image, UnidentifiedImageError

from tests.conftest import solid_image
from textelart.converter import image_to_grid, load_image
from textelart.glyphs import DEFAULT_HEIGHT, DEFAULT_WIDTH, FULL_BLOCK
from textelart.sampling import RasterTooSmallError, sample


def _png_bytes(img):
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def test_default_size():
    grid = image_to_grid(solid_image(300, 300, (5, 6, 7)))
    assert grid.size == (DEFAULT_WIDTH, DEFAULT_HEIGHT)
    assert all(t == grid[0, 0] for t in grid)
    assert grid[0, 0].char == FULL_BLOCK


def test_accepts_file_path(tmp_path, gradient):
    path = tmp_path / "cover.png"
    gradient.save(path)
    assert image_to_grid(path, 8, 6) == sample(gradient, 8, 6)
    assert image_to_grid(str(path), 8, 6) == sample(gradient, 8, 6)


def test_accepts_bytes(gradient):
    assert image_to_grid(_png_bytes(gradient), 8, 6) == sample(gradient, 8, 6)


def test_accepts_array(gradient):
    assert image_to_grid(np.asarray(gradient), 8, 6) == sample(gradient, 8, 6)


def test_load_image_drops_alpha():
    img = load_image(_png_bytes(Image.new("RGBA", (4, 4), (9, 8, 7, 10))))
    assert img.mode == "RGB"
    assert img.getpixel((0, 0)) == (9, 8, 7)


def test_undecodable_bytes():
    with pytest.raises(UnidentifiedImageError):
        image_to_grid(b"definitely not an image")


def test_too_small():
    with pytest.raises(RasterTooSmallError):
        image_to_grid(solid_image(20, 20, (0, 0, 0)))
