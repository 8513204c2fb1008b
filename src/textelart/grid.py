from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from textelart.glyphs import EMPTY, EMPTY_COLOUR, FULL_BLOCK


@dataclass(frozen=True)
class Textel:
    """A pixel made of a character: one glyph drawn in one RGB colour."""

    char: str
    colour: tuple[int, int, int]

    def __post_init__(self):
        if not isinstance(self.char, str) or len(self.char) != 1:
            raise ValueError(f"Textel glyph must be a single character, got {self.char!r}")
        # Control characters would be written to the terminal verbatim
        if not self.char.isprintable():
            raise ValueError(f"Textel glyph must be printable, got {self.char!r}")
        colour = tuple(self.colour)
        if len(colour) != 3 or not all(_is_channel(c) for c in colour):
            raise ValueError(f"Textel colour must be three 0-255 ints, got {self.colour!r}")
        # Normalise lists and numpy scalars so equality and hashing behave
        object.__setattr__(self, "colour", tuple(int(c) for c in colour))


def _is_channel(value) -> bool:
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, np.integer)):
        return False
    return 0 <= value <= 255


class TextelGrid:
    """Fixed-size W×H grid of textels, row-major with the origin at the top left.

    The dimensions are set once in the constructor. Cells may be replaced but
    the grid can never grow or shrink.
    """

    __slots__ = ("_width", "_height", "_cells")

    def __init__(self, width: int, height: int, cells: list[list[Textel]] | None = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        if cells is None:
            blank = Textel(EMPTY, EMPTY_COLOUR)
            self._cells = [[blank] * width for _ in range(height)]
            return
        if len(cells) != height:
            raise ValueError(f"Expected {height} rows, got {len(cells)}")
        for y, row in enumerate(cells):
            if len(row) != width:
                raise ValueError(f"Row {y}: expected {width} cells, got {len(row)}")
            for textel in row:
                if not isinstance(textel, Textel):
                    raise TypeError(f"Row {y}: expected Textel, got {type(textel).__name__}")
        self._cells = [list(row) for row in cells]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return (self._width, self._height)

    def _check(self, key) -> tuple[int, int]:
        x, y = key
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Cell ({x}, {y}) outside {self._width}x{self._height} grid")
        return x, y

    def __getitem__(self, key: tuple[int, int]) -> Textel:
        x, y = self._check(key)
        return self._cells[y][x]

    def __setitem__(self, key: tuple[int, int], textel: Textel) -> None:
        x, y = self._check(key)
        if not isinstance(textel, Textel):
            raise TypeError(f"Expected Textel, got {type(textel).__name__}")
        self._cells[y][x] = textel

    def rows(self) -> Iterator[tuple[Textel, ...]]:
        for row in self._cells:
            yield tuple(row)

    def __iter__(self) -> Iterator[Textel]:
        for row in self._cells:
            yield from row

    def __len__(self) -> int:
        return self._width * self._height

    def __eq__(self, other) -> bool:
        if not isinstance(other, TextelGrid):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    def __repr__(self) -> str:
        return f"TextelGrid(width={self._width}, height={self._height})"

    def colours(self) -> np.ndarray:
        """Cell colours as an (height, width, 3) uint8 array."""
        return np.array([[t.colour for t in row] for row in self._cells], dtype=np.uint8)

    @classmethod
    def from_colours(cls, colours: np.ndarray, char: str = FULL_BLOCK) -> TextelGrid:
        """Build a grid from an (height, width, 3) colour array, one glyph for every cell."""
        colours = np.asarray(colours)
        if colours.ndim != 3 or colours.shape[2] != 3:
            raise ValueError(f"Expected (height, width, 3) colours, got shape {colours.shape}")
        height, width, _ = colours.shape
        cells = [[Textel(char, tuple(int(c) for c in px)) for px in row] for row in colours.tolist()]
        return cls(width, height, cells)


def blank_grid(width: int, height: int) -> TextelGrid:
    """Placeholder grid: every cell a space in black."""
    return TextelGrid(width, height)
