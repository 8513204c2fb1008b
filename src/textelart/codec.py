import json
import logging
import struct
from pathlib import Path

from textelart.grid import Textel, TextelGrid, blank_grid

logger = logging.getLogger(__name__)

MAGIC = b"TXEL"
FORMAT_VERSION = 1
# Length byte, at least one UTF-8 byte, three colour bytes
MIN_CELL_SIZE = 5

# Key used by saved collection files, plus the accepted alias
CHAR_KEY = "char"
COLOR_KEY = "color"
_CHAR_KEYS = (CHAR_KEY, "glyph")


class GridDecodeError(ValueError):
    """Persisted grid data does not have the expected structure."""


class IncompleteGridError(GridDecodeError):
    """Fewer rows than expected were stored.

    `grid` holds the rows that were read followed by blank rows, for callers
    happy to show partial art.
    """

    def __init__(self, message: str, grid: TextelGrid, rows_read: int):
        super().__init__(message)
        self.grid = grid
        self.rows_read = rows_read


def encode_grid(grid: TextelGrid) -> list[list[dict]]:
    """Nested-array form of a grid, ready to embed in a JSON document."""
    return [[{CHAR_KEY: t.char, COLOR_KEY: list(t.colour)} for t in row] for row in grid.rows()]


def _decode_textel(cell, x: int, y: int) -> Textel:
    if not isinstance(cell, dict):
        raise GridDecodeError(f"Cell ({x}, {y}): expected an object, got {type(cell).__name__}")
    char_keys = [k for k in _CHAR_KEYS if k in cell]
    if len(char_keys) != 1 or COLOR_KEY not in cell or len(cell) != 2:
        raise GridDecodeError(f"Cell ({x}, {y}): expected fields {CHAR_KEY!r} and {COLOR_KEY!r}, got {sorted(cell)}")
    char = cell[char_keys[0]]
    colour = cell[COLOR_KEY]
    if not isinstance(colour, list):
        raise GridDecodeError(f"Cell ({x}, {y}): colour must be an array, got {type(colour).__name__}")
    try:
        return Textel(char, tuple(colour))
    except (TypeError, ValueError) as e:
        raise GridDecodeError(f"Cell ({x}, {y}): {e}") from e


def decode_grid(node, width: int, height: int, allow_partial: bool = False) -> TextelGrid:
    """Rebuild a width x height grid from its nested-array form.

    Every row must hold exactly `width` cells. A node with fewer than
    `height` rows raises IncompleteGridError, or with `allow_partial` is
    padded with blank rows and returned.
    """
    if not isinstance(node, list):
        raise GridDecodeError(f"Expected an array of rows, got {type(node).__name__}")
    if len(node) > height:
        raise GridDecodeError(f"Expected {height} rows, got {len(node)}")

    grid = blank_grid(width, height)
    for y, row in enumerate(node):
        if not isinstance(row, list):
            raise GridDecodeError(f"Row {y}: expected an array of cells, got {type(row).__name__}")
        if len(row) != width:
            raise GridDecodeError(f"Row {y}: expected {width} cells, got {len(row)}")
        for x, cell in enumerate(row):
            grid[x, y] = _decode_textel(cell, x, y)

    if len(node) < height:
        message = f"Expected {height} rows, got {len(node)}"
        if not allow_partial:
            raise IncompleteGridError(message, grid, len(node))
        logger.warning("%s; padding with blank rows", message)
    return grid


def dumps(grid: TextelGrid, **kwargs) -> str:
    return json.dumps(encode_grid(grid), ensure_ascii=False, **kwargs)


def loads(text: str | bytes, width: int, height: int, allow_partial: bool = False) -> TextelGrid:
    try:
        node = json.loads(text)
    except json.JSONDecodeError as e:
        raise GridDecodeError(f"Invalid JSON: {e}") from e
    return decode_grid(node, width, height, allow_partial=allow_partial)


def pack(grid: TextelGrid) -> bytes:
    """Compact binary form: header, then every cell's glyph and 3-byte colour."""
    parts = [MAGIC, struct.pack("B", FORMAT_VERSION), struct.pack(">HH", grid.width, grid.height)]
    for textel in grid:
        char_bytes = textel.char.encode("utf-8")
        parts.append(struct.pack("B", len(char_bytes)))
        parts.append(char_bytes)
        parts.append(struct.pack("3B", *textel.colour))
    return b"".join(parts)


def unpack(data: bytes) -> TextelGrid:
    view = memoryview(data)
    pos = 0

    def read(n: int) -> bytes:
        nonlocal pos
        if pos + n > len(view):
            raise GridDecodeError(f"Truncated grid data at byte {pos}")
        chunk = view[pos : pos + n].tobytes()
        pos += n
        return chunk

    magic = read(4)
    if magic != MAGIC:
        raise GridDecodeError(f"Not a TXEL file: {magic!r}")
    (version,) = struct.unpack("B", read(1))
    if version != FORMAT_VERSION:
        raise GridDecodeError(f"Unsupported format version: {version}")
    width, height = struct.unpack(">HH", read(4))
    if width == 0 or height == 0:
        raise GridDecodeError(f"Invalid grid dimensions {width}x{height}")
    if len(view) - pos < width * height * MIN_CELL_SIZE:
        raise GridDecodeError(f"Truncated grid data: {len(view)} bytes cannot hold {width}x{height} cells")

    grid = blank_grid(width, height)
    for y in range(height):
        for x in range(width):
            (char_len,) = struct.unpack("B", read(1))
            try:
                char = read(char_len).decode("utf-8")
            except UnicodeDecodeError as e:
                raise GridDecodeError(f"Cell ({x}, {y}): {e}") from e
            colour = struct.unpack("3B", read(3))
            try:
                grid[x, y] = Textel(char, colour)
            except ValueError as e:
                raise GridDecodeError(f"Cell ({x}, {y}): {e}") from e
    if pos != len(view):
        raise GridDecodeError(f"{len(view) - pos} bytes of trailing data")
    return grid


def save_grid(grid: TextelGrid, path: str | Path) -> None:
    path = Path(path)
    path.write_bytes(pack(grid))
    logger.debug("Saved %dx%d grid to %s", grid.width, grid.height, path)


def load_grid(path: str | Path) -> TextelGrid:
    path = Path(path)
    return unpack(path.read_bytes())
