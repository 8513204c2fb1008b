import os
import sys
from typing import TextIO

from textelart.glyphs import DEFAULT_BACKGROUND
from textelart.grid import TextelGrid

RESET = "\033[0m"


def get_terminal_size() -> tuple[int, int]:
    """Return (columns, rows) of the terminal, or (80, 24) if not a tty."""
    if not sys.stdout.isatty():
        return (80, 24)
    size = os.get_terminal_size()
    return (size.columns, size.lines)


def move_to(column: int, row: int) -> str:
    """Cursor position sequence for a zero-based (column, row)."""
    return f"\033[{row + 1};{column + 1}H"


def foreground(colour: tuple[int, int, int]) -> str:
    r, g, b = colour
    return f"\033[38;2;{r};{g};{b}m"


def background(colour: tuple[int, int, int]) -> str:
    r, g, b = colour
    return f"\033[48;2;{r};{g};{b}m"


def format_grid(
    grid: TextelGrid,
    origin: tuple[int, int] | None = None,
    background_colour: tuple[int, int, int] = DEFAULT_BACKGROUND,
) -> str:
    """Render a grid to ANSI truecolor text.

    The background is set once, each textel gets its own foreground colour,
    and every row ends with a reset. Without an origin rows are separated by
    newlines; with a zero-based (column, row) origin each row is instead
    preceded by a cursor move to the line below the previous one.
    """
    if origin is not None and (origin[0] < 0 or origin[1] < 0):
        raise ValueError(f"Origin must not be negative, got {origin}")
    out = [background(background_colour)]
    for i, row in enumerate(grid.rows()):
        if origin is not None:
            out.append(move_to(origin[0], origin[1] + i))
        for textel in row:
            out.append(foreground(textel.colour))
            out.append(textel.char)
        out.append(RESET)
        if origin is None:
            out.append("\n")
    return "".join(out)


def render(
    grid: TextelGrid,
    out: TextIO | None = None,
    origin: tuple[int, int] | None = None,
    background_colour: tuple[int, int, int] = DEFAULT_BACKGROUND,
) -> None:
    """Write a grid to a terminal stream (stdout by default) and flush it."""
    if out is None:
        out = sys.stdout
    out.write(format_grid(grid, origin=origin, background_colour=background_colour))
    out.flush()
