import io

import pytest

from textelart.grid import Textel, TextelGrid, blank_grid
from textelart.terminal import RESET, format_grid, get_terminal_size, render


def make_grid():
    return TextelGrid(
        2,
        2,
        [
            [Textel("#", (255, 0, 0)), Textel("#", (0, 255, 0))],
            [Textel("@", (0, 0, 255)), Textel(" ", (1, 2, 3))],
        ],
    )


def test_relative_layout():
    result = format_grid(make_grid(), background_colour=(9, 9, 9))
    assert result == (
        "\033[48;2;9;9;9m"
        "\033[38;2;255;0;0m#\033[38;2;0;255;0m#\033[0m\n"
        "\033[38;2;0;0;255m@\033[38;2;1;2;3m \033[0m\n"
    )


def test_absolute_layout():
    result = format_grid(make_grid(), origin=(10, 4))
    assert result.startswith("\033[48;2;255;255;255m\033[5;11H")
    assert "\033[6;11H\033[38;2;0;0;255m@" in result
    assert "\n" not in result


def test_background_set_once_and_reset_per_row():
    result = format_grid(blank_grid(3, 5))
    assert result.count("\033[48;2;") == 1
    assert result.count(RESET) == 5


def test_negative_origin():
    with pytest.raises(ValueError):
        format_grid(make_grid(), origin=(-1, 0))


def test_render_writes_and_flushes():
    out = io.StringIO()
    render(make_grid(), out)
    assert out.getvalue() == format_grid(make_grid())


def test_render_is_repeatable():
    out = io.StringIO()
    grid = make_grid()
    render(grid, out, origin=(0, 0))
    render(grid, out, origin=(0, 0))
    first = format_grid(grid, origin=(0, 0))
    assert out.getvalue() == first + first
    assert grid == make_grid()


class BrokenStream(io.StringIO):
    def write(self, s):
        raise BrokenPipeError("closed")


def test_render_propagates_write_errors():
    with pytest.raises(OSError):
        render(make_grid(), BrokenStream())


def test_get_terminal_size_not_tty(monkeypatch):
    monkeypatch.setattr("sys.stdout", io.StringIO())
    assert get_terminal_size() == (80, 24)
