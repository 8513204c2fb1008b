import argparse
import logging
import sys
from pathlib import Path

from textelart.codec import GridDecodeError, dumps, load_grid, loads, save_grid
from textelart.converter import image_to_grid
from textelart.glyphs import DEFAULT_BACKGROUND, DEFAULT_HEIGHT, DEFAULT_WIDTH
from textelart.sampling import RasterTooSmallError
from textelart.terminal import get_terminal_size, render

logger = logging.getLogger(__name__)


def _int_tuple(count: int):
    def parse(value: str) -> tuple[int, ...]:
        try:
            parts = tuple(int(p) for p in value.split(","))
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected {count} comma separated integers, got {value!r}")
        if len(parts) != count or any(p < 0 for p in parts):
            raise argparse.ArgumentTypeError(f"expected {count} comma separated non-negative integers, got {value!r}")
        return parts

    return parse


def _colour(value: str) -> tuple[int, ...]:
    colour = _int_tuple(3)(value)
    if any(c > 255 for c in colour):
        raise argparse.ArgumentTypeError(f"colour channels must be 0-255, got {value!r}")
    return colour


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as a grid of coloured block characters")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("image", nargs="?", help="Path to input image")
    source.add_argument("-l", "--load", metavar="FILE", help="Render a saved grid (.json or binary) instead")
    parser.add_argument(
        "-W", "--width", type=int, default=DEFAULT_WIDTH, help=f"Grid width in cells (default: {DEFAULT_WIDTH})"
    )
    parser.add_argument(
        "-H", "--height", type=int, default=DEFAULT_HEIGHT, help=f"Grid height in cells (default: {DEFAULT_HEIGHT})"
    )
    parser.add_argument("-o", "--output", metavar="FILE", help="Save the grid (.json, otherwise binary)")
    parser.add_argument("--at", type=_int_tuple(2), metavar="COL,ROW", help="Render at an absolute cursor position")
    parser.add_argument(
        "-b", "--background", type=_colour, default=DEFAULT_BACKGROUND, metavar="R,G,B", help="Background colour"
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable debug logging")
    return parser


def _load(path: Path, width: int, height: int):
    if path.suffix == ".json":
        return loads(path.read_text(encoding="utf-8"), width, height, allow_partial=True)
    return load_grid(path)


def _save(grid, path: Path) -> None:
    if path.suffix == ".json":
        path.write_text(dumps(grid), encoding="utf-8")
    else:
        save_grid(grid, path)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    if args.width <= 0 or args.height <= 0:
        parser.error(f"grid dimensions must be positive, got {args.width}x{args.height}")

    source = Path(args.image or args.load)
    if not source.exists():
        print(f"File not found: {source}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.load:
            grid = _load(source, args.width, args.height)
        else:
            grid = image_to_grid(source, args.width, args.height)
    except (GridDecodeError, RasterTooSmallError, OSError) as e:
        print(f"{source}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        _save(grid, Path(args.output))

    columns, _ = get_terminal_size()
    left = args.at[0] if args.at else 0
    if left + grid.width > columns:
        logger.warning("Grid is %d cells wide but the terminal has %d columns", left + grid.width, columns)

    render(grid, origin=args.at, background_colour=args.background)


if __name__ == "__main__":
    main()
