"""Draws a curved path with offset copies on both sides and saves it as a BMP image."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from .bmp import write_bmp
from .canvas import Canvas
from .geometry import Color
from .path import Path

WIDTH = 800
HEIGHT = 600
DEFAULT_OUTPUT = "bezier_offset_example.bmp"

_BLACK = Color(0, 0, 0, 255)
_OFFSETS = (
    (20.0, Color(255, 0, 0, 255)),
    (40.0, Color(0, 255, 0, 255)),
    (60.0, Color(0, 0, 255, 255)),
)


def _original_path() -> Path:
    path = Path()
    path.move_to(100, 300)
    path.line_to(200, 100)
    path.quadratic_to(300, 50, 400, 300)
    path.cubic_to(500, 500, 600, 50, 700, 300)
    return path


def _render(supersample: int) -> Canvas:
    canvas = Canvas(WIDTH, HEIGHT, supersample)
    canvas.clear(Color(255, 255, 255, 255))

    original = _original_path()
    canvas.stroke_path(original, _BLACK, 2.0)
    for distance, color in _OFFSETS:
        canvas.stroke_path(original.offset_path(distance, 10), color, 2.0)
        canvas.stroke_path(original.offset_path(-distance, 10), color, 2.0)

    background = Path()
    background.rounded_rect(10, 10, 320, 80, 5)
    canvas.fill_path(background, Color(240, 240, 240, 240))

    legend = [_BLACK] + [color for _, color in _OFFSETS]
    for row, color in enumerate(legend):
        canvas.draw_rect(20, 30 + 15 * row, 30, 2, color, 2)
    return canvas


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Render a Bezier path with offset curves to a BMP file."
    )
    parser.add_argument("output", nargs="?", default=DEFAULT_OUTPUT, help="BMP file to write")
    parser.add_argument(
        "--supersample", type=int, default=4, help="supersampling factor (default: 4)"
    )
    args = parser.parse_args(argv)

    canvas = _render(args.supersample)
    write_bmp(args.output, canvas.width, canvas.height, canvas.pixels())
    print(f"Generated {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())