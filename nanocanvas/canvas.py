"""A supersampled RGBA raster canvas with simple path filling and stroking."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterator, Sequence
from typing import Any, Protocol

from .geometry import Color, Vec2
from .path import CommandType, Path


class AntialiasingLevel(enum.Enum):
    NONE = "none"
    FAST = "fast"
    BEST = "best"


class _FontLike(Protocol):
    def get_kerning(self, first: int, second: int) -> float: ...

    def get_glyph(self, codepoint: int) -> Any: ...


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def _flatten_simple(path: Path) -> list[Vec2]:
    """End points of move and line commands; curves are skipped."""
    return [
        command.points[0]
        for command in path.commands
        if command.type in (CommandType.MOVE_TO, CommandType.LINE_TO)
    ]


def _scanline_spans(
    points: Sequence[Vec2], width: int, height: int
) -> Iterator[tuple[int, int, int]]:
    """Yield (y, x_start, x_end) spans covering a polygon by the even-odd rule."""
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)
    y_start = max(0, math.ceil(min_y))
    y_end = min(height - 1, math.floor(max_y))
    edges = list(zip(points, points[1:] + points[:1]))
    for y in range(y_start, y_end + 1):
        crossings = sorted(
            a.x + (y - a.y) / (b.y - a.y) * (b.x - a.x)
            for a, b in edges
            if (a.y <= y < b.y) or (b.y <= y < a.y)
        )
        for left, right in zip(crossings[0::2], crossings[1::2]):
            x0 = max(0, math.ceil(left))
            x1 = min(width - 1, math.floor(right))
            if x0 <= x1:
                yield y, x0, x1


def _line_pixels(start: Vec2, end: Vec2) -> Iterator[tuple[int, int]]:
    """Pixels of a Bresenham line between two rounded points, both ends included."""
    x0, y0 = _round_half_away(start.x), _round_half_away(start.y)
    x1, y1 = _round_half_away(end.x), _round_half_away(end.y)
    dx, sx = abs(x1 - x0), (1 if x0 < x1 else -1)
    dy, sy = -abs(y1 - y0), (1 if y0 < y1 else -1)
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


class Canvas:
    """An RGBA canvas drawn at ``supersample`` times its size and averaged down on read.

    Drawing coordinates address the supersampled buffer directly.
    """

    def __init__(self, width: int, height: int, supersample: int = 1) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._supersample = max(1, supersample)
        self._hires_width = width * self._supersample
        self._hires_height = height * self._supersample
        self._hires = bytearray(self._hires_width * self._hires_height * 4)
        self._data = bytes(width * height * 4)
        self._dirty = True
        self.antialiasing_level = AntialiasingLevel.FAST

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def supersample(self) -> int:
        return self._supersample

    def clear(self, color: Color) -> None:
        """Fill the whole canvas with ``color``."""
        pixel = bytes((color.r, color.g, color.b, color.a))
        self._hires[:] = pixel * (self._hires_width * self._hires_height)
        self._dirty = True

    def _set_pixel(self, x: int, y: int, color: Color) -> None:
        if not (0 <= x < self._hires_width and 0 <= y < self._hires_height):
            return
        idx = (y * self._hires_width + x) * 4
        self._hires[idx:idx + 4] = bytes((color.r, color.g, color.b, color.a))
        self._dirty = True

    def _blend_pixel(self, x: int, y: int, color: Color) -> None:
        if not (0 <= x < self._hires_width and 0 <= y < self._hires_height):
            return
        idx = (y * self._hires_width + x) * 4
        r, g, b, a = self._hires[idx:idx + 4]
        src_alpha = color.a / 255.0
        dst_alpha = a / 255.0
        out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
        if out_alpha < 1e-6:
            self._hires[idx + 3] = 0
            return
        keep = dst_alpha * (1.0 - src_alpha)

        def mix(src: int, dst: int) -> int:
            return min(255, int((src * src_alpha + dst * keep) / out_alpha))

        self._hires[idx:idx + 4] = bytes(
            (
                mix(color.r, r),
                mix(color.g, g),
                mix(color.b, b),
                min(255, int(out_alpha * 255.0)),
            )
        )
        self._dirty = True

    def fill_path(self, path: Path, color: Color) -> None:
        """Fill the polygon formed by the path's move and line points; curves are ignored."""
        points = _flatten_simple(path)
        if len(points) < 3:
            return
        for y, x0, x1 in _scanline_spans(points, self._width, self._height):
            for x in range(x0, x1 + 1):
                self._set_pixel(x, y, color)
        self._dirty = True

    def stroke_path(self, path: Path, color: Color, width: float = 1.0) -> None:
        """Draw one-pixel lines through the path's move and line points.

        Curves are ignored and ``width`` has no effect.
        """
        points = _flatten_simple(path)
        if len(points) < 2:
            return
        segments = list(zip(points, points[1:]))
        if path.closed and len(points) > 2:
            segments.append((points[-1], points[0]))
        for start, end in segments:
            for x, y in _line_pixels(start, end):
                self._set_pixel(x, y, color)
        self._dirty = True

    def draw_rect(
        self, x: float, y: float, w: float, h: float, color: Color, stroke_width: float = 1.0
    ) -> None:
        path = Path()
        path.rect(x, y, w, h)
        self.stroke_path(path, color, stroke_width)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        path = Path()
        path.rect(x, y, w, h)
        self.fill_path(path, color)

    def draw_text(
        self, text: str, x: float, y: float, font: _FontLike | None, color: Color
    ) -> None:
        """Blend the bitmaps of the text's glyphs onto the canvas, starting at (x, y)."""
        if font is None or not text:
            return
        pen_x, pen_y = x, y
        previous = 0
        for codepoint in map(ord, text):
            if previous:
                pen_x += font.get_kerning(previous, codepoint)
            glyph = font.get_glyph(codepoint)
            if glyph is not None:
                if glyph.bitmap:
                    self._draw_glyph_bitmap(
                        glyph, pen_x + glyph.bearing_x, pen_y - glyph.bearing_y, color
                    )
                pen_x += glyph.advance_x
                pen_y += glyph.advance_y
            previous = codepoint

    def measure_text(self, text: str, font: _FontLike | None) -> float:
        """Total horizontal advance of ``text``, kerning included."""
        if font is None or not text:
            return 0.0
        total = 0.0
        previous = 0
        for codepoint in map(ord, text):
            if previous:
                total += font.get_kerning(previous, codepoint)
            glyph = font.get_glyph(codepoint)
            if glyph is not None:
                total += glyph.advance_x
            previous = codepoint
        return total

    def _draw_glyph_bitmap(self, glyph: Any, x: float, y: float, color: Color) -> None:
        if not glyph.bitmap or glyph.width <= 0 or glyph.height <= 0:
            return
        origin_x, origin_y = int(x), int(y)
        for py in range(glyph.height):
            row = glyph.bitmap[py * glyph.width:(py + 1) * glyph.width]
            for px, coverage in enumerate(row):
                if coverage <= 0:
                    continue
                alpha = color.a * coverage // 255
                if alpha > 0:
                    self._blend_pixel(origin_x + px, origin_y + py, color.with_alpha(alpha))

    def _downsample(self) -> None:
        s = self._supersample
        if s == 1:
            self._data = bytes(self._hires)
            self._dirty = False
            return
        samples = s * s
        row_bytes = self._hires_width * 4
        out = bytearray()
        for y in range(self._height):
            sums = [0] * (self._width * 4)
            for sy in range(s):
                start = (y * s + sy) * row_bytes
                row = self._hires[start:start + row_bytes]
                for channel in range(4):
                    plane = row[channel::4]
                    for x in range(self._width):
                        sums[x * 4 + channel] += sum(plane[x * s:(x + 1) * s])
            out.extend(total // samples for total in sums)
        self._data = bytes(out)
        self._dirty = False

    def pixels(self) -> bytes:
        """The canvas at its nominal size as top-down RGBA bytes."""
        if self._dirty:
            self._downsample()
        return self._data