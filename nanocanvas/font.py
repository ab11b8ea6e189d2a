"""Minimal TrueType font reading: character maps, metrics, outlines and glyph bitmaps."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field

from .canvas import _scanline_spans
from .geometry import Vec2
from .path import Path

_TRUETYPE_MAGIC = b"\x00\x01\x00\x00"
_CFF_MAGIC = b"OTTO"
_REQUIRED_TABLES = ("cmap", "glyf", "loca", "head", "hhea", "hmtx", "maxp")
_OPTIONAL_TABLES = ("kern",)

# Simple-glyph flag bits.
_ON_CURVE = 0x01
_X_SHORT = 0x02
_Y_SHORT = 0x04
_REPEAT = 0x08
_X_SAME_OR_POSITIVE = 0x10
_Y_SAME_OR_POSITIVE = 0x20


class FontError(ValueError):
    """Raised when font data is malformed, unsupported or lacks what was asked for."""


def _unpack(fmt: str, data: bytes, offset: int) -> int:
    if offset < 0:
        raise FontError(f"negative offset {offset} into font data")
    try:
        return struct.unpack_from(fmt, data, offset)[0]
    except struct.error as exc:
        raise FontError(f"font data truncated at offset {offset}") from exc


def _u8(data: bytes, offset: int) -> int:
    return _unpack(">B", data, offset)


def _u16(data: bytes, offset: int) -> int:
    return _unpack(">H", data, offset)


def _i16(data: bytes, offset: int) -> int:
    return _unpack(">h", data, offset)


def _u32(data: bytes, offset: int) -> int:
    return _unpack(">I", data, offset)


def _find_table(data: bytes, font_offset: int, tag: bytes) -> int:
    """Offset of the table named ``tag``, or 0 when the font has none."""
    num_tables = _u16(data, font_offset + 4)
    for i in range(num_tables):
        entry = font_offset + 12 + 16 * i
        if data[entry:entry + 4] == tag:
            return _u32(data, entry + 8)
    return 0


@dataclass(frozen=True)
class TrueTypeFontInfo:
    """Table offsets and header values of a parsed TrueType font."""

    data: bytes = field(repr=False)
    font_offset: int
    cmap: int
    glyf: int
    loca: int
    head: int
    hhea: int
    hmtx: int
    maxp: int
    kern: int
    num_glyphs: int
    index_loc_format: int
    units_per_em: int
    ascent: int
    descent: int
    line_gap: int
    num_h_metrics: int
    loca_table_size: int


def parse_truetype_font(data: bytes | bytearray | memoryview) -> TrueTypeFontInfo:
    """Locate the tables of a TrueType font and read its header values."""
    data = bytes(data)
    if len(data) < 12:
        raise FontError("font data too short")
    magic = data[:4]
    if magic == _CFF_MAGIC:
        raise FontError("CFF-based OpenType fonts are not supported")
    if magic != _TRUETYPE_MAGIC:
        raise FontError("not a TrueType font")
    font_offset = 0
    tables = {
        tag: _find_table(data, font_offset, tag.encode("ascii"))
        for tag in _REQUIRED_TABLES + _OPTIONAL_TABLES
    }
    missing = [tag for tag in _REQUIRED_TABLES if not tables[tag]]
    if missing:
        raise FontError(f"font lacks required tables: {', '.join(missing)}")

    num_glyphs = _u16(data, tables["maxp"] + 4)
    index_loc_format = _u16(data, tables["head"] + 50)
    units_per_em = _u16(data, tables["head"] + 18)
    if units_per_em == 0:
        raise FontError("font has zero units per em")
    hhea = tables["hhea"]
    entry_size = 2 if index_loc_format == 0 else 4
    return TrueTypeFontInfo(
        data=data,
        font_offset=font_offset,
        num_glyphs=num_glyphs,
        index_loc_format=index_loc_format,
        units_per_em=units_per_em,
        ascent=_i16(data, hhea + 4),
        descent=_i16(data, hhea + 6),
        line_gap=_i16(data, hhea + 8),
        num_h_metrics=_u16(data, hhea + 34),
        loca_table_size=(num_glyphs + 1) * entry_size,
        **tables,
    )


@dataclass
class Glyph:
    """A rendered glyph: its bitmap and horizontal layout metrics."""

    glyph_index: int = 0
    advance_x: float = 0.0
    advance_y: float = 0.0
    bearing_x: float = 0.0
    bearing_y: float = 0.0
    width: int = 0
    height: int = 0
    bitmap: bytes = b""
    path: Path = field(default_factory=Path)


def _read_coordinates(
    data: bytes, pos: int, flags: list[int], short_bit: int, same_bit: int
) -> tuple[list[int], int]:
    value = 0
    coords = []
    for flag in flags:
        if flag & short_bit:
            delta = _u8(data, pos)
            pos += 1
            value += delta if flag & same_bit else -delta
        elif not flag & same_bit:
            value += _i16(data, pos)
            pos += 2
        coords.append(value)
    return coords, pos


def _rasterize(
    points: list[Vec2], width: int, height: int, scale: float, shift_x: float, shift_y: float
) -> bytes:
    """Fill the outline's points as one polygon into a ``width`` x ``height`` coverage map."""
    bitmap = bytearray(width * height)
    if points:
        scaled = [Vec2(p.x * scale + shift_x, p.y * scale + shift_y) for p in points]
        for y, x0, x1 in _scanline_spans(scaled, width, height):
            start = y * width
            bitmap[start + x0:start + x1 + 1] = b"\xff" * (x1 - x0 + 1)
    return bytes(bitmap)


class Font:
    """A TrueType font at a given pixel size, with a cache of rendered glyphs."""

    def __init__(self, data: bytes | bytearray | memoryview, font_size: float) -> None:
        self._data = bytes(data)
        self.info = parse_truetype_font(self._data)
        self.font_size = float(font_size)
        self._glyphs: dict[int, Glyph] = {}

    @classmethod
    def from_file(cls, filename: str | os.PathLike[str], font_size: float) -> Font:
        """Load a font from a TrueType file."""
        with open(filename, "rb") as fp:
            return cls(fp.read(), font_size)

    @property
    def _scale(self) -> float:
        return self.font_size / self.info.units_per_em

    def glyph_index(self, codepoint: int) -> int:
        """Glyph for ``codepoint`` from a format 4 character map; 0 when unmapped."""
        data = self._data
        cmap = self.info.cmap
        num_tables = _u16(data, cmap + 2)
        for i in range(num_tables):
            record = cmap + 4 + 8 * i
            platform = _u16(data, record)
            encoding = _u16(data, record + 2)
            if not ((platform == 3 and encoding == 1) or platform == 0):
                continue
            subtable = cmap + _u32(data, record + 4)
            if _u16(data, subtable) != 4:
                continue
            found = self._lookup_format4(subtable, codepoint)
            if found is not None:
                return found
        return 0

    def _lookup_format4(self, subtable: int, codepoint: int) -> int | None:
        data = self._data
        seg_count = _u16(data, subtable + 6) // 2
        end_codes = subtable + 14
        start_codes = end_codes + 2 + seg_count * 2
        id_deltas = start_codes + seg_count * 2
        id_range_offsets = id_deltas + seg_count * 2
        for seg in range(seg_count):
            end = _u16(data, end_codes + 2 * seg)
            start = _u16(data, start_codes + 2 * seg)
            if not start <= codepoint <= end:
                continue
            delta = _u16(data, id_deltas + 2 * seg)
            range_offset = _u16(data, id_range_offsets + 2 * seg)
            if range_offset == 0:
                return (codepoint + delta) & 0xFFFF
            idx = (range_offset // 2 + (codepoint - start) - (seg_count - seg)) * 2
            glyph_id = _u16(data, id_range_offsets + 2 * seg + idx)
            return (glyph_id + delta) & 0xFFFF if glyph_id else 0
        return None

    def _check_index(self, glyph_index: int) -> None:
        if not 0 <= glyph_index < self.info.num_glyphs:
            raise FontError(
                f"glyph index {glyph_index} out of range 0..{self.info.num_glyphs - 1}"
            )

    def _glyph_offset(self, glyph_index: int) -> int:
        self._check_index(glyph_index)
        info = self.info
        if info.index_loc_format == 0:
            offset = _u16(self._data, info.loca + 2 * glyph_index) * 2
        else:
            offset = _u32(self._data, info.loca + 4 * glyph_index)
        return info.glyf + offset

    def glyph_metrics(self, glyph_index: int) -> tuple[int, int]:
        """Advance width and left side bearing of a glyph, in font units."""
        self._check_index(glyph_index)
        data = self._data
        hmtx = self.info.hmtx
        num_h_metrics = self.info.num_h_metrics
        if glyph_index < num_h_metrics:
            return _u16(data, hmtx + 4 * glyph_index), _i16(data, hmtx + 4 * glyph_index + 2)
        advance = _u16(data, hmtx + 4 * (num_h_metrics - 1))
        lsb = _i16(data, hmtx + 4 * num_h_metrics + 2 * (glyph_index - num_h_metrics))
        return advance, lsb

    def glyph_box(self, glyph_index: int) -> tuple[int, int, int, int]:
        """Bounding box (x0, y0, x1, y1) of a glyph, in font units."""
        glyf = self._glyph_offset(glyph_index)
        data = self._data
        if _i16(data, glyf) == 0:
            return 0, 0, 0, 0
        return _i16(data, glyf + 2), _i16(data, glyf + 4), _i16(data, glyf + 6), _i16(data, glyf + 8)

    def glyph_outline(self, glyph_index: int) -> tuple[list[Vec2], list[bool]]:
        """Points of a simple glyph's outline and whether each lies on the curve."""
        glyf = self._glyph_offset(glyph_index)
        data = self._data
        number_of_contours = _i16(data, glyf)
        if number_of_contours <= 0:
            raise FontError(f"glyph {glyph_index} has no simple outline")
        end_points = [_u16(data, glyf + 10 + 2 * i) for i in range(number_of_contours)]
        num_points = end_points[-1] + 1
        instructions_at = glyf + 10 + 2 * number_of_contours
        pos = instructions_at + 2 + _u16(data, instructions_at)

        flags: list[int] = []
        while len(flags) < num_points:
            flag = _u8(data, pos)
            pos += 1
            flags.append(flag)
            if flag & _REPEAT:
                repeat = _u8(data, pos)
                pos += 1
                flags.extend([flag] * repeat)
        flags = flags[:num_points]

        xs, pos = _read_coordinates(data, pos, flags, _X_SHORT, _X_SAME_OR_POSITIVE)
        ys, _ = _read_coordinates(data, pos, flags, _Y_SHORT, _Y_SAME_OR_POSITIVE)
        points = [Vec2(float(x), float(y)) for x, y in zip(xs, ys)]
        on_curve = [bool(flag & _ON_CURVE) for flag in flags]
        return points, on_curve

    def _load_glyph(self, codepoint: int) -> Glyph:
        index = self.glyph_index(codepoint)
        points, _ = self.glyph_outline(index)
        x0, y0, x1, y1 = self.glyph_box(index)
        width, height = x1 - x0, y1 - y0
        if width <= 0 or height <= 0:
            raise FontError(f"glyph {index} has an empty bounding box")
        scale = self._scale
        bitmap = _rasterize(points, width, height, scale, -x0 * scale, -y0 * scale)
        advance, lsb = self.glyph_metrics(index)
        return Glyph(
            glyph_index=index,
            advance_x=advance * scale,
            bearing_x=lsb * scale,
            width=width,
            height=height,
            bitmap=bitmap,
        )

    def get_glyph(self, codepoint: int) -> Glyph | None:
        """The rendered glyph for ``codepoint``, or None when it cannot be rendered."""
        cached = self._glyphs.get(codepoint)
        if cached is not None:
            return cached
        try:
            glyph = self._load_glyph(codepoint)
        except FontError:
            return None
        self._glyphs[codepoint] = glyph
        return glyph

    def get_kerning(self, first: int, second: int) -> float:
        """Kerning adjustment between two code points, scaled to the font size."""
        kern = self.info.kern
        if not kern:
            return 0.0
        data = self._data
        n_tables = _u16(data, kern + 2)
        offset = kern + 4
        for _ in range(n_tables):
            length = _u16(data, offset + 2)
            coverage = _u16(data, offset + 4)
            if coverage & 0xFF == 0:
                n_pairs = _u16(data, offset + 6)
                left_glyph = self.glyph_index(first)
                right_glyph = self.glyph_index(second)
                for i in range(n_pairs):
                    pair = offset + 14 + 6 * i
                    if _u16(data, pair) == left_glyph and _u16(data, pair + 2) == right_glyph:
                        return _i16(data, pair + 4) * self._scale
            offset += length
        return 0.0

    def line_height(self) -> float:
        info = self.info
        return (info.ascent - info.descent + info.line_gap) * self._scale

    def ascender(self) -> float:
        return self.info.ascent * self._scale

    def descender(self) -> float:
        return self.info.descent * self._scale