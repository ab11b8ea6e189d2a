import struct

import pytest

from nanocanvas.canvas import Canvas
from nanocanvas.font import Font, FontError, Glyph, parse_truetype_font
from nanocanvas.geometry import Color, Vec2

UNITS_PER_EM = 64
ASCENT, DESCENT, LINE_GAP = 48, -16, 4
RECT_POINTS = [(0, 0), (8, 0), (8, 16), (0, 16)]
RECT_BOX = (0, 0, 8, 16)
KERN_VALUE = -8


def _rect_glyph():
    header = struct.pack(">hhhhh", 1, *RECT_BOX)
    end_pts = struct.pack(">H", len(RECT_POINTS) - 1)
    instructions = struct.pack(">H", 0)
    flags = bytes([0x01 | 0x08, len(RECT_POINTS) - 1])
    xs = b""
    ys = b""
    px = py = 0
    for x, y in RECT_POINTS:
        xs += struct.pack(">h", x - px)
        ys += struct.pack(">h", y - py)
        px, py = x, y
    return header + end_pts + instructions + flags + xs + ys


def _short_glyph():
    header = struct.pack(">hhhhh", 1, 5, 5, 15, 20)
    end_pts = struct.pack(">H", 3)
    instructions = struct.pack(">H", 0)
    flags = bytes([0x37, 0x33, 0x35, 0x22])
    xs = bytes([5, 10, 10])
    ys = bytes([5, 15])
    return header + end_pts + instructions + flags + xs + ys


def _cmap():
    seg_count = 2
    ends = (66, 0xFFFF)
    starts = (65, 0xFFFF)
    deltas = ((1 - 65) & 0xFFFF, 1)
    body = struct.pack(">7H", 4, 0, 0, seg_count * 2, 4, 1, 0)
    body += struct.pack(">2H", *ends) + b"\0\0" + struct.pack(">2H", *starts)
    body += struct.pack(">2H", *deltas) + struct.pack(">2H", 0, 0)
    body = body[:2] + struct.pack(">H", len(body)) + body[4:]
    header = struct.pack(">HH", 0, 2)
    header += struct.pack(">HHI", 1, 0, 20) + struct.pack(">HHI", 3, 1, 20)
    return header + body


def _build_font(*, loc_format=0, units_per_em=UNITS_PER_EM, omit=(), magic=b"\x00\x01\x00\x00"):
    glyphs = [struct.pack(">hhhhh", 0, 0, 0, 0, 0), _rect_glyph(), _short_glyph()]
    glyf = b""
    offsets = []
    for glyph in glyphs:
        offsets.append(len(glyf))
        glyf += glyph + b"\0" * (len(glyph) % 2)
    offsets.append(len(glyf))
    if loc_format == 0:
        loca = struct.pack(f">{len(offsets)}H", *(o // 2 for o in offsets))
    else:
        loca = struct.pack(f">{len(offsets)}I", *offsets)

    head = bytearray(54)
    struct.pack_into(">H", head, 18, units_per_em)
    struct.pack_into(">h", head, 50, loc_format)
    hhea = bytearray(36)
    struct.pack_into(">hhh", hhea, 4, ASCENT, DESCENT, LINE_GAP)
    struct.pack_into(">H", hhea, 34, 2)
    hmtx = struct.pack(">HhHh", 50, 0, 40, 1) + struct.pack(">h", 3)
    maxp = struct.pack(">IH", 0x5000, 3)
    kern = struct.pack(">HH", 0, 1) + struct.pack(">7H", 0, 14 + 6, 0, 1, 0, 0, 0)
    kern += struct.pack(">HHh", 1, 2, KERN_VALUE)

    tables = {
        "cmap": _cmap(),
        "glyf": glyf,
        "loca": loca,
        "head": bytes(head),
        "hhea": bytes(hhea),
        "hmtx": hmtx,
        "maxp": maxp,
        "kern": kern,
    }
    for tag in omit:
        del tables[tag]
    header = magic + struct.pack(">HHHH", len(tables), 0, 0, 0)
    offset = 12 + 16 * len(tables)
    directory = b""
    body = b""
    for tag, content in tables.items():
        directory += tag.encode("ascii") + struct.pack(">III", 0, offset + len(body), len(content))
        body += content + b"\0" * (-len(content) % 4)
    return header + directory + body


@pytest.fixture
def font():
    return Font(_build_font(), UNITS_PER_EM)


def test_parse_reads_header_values():
    info = parse_truetype_font(_build_font())
    assert info.num_glyphs == 3
    assert info.units_per_em == UNITS_PER_EM
    assert (info.ascent, info.descent, info.line_gap) == (ASCENT, DESCENT, LINE_GAP)
    assert info.num_h_metrics == 2
    assert info.index_loc_format == 0
    assert info.loca_table_size == (3 + 1) * 2
    assert info.kern > 0


def test_parse_long_loca_size():
    info = parse_truetype_font(_build_font(loc_format=1))
    assert info.index_loc_format == 1
    assert info.loca_table_size == (3 + 1) * 4


def test_kern_table_is_optional():
    info = parse_truetype_font(_build_font(omit=("kern",)))
    assert info.kern == 0


@pytest.mark.parametrize("tag", ["cmap", "glyf", "loca", "head", "hhea", "hmtx", "maxp"])
def test_missing_required_table(tag):
    with pytest.raises(FontError):
        parse_truetype_font(_build_font(omit=(tag,)))


def test_too_short_data():
    with pytest.raises(FontError):
        parse_truetype_font(b"\x00\x01\x00\x00")


def test_cff_font_rejected():
    with pytest.raises(FontError):
        parse_truetype_font(_build_font(magic=b"OTTO"))


def test_unknown_magic_rejected():
    with pytest.raises(FontError):
        parse_truetype_font(_build_font(magic=b"abcd"))


def test_zero_units_per_em_rejected():
    with pytest.raises(FontError):
        Font(_build_font(units_per_em=0), 12)


def test_glyph_index(font):
    assert font.glyph_index(ord("A")) == 1
    assert font.glyph_index(ord("B")) == 2
    assert font.glyph_index(ord("C")) == 0
    assert font.glyph_index(0xFFFF) == 0


def test_glyph_metrics(font):
    assert font.glyph_metrics(0) == (50, 0)
    assert font.glyph_metrics(1) == (40, 1)
    assert font.glyph_metrics(2) == (40, 3)


@pytest.mark.parametrize("index", [-1, 3])
def test_glyph_metrics_out_of_range(font, index):
    with pytest.raises(FontError):
        font.glyph_metrics(index)


@pytest.mark.parametrize("loc_format", [0, 1])
def test_glyph_box(loc_format):
    font = Font(_build_font(loc_format=loc_format), UNITS_PER_EM)
    assert font.glyph_box(0) == (0, 0, 0, 0)
    assert font.glyph_box(1) == RECT_BOX
    assert font.glyph_box(2) == (5, 5, 15, 20)


@pytest.mark.parametrize("loc_format", [0, 1])
def test_glyph_outline_with_repeated_flags(loc_format):
    font = Font(_build_font(loc_format=loc_format), UNITS_PER_EM)
    points, on_curve = font.glyph_outline(1)
    assert points == [Vec2(float(x), float(y)) for x, y in RECT_POINTS]
    assert on_curve == [True] * 4


def test_glyph_outline_with_short_vectors(font):
    points, on_curve = font.glyph_outline(2)
    assert points == [Vec2(5.0, 5.0), Vec2(15.0, 5.0), Vec2(15.0, 20.0), Vec2(5.0, 20.0)]
    assert on_curve == [True, True, True, False]


def test_empty_glyph_has_no_outline(font):
    with pytest.raises(FontError):
        font.glyph_outline(0)


def test_get_glyph_renders_bitmap(font):
    glyph = font.get_glyph(ord("A"))
    assert isinstance(glyph, Glyph)
    assert glyph.glyph_index == 1
    assert (glyph.width, glyph.height) == (8, 16)
    assert len(glyph.bitmap) == glyph.width * glyph.height
    assert set(glyph.bitmap) == {255}
    assert glyph.advance_x == 40.0
    assert glyph.bearing_x == 1.0
    assert glyph.advance_y == 0.0


def test_glyph_metrics_scale_with_size(font):
    half = Font(_build_font(), UNITS_PER_EM / 2)
    full_glyph = font.get_glyph(ord("B"))
    half_glyph = half.get_glyph(ord("B"))
    assert half_glyph.advance_x == pytest.approx(full_glyph.advance_x / 2)
    assert half_glyph.bearing_x == pytest.approx(full_glyph.bearing_x / 2)


def test_get_glyph_is_cached(font):
    first = font.get_glyph(ord("A"))
    second = font.get_glyph(ord("A"))
    assert second is first
    assert second.glyph_index == 1
    assert (second.width, second.height) == (8, 16)


def test_unrenderable_glyph_is_none(font):
    assert font.get_glyph(ord("C")) is None


def test_kerning(font):
    assert font.get_kerning(ord("A"), ord("B")) == float(KERN_VALUE)
    assert font.get_kerning(ord("B"), ord("A")) == 0.0


def test_kerning_scales_with_size(font):
    half = Font(_build_font(), UNITS_PER_EM / 2)
    assert half.get_kerning(ord("A"), ord("B")) == pytest.approx(
        font.get_kerning(ord("A"), ord("B")) / 2
    )


def test_kerning_without_table():
    font = Font(_build_font(omit=("kern",)), UNITS_PER_EM)
    assert font.get_kerning(ord("A"), ord("B")) == 0.0


def test_line_metrics(font):
    assert font.ascender() == ASCENT
    assert font.descender() == DESCENT
    assert font.line_height() == ASCENT - DESCENT + LINE_GAP


def test_from_file(tmp_path, font):
    path = tmp_path / "sample.ttf"
    path.write_bytes(_build_font())
    loaded = Font.from_file(path, UNITS_PER_EM)
    assert loaded.glyph_index(ord("B")) == font.glyph_index(ord("B"))
    assert loaded.font_size == font.font_size


def test_measure_text_includes_kerning(font):
    canvas = Canvas(4, 4)
    expected = (
        font.get_glyph(ord("A")).advance_x
        + font.get_kerning(ord("A"), ord("B"))
        + font.get_glyph(ord("B")).advance_x
    )
    assert canvas.measure_text("AB", font) == pytest.approx(expected)


def test_draw_text_blends_glyph(font):
    canvas = Canvas(20, 20)
    canvas.clear(Color(255, 255, 255))
    canvas.draw_text("A", 2, 2, font, Color(0, 0, 0))
    pixels = canvas.pixels()

    def at(x, y):
        i = (y * 20 + x) * 4
        return tuple(pixels[i:i + 4])

    assert at(3, 2) == (0, 0, 0, 255)
    assert at(10, 17) == (0, 0, 0, 255)
    assert at(2, 2) == (255, 255, 255, 255)
    assert at(11, 17) == (255, 255, 255, 255)