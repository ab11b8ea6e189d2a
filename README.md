# nanocanvas

A small software 2D canvas with no dependencies outside the standard
library. It draws paths into an RGBA pixel buffer and offsets quadratic and
cubic Bezier curves. It reads glyph outlines and metrics from TrueType fonts
and saves images as 24-bit BMP files.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Quick start

```python
from nanocanvas.bmp import write_bmp
from nanocanvas.canvas import Canvas
from nanocanvas.geometry import Color
from nanocanvas.path import Path

canvas = Canvas(200, 100, 2)          # 2x supersampling
canvas.clear(Color(255, 255, 255, 255))

path = Path()
path.move_to(10, 50)
path.line_to(100, 10)
path.quadratic_to(150, 0, 190, 50)
canvas.stroke_path(path, Color(0, 0, 0, 255), 2.0)

offset = path.offset_path(10, 10)     # distance 10, 10 samples per curve
canvas.stroke_path(offset, Color(255, 0, 0, 255))

box = Path()
box.rect(20, 60, 80, 30)
canvas.fill_path(box, Color(240, 240, 240, 255))

write_bmp("out.bmp", canvas.width, canvas.height, canvas.pixels())
```

Drawing coordinates address the supersampled buffer. With a supersample
factor of 2, point (100, 50) is the centre of a 200x100 canvas.
`Canvas.pixels()` averages the buffer down to the canvas's nominal size. It
returns RGBA bytes, four per pixel, row by row from the top.

## Modules

- `nanocanvas.geometry`
  - `Vec2` is an immutable vector. It supports `+`, `-`, `*` and `/` by a
    scalar, and unary `-`. Its methods are `length`, `normalize`, `dot`,
    `perpendicular` and `cross`.
  - `Color` is an immutable RGBA colour. Its methods are `lerp`, `to_rgba`,
    `with_alpha` and `scale_alpha`. A channel outside 0..255 raises
    `ValueError`.
- `nanocanvas.bezier`
  - `eval_quadratic` and `eval_cubic` give points on a curve.
  - `quadratic_derivative` and `cubic_derivative` give its derivative.
  - `split_quadratic` and `split_cubic` return the left and right control
    points.
  - `offset_quadratic` and `offset_cubic` approximate a curve shifted along
    its normal.
- `nanocanvas.path`
  - `Path` holds a list of `Command`s, each tagged with a `CommandType`,
    and a `closed` flag.
  - Its building methods are `move_to`, `line_to`, `quadratic_to`,
    `cubic_to`, `rect`, `rounded_rect`, `close` and `reset`.
  - `offset_path` returns a new path whose segments are offset by a
    distance. Move-to points stay where they are.
- `nanocanvas.canvas`
  - `Canvas(width, height, supersample=1)` provides `clear`, `fill_path`,
    `stroke_path`, `draw_rect`, `fill_rect`, `draw_text`, `measure_text`
    and `pixels`.
  - `width`, `height` and `supersample` are read-only properties.
  - A canvas size that is not positive raises `ValueError`.
- `nanocanvas.font`
  - `parse_truetype_font` reads the table offsets and header values of a
    TrueType font into a `TrueTypeFontInfo`.
  - `Font(data, font_size)` or `Font.from_file(filename, font_size)` loads a
    font. It provides `glyph_index`, `glyph_metrics`, `glyph_box`,
    `glyph_outline`, `get_glyph` (a cached `Glyph` with a bitmap, or
    `None`), `get_kerning`, `line_height`, `ascender` and `descender`.
  - Malformed or unsupported font data raises `FontError`, a subclass of
    `ValueError`.
- `nanocanvas.bmp`
  - `encode_bmp(width, height, data)` returns the bytes of a 24-bit BMP
    image made from an RGBA buffer. Alpha is dropped.
  - `write_bmp(filename, width, height, data)` writes those bytes to a file.

## Example command

```
nanocanvas-example [output] [--supersample N]
```

The command draws a path made of a line, a quadratic curve and a cubic
curve. It adds offset copies 20, 40 and 60 units away on both sides, a
background box and a small legend. It writes the result to `output`, which
defaults to `bezier_offset_example.bmp`. The supersampling factor defaults
to 4.

## Limitations

- Filling and stroking use only the `move_to` and `line_to` points of a
  path. Curve segments are stored and offset, but they are not flattened
  when drawing, so they do not appear on the canvas.
- Strokes are one-pixel lines. The `width` and `stroke_width` arguments
  have no effect.
- There is no antialiasing beyond supersampling. `Canvas.antialiasing_level`
  is stored, but it does not change drawing.
- Fills use the even-odd rule over a single polygon.
- Font support is limited:
  - Only TrueType outlines are read. CFF-based fonts are rejected.
  - Character lookup uses format 4 `cmap` subtables only.
  - Kerning uses format 0 `kern` subtables only.
  - Only simple glyphs can be rendered. Composite glyphs give no bitmap.
  - Glyph bitmaps fill all outline points as one straight-edged polygon.
    The bitmap dimensions are the glyph's bounding box in font units.
- Text is drawn only from glyph bitmaps.
- Images can be written only as BMP files. There is no image reading or
  other output format.