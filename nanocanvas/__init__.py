"""A small software 2D canvas with paths, Bezier offsetting, TrueType glyph bitmaps and BMP output."""

__version__ = "0.1.0"

__all__ = ["bezier", "bmp", "canvas", "example", "font", "geometry", "path"]