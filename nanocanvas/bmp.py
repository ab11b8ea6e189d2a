"""Encoding of RGBA pixel buffers as 24-bit uncompressed BMP images."""

from __future__ import annotations

import os
import struct

_FILE_HEADER_SIZE = 14
_INFO_HEADER_SIZE = 40
_HEADER_SIZE = _FILE_HEADER_SIZE + _INFO_HEADER_SIZE
_PIXELS_PER_METRE = 2835  # 72 DPI


def encode_bmp(width: int, height: int, data: bytes | bytearray | memoryview) -> bytes:
    """Encode a top-down RGBA buffer as a bottom-up 24-bit BMP; alpha is dropped."""
    if width < 0 or height < 0:
        raise ValueError(f"image size must not be negative, got {width}x{height}")
    needed = width * height * 4
    if len(data) < needed:
        raise ValueError(f"pixel buffer holds {len(data)} bytes, {needed} needed")
    row_size = ((3 * width + 3) // 4) * 4
    data_size = row_size * height
    header = struct.pack(
        "<2sIHHIIiiHHIIiiII",
        b"BM",
        _HEADER_SIZE + data_size,
        0,
        0,
        _HEADER_SIZE,
        _INFO_HEADER_SIZE,
        width,
        height,
        1,
        24,
        0,
        data_size,
        _PIXELS_PER_METRE,
        _PIXELS_PER_METRE,
        0,
        0,
    )
    pixels = bytes(data[:needed])
    padding = bytes(row_size - 3 * width)
    stride = width * 4
    rows = []
    for y in reversed(range(height)):
        rgba = pixels[y * stride:(y + 1) * stride]
        bgr = bytearray(3 * width)
        bgr[0::3] = rgba[2::4]
        bgr[1::3] = rgba[1::4]
        bgr[2::3] = rgba[0::4]
        rows.append(bytes(bgr) + padding)
    return header + b"".join(rows)


def write_bmp(
    filename: str | os.PathLike[str],
    width: int,
    height: int,
    data: bytes | bytearray | memoryview,
) -> None:
    """Write an RGBA buffer to ``filename`` as a 24-bit BMP file."""
    encoded = encode_bmp(width, height, data)
    with open(filename, "wb") as fp:
        fp.write(encoded)