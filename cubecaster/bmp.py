"""Writing rendered frames as 24-bit BMP screenshots."""

from __future__ import annotations

import struct
from os import PathLike
from pathlib import Path

from .render import Frame

HEADER_SIZE = 54
INFO_HEADER_SIZE = 40
PIXELS_PER_METRE = 3780
DEFAULT_SCREENSHOT = "screenshot.bmp"


def _header(width: int, height: int) -> bytes:
    image_size = width * height * 3
    file_header = struct.pack("<2sIIi", b"BM", image_size + HEADER_SIZE, 0, HEADER_SIZE)
    info_header = struct.pack(
        "<IiiHHIIiiII",
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        24,
        0,
        image_size,
        PIXELS_PER_METRE,
        PIXELS_PER_METRE,
        0,
        0,
    )
    return file_header + info_header


def _row_bgr(pixels: list[int]) -> bytearray:
    raw = b"".join((pixel & 0xFFFFFFFF).to_bytes(4, "little") for pixel in pixels)
    row = bytearray(len(pixels) * 3)
    row[0::3] = raw[0::4]
    row[1::3] = raw[1::4]
    row[2::3] = raw[2::4]
    return row


def encode_bmp(frame: Frame) -> bytes:
    """Return the frame as an uncompressed 24-bit BMP image.

    Rows are stored bottom-up, three bytes (blue, green, red) per pixel and
    without row padding.
    """
    width, height = frame.width, frame.height
    body = bytearray()
    for y in reversed(range(height)):
        body += _row_bgr(frame.pixels[y * width:(y + 1) * width])
    return _header(width, height) + bytes(body)


def write_screenshot(frame: Frame, path: str | PathLike[str] = DEFAULT_SCREENSHOT) -> Path:
    """Write the frame as a BMP file and return its path."""
    target = Path(path)
    target.write_bytes(encode_bmp(frame))
    return target