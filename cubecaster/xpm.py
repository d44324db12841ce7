"""Loader for XPM images, the texture format of scene files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .xpm_colors import NONE_COLOR, color_by_name

TRANSPARENT = 0xFF000000
"""Pixel value stored for the ``none`` colour."""

_MAX_NAME = 63
_HEADER_RE = re.compile(r"\s*([+-]?\d+)")
_HEX_RE = re.compile(r"\s*[+-]?(?:0[xX])?[0-9a-fA-F]+")
_QUOTED_RE = re.compile(r'"([^"]*)"')
_BLANKS_RE = re.compile(r"[ \t]+")


class XpmError(ValueError):
    """Raised when XPM data cannot be read or parsed."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image: row-major 32-bit pixel values."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel value at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y * self.width + x]


def _blank_spans(text: str, opener: str, closer: str) -> str:
    """Replace every unquoted ``opener``..``closer`` span with spaces."""
    out = list(text)
    quoted = False
    i = 0
    while i < len(text):
        if text[i] == '"':
            quoted = not quoted
        elif not quoted and text.startswith(opener, i):
            end = text.find(closer, i + len(opener))
            stop = len(text) if end < 0 else end + len(closer)
            out[i:stop] = " " * (stop - i)
            i = stop
            continue
        i += 1
    return "".join(out)


def strip_comments(text: str) -> str:
    """Blank out C-style comments that lie outside double quotes.

    Block comments are removed first, then line comments together with the
    newline that ends them. The length of the text is kept.
    """
    return _blank_spans(_blank_spans(text, "/*", "*/"), "//", "\n")


def _words(line: str) -> list[str]:
    return [word for word in _BLANKS_RE.split(line) if word]


def _atoi(word: str) -> int:
    match = _HEADER_RE.match(word)
    return int(match.group(1)) if match else 0


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def _text_rgb(name: str, end: str | None) -> int:
    if name.startswith("#"):
        match = _HEX_RE.match(name[1:])
        return _to_int32(int(match.group(0), 16)) if match else 0
    if end is not None:
        name = f"{name} {end}"[:_MAX_NAME]
    value = color_by_name(name)
    return 0 if value is None else value


def _take(lines, what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError(f"missing {what}") from None


def parse_xpm_lines(lines) -> XpmImage:
    """Decode an image from the quoted strings of an XPM document."""
    rows = iter(lines)
    header = _words(_take(rows, "header"))
    if len(header) < 4:
        raise XpmError("XPM header needs width, height, colours and characters per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError("invalid XPM header")

    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = _take(rows, "colour definition")
        words = _words(line[cpp:])
        try:
            position = words.index("c") + 1
        except ValueError:
            raise XpmError(f"colour definition without 'c' key: {line!r}") from None
        if position >= len(words):
            raise XpmError(f"colour definition without value: {line!r}")
        end = words[position + 1] if position + 1 < len(words) else None
        value = _text_rgb(words[position], end)
        key = line[:cpp]
        # Short keys use a direct table (last wins); long keys a search (first wins).
        if cpp <= 2 or key not in palette:
            palette[key] = value

    pixels: list[int] = []
    for _ in range(height):
        row = _take(rows, "pixel row")
        for x in range(width):
            color = palette.get(row[x * cpp:(x + 1) * cpp], 0)
            if color == NONE_COLOR:
                color = TRANSPARENT
            pixels.append(color & 0xFFFFFFFF)
    return XpmImage(width, height, tuple(pixels))


def parse_xpm_text(text: str) -> XpmImage:
    """Decode an image from the text of an XPM file."""
    return parse_xpm_lines(_QUOTED_RE.findall(strip_comments(text)))


def load_xpm(path: str | PathLike[str]) -> XpmImage:
    """Read and decode an XPM file."""
    try:
        text = Path(path).read_text(encoding="latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm_text(text)