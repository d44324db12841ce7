"""Reading and checking of ``.cub`` scene description files."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .map_check import MapError, validate_map

INT_MAX = 2147483647
OVERFLOW_DIMENSION = 2147483645
"""Value a resolution takes when its number does not fit in an int."""

_DIMENSION_RE = re.compile(r" *(\d*) *")
_COMPONENT_RE = re.compile(r",? *(\d*) *")
_PATH_RE = re.compile(r" *([^ ]*) *")

# Checked in order: "SO " must win over the sprite key "S ".
_TEXTURE_KEYS = (
    ("NO ", "north"),
    ("SO ", "south"),
    ("WE ", "west"),
    ("EA ", "east"),
    ("S ", "sprite"),
)
_REQUIRED = ("resolution", "north", "south", "west", "east", "sprite", "floor", "ceiling")


class SceneError(ValueError):
    """Raised when a scene file is unreadable or its contents are invalid."""


@dataclass(frozen=True)
class Scene:
    """Everything a scene file describes."""

    width: int
    height: int
    north: str
    south: str
    west: str
    east: str
    sprite: str
    floor: int
    ceiling: int
    grid: tuple[str, ...]
    sprite_count: int


def _expect_space(line: str, pos: int, what: str) -> None:
    if not line.startswith(" ", pos):
        raise SceneError(f"{what} identifier must be followed by a space: {line!r}")


def _read_dimension(line: str, pos: int) -> tuple[int, int]:
    match = _DIMENSION_RE.match(line, pos)
    digits = match.group(1)
    value = int(digits) if digits else 0
    if value > INT_MAX:
        value = OVERFLOW_DIMENSION
    return value, match.end()


def parse_resolution(line: str, index: int) -> tuple[int, int]:
    """Parse an ``R <width> <height>`` line whose ``R`` sits at ``index``."""
    pos = index + 1
    _expect_space(line, pos, "resolution")
    width, pos = _read_dimension(line, pos)
    height, pos = _read_dimension(line, pos)
    if pos != len(line) or width <= 0 or height <= 0:
        raise SceneError(f"invalid resolution: {line!r}")
    return width, height


def _read_component(line: str, pos: int) -> tuple[int, int]:
    match = _COMPONENT_RE.match(line, pos)
    digits = match.group(1)
    if not digits or int(digits) > 255:
        raise SceneError(f"invalid colour component in {line!r}")
    return int(digits), match.end()


def parse_color(line: str, index: int) -> int:
    """Parse an ``F r,g,b`` or ``C r,g,b`` line; return 0xRRGGBB.

    The identifier sits at ``index``. Commas between components may be left
    out; each component must lie between 0 and 255.
    """
    pos = index + 1
    _expect_space(line, pos, "colour")
    red, pos = _read_component(line, pos)
    green, pos = _read_component(line, pos)
    blue, pos = _read_component(line, pos)
    if pos != len(line):
        raise SceneError(f"unexpected text after colour: {line!r}")
    return red << 16 | green << 8 | blue


def parse_texture(line: str, index: int) -> tuple[str, str]:
    """Parse a texture line whose identifier sits at ``index``.

    Returns the scene field it sets (``north``, ``south``, ``west``, ``east``
    or ``sprite``) and the path, which must name a readable ``.xpm`` file.
    """
    for prefix, field in _TEXTURE_KEYS:
        if line.startswith(prefix, index):
            break
    else:
        raise SceneError(f"unknown texture identifier: {line!r}")
    match = _PATH_RE.match(line, index + len(prefix))
    path = match.group(1)
    if not path:
        raise SceneError(f"missing texture path: {line!r}")
    if match.end() != len(line):
        raise SceneError(f"unexpected text after texture path: {line!r}")
    if not path.endswith(".xpm"):
        raise SceneError(f"texture is not an .xpm file: {path!r}")
    try:
        with open(path, "rb"):
            pass
    except OSError as exc:
        raise SceneError(f"cannot open texture {path!r}: {exc}") from exc
    return field, path


def _store(found: dict[str, object], key: str, value: object) -> None:
    if key in found:
        raise SceneError(f"{key} given more than once")
    found[key] = value


def parse_scene(lines: Iterable[str]) -> Scene:
    """Build a Scene from the lines of a scene file.

    Element lines may come in any order, blank lines are ignored, and the map
    starts at the first line whose first non-blank character is ``1`` and runs
    to the end of the file.
    """
    rows = [line.removesuffix("\n") for line in lines]
    found: dict[str, object] = {}
    map_info = None
    for number, line in enumerate(rows, start=1):
        index = len(line) - len(line.lstrip(" "))
        key = line[index:index + 1]
        if not key:
            continue
        if key == "R":
            _store(found, "resolution", parse_resolution(line, index))
        elif key in "NSWE":
            field, path = parse_texture(line, index)
            _store(found, field, path)
        elif key in "FC":
            _store(found, "floor" if key == "F" else "ceiling", parse_color(line, index))
        elif key == "1":
            try:
                map_info = validate_map(rows[number - 1:])
            except MapError as exc:
                raise SceneError(str(exc)) from exc
            break
        else:
            raise SceneError(f"unexpected content on line {number}: {line!r}")

    missing = [name for name in _REQUIRED if name not in found]
    if map_info is None:
        missing.append("map")
    if missing:
        raise SceneError("invalid map data: missing " + ", ".join(missing))

    width, height = found["resolution"]
    return Scene(
        width=width,
        height=height,
        north=found["north"],
        south=found["south"],
        west=found["west"],
        east=found["east"],
        sprite=found["sprite"],
        floor=found["floor"],
        ceiling=found["ceiling"],
        grid=map_info.grid,
        sprite_count=map_info.sprite_count,
    )


def read_scene(path: str | PathLike[str]) -> Scene:
    """Read and parse a scene file."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise SceneError(f"couldn't read file {path}: {exc}") from exc
    return parse_scene(data.decode("latin-1").split("\n"))