"""Validation of the map section of a scene file."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

_WALKABLE = frozenset("02NSWE")
_PLAYER = frozenset("NSWE")
_ALLOWED = frozenset("1 ")

_ORTHOGONAL = ((0, -1), (0, 1), (-1, 0), (1, 0))
_DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class MapError(ValueError):
    """Raised when a map is malformed or not closed by walls."""


@dataclass(frozen=True)
class MapInfo:
    """A validated map grid and the number of sprites on it."""

    grid: tuple[str, ...]
    sprite_count: int


def _at(grid: Sequence[str], x: int, y: int) -> str:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return ""


def _walls_off(grid: Sequence[str], x: int, y: int, dx: int, dy: int) -> bool:
    """Walk over open cells in one direction; True if a wall ends the walk."""
    while (
        _at(grid, x, y) in _WALKABLE
        and not (dy < 0 and y == 0)
        and not (dx < 0 and x == 0)
    ):
        x += dx
        y += dy
    return _at(grid, x, y) == "1"


def check_diag(grid: Sequence[str], x: int, y: int) -> bool:
    """Return True if walls close the cell in all four diagonal directions."""
    return all(_walls_off(grid, x, y, dx, dy) for dx, dy in _DIAGONAL)


def check_cell(grid: Sequence[str], x: int, y: int) -> bool:
    """Return True if walls close the cell in all eight directions."""
    return all(_walls_off(grid, x, y, dx, dy) for dx, dy in _ORTHOGONAL) and check_diag(
        grid, x, y
    )


def validate_map(rows: Iterable[str]) -> MapInfo:
    """Check a map and count its sprites.

    Raises MapError for an unknown character, an open cell, more than one
    player start or no player start at all.
    """
    grid = tuple(rows)
    sprites = 0
    player: tuple[int, int] | None = None
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell in _ALLOWED:
                continue
            if cell in _PLAYER:
                if player is not None:
                    raise MapError(f"second player start at ({x}, {y})")
                player = (x, y)
            elif cell == "2":
                sprites += 1
            elif cell != "0":
                raise MapError(f"invalid map character {cell!r} at ({x}, {y})")
            if not check_cell(grid, x, y):
                raise MapError(f"map is open at ({x}, {y})")
    if player is None:
        raise MapError("map has no player start")
    return MapInfo(grid, sprites)