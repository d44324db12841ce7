"""Player movement and turning in response to keys."""

from __future__ import annotations

import math
from collections.abc import Sequence
from enum import IntEnum

from .render import Player

SPEED = 0.05
TURN = 0.05


class Key(IntEnum):
    """Key codes the game reacts to."""

    A = 0
    S = 1
    D = 2
    W = 13
    ESCAPE = 53
    LEFT = 123
    RIGHT = 124


def _blocked(grid: Sequence[str], x: float, y: float) -> bool:
    row, column = int(y), int(x)
    if 0 <= row < len(grid) and 0 <= column < len(grid[row]):
        return grid[row][column] == "1"
    return True


def move_forward(player: Player, grid: Sequence[str], direction: float) -> None:
    """Step along the view direction (negative ``direction`` steps back)."""
    step = direction * SPEED
    if not _blocked(grid, player.pos_x, player.pos_y + step * player.dir_y):
        player.pos_y += player.dir_y * step
    if not _blocked(grid, player.pos_x + step * player.dir_x, player.pos_y):
        player.pos_x += player.dir_x * step


def move_sideways(player: Player, grid: Sequence[str], direction: float) -> None:
    """Step across the view direction; ``direction`` picks the side."""
    step = direction * SPEED
    if not _blocked(grid, player.pos_x, player.pos_y - step * player.dir_x):
        player.pos_y -= player.dir_x * step
    if not _blocked(grid, player.pos_x + step * player.dir_y, player.pos_y):
        player.pos_x += player.dir_y * step


def rotate(player: Player, direction: float) -> None:
    """Turn the view direction and camera plane by ``direction * TURN`` radians."""
    angle = direction * TURN
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    player.dir_x, player.dir_y = (
        player.dir_x * cos_a - player.dir_y * sin_a,
        player.dir_x * sin_a + player.dir_y * cos_a,
    )
    player.plane_x, player.plane_y = (
        player.plane_x * cos_a - player.plane_y * sin_a,
        player.plane_x * sin_a + player.plane_y * cos_a,
    )


def handle_key(player: Player, grid: Sequence[str], key: int) -> bool:
    """Apply a key press; return False when the key asks to quit."""
    try:
        key = Key(key)
    except ValueError:
        return True
    if key is Key.W:
        move_forward(player, grid, 1)
    elif key is Key.S:
        move_forward(player, grid, -1)
    elif key is Key.A:
        move_sideways(player, grid, -1)
    elif key is Key.D:
        move_sideways(player, grid, 1)
    elif key is Key.LEFT:
        rotate(player, 1)
    elif key is Key.RIGHT:
        rotate(player, -1)
    elif key is Key.ESCAPE:
        return False
    return True