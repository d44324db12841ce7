"""Ray casting of walls and sprites into a frame of 32-bit pixels."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from .xpm import XpmImage

_MASK = 0xFFFFFFFF
_RGB = 0x00FFFFFF
_MIN_SPRITE_DISTANCE = 0.09

# Starting direction and camera plane for each player start letter.
_STARTS: dict[str, tuple[tuple[float, float], tuple[float, float]]] = {
    "N": ((0.0, -1.0), (-0.66, 0.0)),
    "S": ((0.0, 1.0), (0.66, 0.0)),
    "W": ((-1.0, 0.0), (0.0, 0.66)),
    "E": ((1.0, 0.0), (0.0, -0.66)),
}


@dataclass
class Player:
    """Position, view direction and camera plane of the player."""

    pos_x: float
    pos_y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float


@dataclass(frozen=True)
class Sprite:
    """A sprite standing at the centre of a map cell."""

    pos_x: float
    pos_y: float


@dataclass(frozen=True)
class Textures:
    """The images used for the four wall faces and for sprites."""

    north: XpmImage
    south: XpmImage
    west: XpmImage
    east: XpmImage
    sprite: XpmImage


@dataclass(frozen=True)
class RayHit:
    """Where one screen column's ray met a wall."""

    side: int
    ray_dir_x: float
    ray_dir_y: float
    distance: float
    line_height: int
    draw_start: int
    draw_end: int
    wall_x: float


@dataclass
class Frame:
    """A width by height image of 32-bit pixel values, row-major."""

    width: int
    height: int
    pixels: list[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid frame size {self.width}x{self.height}")
        if not self.pixels:
            self.pixels = [0] * (self.width * self.height)
        elif len(self.pixels) != self.width * self.height:
            raise ValueError("pixel count does not match frame size")

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return y * self.width + x

    def put(self, x: int, y: int, color: int) -> None:
        """Store ``color`` as an unsigned 32-bit value at (x, y)."""
        self.pixels[self._index(x, y)] = color & _MASK

    def get(self, x: int, y: int) -> int:
        """Return the pixel value at (x, y)."""
        return self.pixels[self._index(x, y)]


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _texel(texture: XpmImage, x: int, y: int) -> int:
    x = min(max(x, 0), texture.width - 1)
    y = min(max(y, 0), texture.height - 1)
    return texture.pixels[y * texture.width + x]


def _is_wall(grid: Sequence[str], x: int, y: int) -> bool:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x] == "1"
    return True


def find_player(grid: Sequence[str]) -> Player:
    """Return the player standing on the first start letter of the grid."""
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell in _STARTS:
                (dir_x, dir_y), (plane_x, plane_y) = _STARTS[cell]
                return Player(x + 0.5, y + 0.5, dir_x, dir_y, plane_x, plane_y)
    raise ValueError("map has no player start")


def find_sprites(grid: Sequence[str]) -> list[Sprite]:
    """Return a sprite for every ``2`` cell, in row-major order."""
    return [
        Sprite(x + 0.5, y + 0.5)
        for y, row in enumerate(grid)
        for x, cell in enumerate(row)
        if cell == "2"
    ]


def fill_floor_ceiling(frame: Frame, ceiling: int, floor: int) -> None:
    """Paint the upper half of the frame with ``ceiling``, the rest with ``floor``."""
    split = (frame.height // 2) * frame.width
    total = frame.width * frame.height
    frame.pixels[:split] = [ceiling & _MASK] * split
    frame.pixels[split:] = [floor & _MASK] * (total - split)


def cast_column(grid: Sequence[str], player: Player, camera_x: float, height: int) -> RayHit:
    """Trace one ray across the grid until it meets a wall."""
    ray_x = player.dir_x + player.plane_x * camera_x
    ray_y = player.dir_y + player.plane_y * camera_x
    map_x = math.floor(player.pos_x)
    map_y = math.floor(player.pos_y)
    delta_x = abs(1 / ray_x) if ray_x else math.inf
    delta_y = abs(1 / ray_y) if ray_y else math.inf

    if ray_x < 0:
        step_x = -1
        side_x = (player.pos_x - map_x) * delta_x
    else:
        step_x = 1
        side_x = (map_x + 1.0 - player.pos_x) * delta_x
    if ray_y < 0:
        step_y = -1
        side_y = (player.pos_y - map_y) * delta_y
    else:
        step_y = 1
        side_y = (map_y + 1.0 - player.pos_y) * delta_y

    side = 0
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if _is_wall(grid, map_x, map_y):
            break

    if side == 0:
        distance = (map_x - player.pos_x + (1 - step_x) / 2) / ray_x
        wall = player.pos_y + distance * ray_y
    else:
        distance = (map_y - player.pos_y + (1 - step_y) / 2) / ray_y
        wall = player.pos_x + distance * ray_x
    wall -= math.floor(wall)

    line_height = height if distance <= 0 else int(height / distance)
    draw_start = max(-(line_height // 2) + height // 2, 0)
    draw_end = min(line_height // 2 + height // 2, height)
    return RayHit(side, ray_x, ray_y, distance, line_height, draw_start, draw_end, wall)


def choose_texture(hit: RayHit, textures: Textures) -> XpmImage:
    """Pick the wall texture for the face a ray hit."""
    if hit.side == 1 and hit.ray_dir_y > 0:
        return textures.south
    if hit.side == 1 and hit.ray_dir_y < 0:
        return textures.north
    if hit.side == 0 and hit.ray_dir_x > 0:
        return textures.west
    return textures.east


def draw_wall_column(frame: Frame, column: int, hit: RayHit, texture: XpmImage) -> None:
    """Draw the textured wall slice of one screen column."""
    if hit.line_height <= 0 or hit.draw_start >= hit.draw_end:
        return
    tex_x = int(hit.wall_x * texture.height)
    if (hit.side == 0 and hit.ray_dir_x > 0) or (hit.side == 1 and hit.ray_dir_y < 0):
        tex_x = texture.height - tex_x - 1
    step = texture.height / hit.line_height
    pos = (hit.draw_start - frame.height // 2 + hit.line_height // 2) * step
    for y in range(hit.draw_start, hit.draw_end):
        tex_y = int(pos) & (texture.width - 1)
        pos += step
        frame.put(column, y, _texel(texture, tex_x, tex_y))


def draw_sprites(
    frame: Frame,
    player: Player,
    sprites: Sequence[Sprite],
    sprite_texture: XpmImage,
    wall_distances: Sequence[float],
) -> None:
    """Draw sprites far to near, hidden where a wall column is closer."""
    width, height = frame.width, frame.height

    def distance(sprite: Sprite) -> float:
        return (player.pos_x - sprite.pos_x) ** 2 + (player.pos_y - sprite.pos_y) ** 2

    inv_det_base = player.plane_x * player.dir_y - player.dir_x * player.plane_y
    for sprite in sorted(sprites, key=distance, reverse=True):
        if distance(sprite) <= _MIN_SPRITE_DISTANCE or inv_det_base == 0:
            continue
        comp_x = sprite.pos_x - player.pos_x
        comp_y = sprite.pos_y - player.pos_y
        inv_det = 1.0 / inv_det_base
        new_x = inv_det * (player.dir_y * comp_x - player.dir_x * comp_y)
        new_y = inv_det * (-player.plane_y * comp_x + player.plane_x * comp_y)
        if new_y <= 0:
            continue

        screen_x = int((width // 2) * (1 + new_x / new_y))
        sprite_height = abs(int(height / new_y))
        start_y = max(-(sprite_height // 2) + height // 2, 0)
        end_y = sprite_height // 2 + height // 2
        if end_y >= height:
            end_y = height - 1
        sprite_width = abs(int(width / new_y))
        left = -(sprite_width // 2) + screen_x
        start_x = max(left, 0)
        end_x = sprite_width // 2 + screen_x
        if end_x >= width:
            end_x = width - 1

        for stripe in range(start_x, end_x):
            if not (0 < stripe < width) or new_y >= wall_distances[stripe]:
                continue
            tex_x = (256 * (stripe - left) * sprite_texture.width // sprite_width) // 256
            for y in range(start_y, end_y):
                d = y * 256 - height * 128 + sprite_height * 128
                tex_y = _trunc_div(_trunc_div(d * sprite_texture.height, sprite_height), 256)
                color = _texel(sprite_texture, tex_x, tex_y)
                if color & _RGB:
                    frame.put(stripe, y, color)


def render_frame(scene, player: Player, textures: Textures, sprites: Sequence[Sprite],
                 width: int, height: int) -> Frame:
    """Render the whole view of ``player`` in ``scene``."""
    frame = Frame(width, height)
    fill_floor_ceiling(frame, scene.ceiling, scene.floor)
    distances: list[float] = []
    for column in range(width):
        camera_x = 2 * column / width - 1
        hit = cast_column(scene.grid, player, camera_x, height)
        draw_wall_column(frame, column, hit, choose_texture(hit, textures))
        distances.append(hit.distance)
    draw_sprites(frame, player, sprites, textures.sprite, distances)
    return frame