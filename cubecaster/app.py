"""Command-line entry point and the interactive game window."""

from __future__ import annotations

import os
import sys

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from .bmp import DEFAULT_SCREENSHOT, write_screenshot  # noqa: E402
from .controls import Key, handle_key  # noqa: E402
from .render import (  # noqa: E402
    Frame,
    Textures,
    find_player,
    find_sprites,
    render_frame,
)
from .scene import Scene, SceneError, read_scene  # noqa: E402
from .xpm import XpmError, load_xpm  # noqa: E402

TITLE = "Cub3D"
SAVE_FLAG = "--save"

_PYGAME_KEYS = {
    pygame.K_w: Key.W,
    pygame.K_s: Key.S,
    pygame.K_a: Key.A,
    pygame.K_d: Key.D,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_ESCAPE: Key.ESCAPE,
}


class UsageError(ValueError):
    """Raised for bad command-line arguments."""


def screen_size(scene, screen_width: int, screen_height: int, save: bool) -> tuple[int, int]:
    """Choose the render size from the scene resolution and the screen size.

    The scene resolution is used when it is smaller than the screen in either
    direction. When saving, the width is adjusted until the pixel count is a
    multiple of 16.
    """
    width, height = screen_width, screen_height
    if scene.width < width or scene.height < height:
        width, height = scene.width, scene.height
    while save and (width * height) % 16 != 0:
        width = width - 1 if width > 32 else width + 1
    return width, height


def check_arguments(argv) -> tuple[str, bool]:
    """Return the scene path and whether to save a screenshot."""
    args = list(argv)
    if len(args) not in (1, 2):
        raise UsageError("Wrong number of arguments")
    path = args[0]
    if len(args) == 2 and args[1] != SAVE_FLAG:
        raise UsageError("Invalid file name")
    if not path.endswith(".cub"):
        raise UsageError("Invalid file name")
    return path, len(args) == 2


def _frame_rgb(frame: Frame) -> bytes:
    raw = b"".join((pixel & 0xFFFFFFFF).to_bytes(4, "little") for pixel in frame.pixels)
    rgb = bytearray(len(frame.pixels) * 3)
    rgb[0::3] = raw[2::4]
    rgb[1::3] = raw[1::4]
    rgb[2::3] = raw[0::4]
    return bytes(rgb)


class Game:
    """A scene being explored from the player's start position."""

    def __init__(self, scene: Scene, textures: Textures, width: int, height: int) -> None:
        self.scene = scene
        self.textures = textures
        self.width = width
        self.height = height
        self.player = find_player(scene.grid)
        self.sprites = find_sprites(scene.grid)

    def _render(self) -> Frame:
        return render_frame(
            self.scene, self.player, self.textures, self.sprites, self.width, self.height
        )

    def screenshot(self, path=DEFAULT_SCREENSHOT):
        """Render the current view and write it as a BMP file."""
        return write_screenshot(self._render(), path)

    def run(self) -> None:
        """Open a window and play until it is closed or Escape is pressed."""
        pygame.display.init()
        try:
            surface = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption(TITLE)
            pygame.key.set_repeat(200, 16)
            clock = pygame.time.Clock()
            dirty = True
            running = True
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN and event.key in _PYGAME_KEYS:
                        running = handle_key(
                            self.player, self.scene.grid, _PYGAME_KEYS[event.key]
                        )
                        dirty = True
                if running and dirty:
                    image = pygame.image.frombuffer(
                        _frame_rgb(self._render()), (self.width, self.height), "RGB"
                    )
                    surface.blit(image, (0, 0))
                    pygame.display.flip()
                    dirty = False
                clock.tick(60)
        finally:
            pygame.display.quit()


def _load_textures(scene: Scene) -> Textures:
    return Textures(
        north=load_xpm(scene.north),
        south=load_xpm(scene.south),
        west=load_xpm(scene.west),
        east=load_xpm(scene.east),
        sprite=load_xpm(scene.sprite),
    )


def _display_size() -> tuple[int, int] | None:
    try:
        pygame.display.init()
        info = pygame.display.Info()
    except pygame.error:
        return None
    if info.current_w <= 0 or info.current_h <= 0:
        return None
    return info.current_w, info.current_h


def _error(message: str) -> None:
    sys.stdout.write(f"Error\n{message}\n")


def main(argv=None) -> int:
    """Run the game on a scene file, or save a screenshot with ``--save``."""
    args = sys.argv[1:] if argv is None else argv
    try:
        path, save = check_arguments(args)
    except UsageError as exc:
        _error(str(exc))
        return 0
    try:
        with open(path, "rb"):
            pass
    except OSError:
        _error("Couldn't read file")
        return 0
    try:
        scene = read_scene(path)
    except SceneError:
        _error("Invalid map data")
        return 0
    try:
        textures = _load_textures(scene)
    except XpmError:
        _error("Couldn't load texture")
        return 0
    display = _display_size() or (scene.width, scene.height)
    width, height = screen_size(scene, display[0], display[1], save)
    game = Game(scene, textures, width, height)
    if save:
        game.screenshot(DEFAULT_SCREENSHOT)
    else:
        game.run()
    return 0