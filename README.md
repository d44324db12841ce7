# cubecaster

cubecaster is a small raycasting engine in the style of early first-person
games. It reads a `.cub` scene file describing the resolution, the wall and
sprite textures (XPM images), the floor and ceiling colours and a grid map,
then either opens a window you can walk around in, or renders a single frame
to `screenshot.bmp`.

## Installing

```
pip install .
```

This installs the `cubecaster` command and its one dependency, pygame, which
is used for the window and for reading the screen size.

## Running

```
cubecaster maps/level.cub
cubecaster maps/level.cub --save
```

The first argument must end in `.cub`; the only accepted second argument is
`--save`. With `--save` no window is opened: one frame is rendered and written
to `screenshot.bmp` in the current directory.

The render size is the screen size, unless the scene's resolution is smaller
than the screen in either direction, in which case the scene's resolution is
used. When the screen size cannot be read, the scene's resolution is used.
With `--save` the width is then nudged until width × height is a multiple
of 16.

Controls in the window (keys repeat while held):

| Key         | Action            |
|-------------|-------------------|
| W / S       | move forward/back |
| A / D       | strafe left/right |
| Left/Right  | turn              |
| Escape      | quit              |

Closing the window also quits. Walls block movement.

Problems are reported on standard output as `Error` followed by a one-line
reason: `Wrong number of arguments`, `Invalid file name`, `Couldn't read file`,
`Invalid map data` or `Couldn't load texture`. The command exits with status 0
in every case.

## Scene files

```
R 1920 1080
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
S ./textures/sprite.xpm
F 220,100,0
C 225,30,0

1111111
1000001
1020N01
1000001
1111111
```

* `R` – width and height, both greater than zero.
* `NO`, `SO`, `WE`, `EA` – wall textures; `S` – sprite texture. Each path
  must end in `.xpm` and name a file that can be opened.
* `F`, `C` – floor and ceiling colours as three numbers from 0 to 255,
  normally separated by commas.
* Settings may come in any order, leading spaces and blank lines are ignored,
  and each setting may appear only once.
* The map starts at the first line whose first non-blank character is `1`
  and runs to the end of the file. `1` is a wall, `0` is floor, `2` is a
  sprite, and exactly one of `N`, `S`, `E`, `W` marks the player's start and
  facing. Spaces are allowed outside the walls. Every open cell must be
  enclosed by walls in all eight directions.

## Using it as a library

```python
from cubecaster.scene import read_scene
from cubecaster.xpm import load_xpm
from cubecaster.render import Textures, find_player, find_sprites, render_frame
from cubecaster.bmp import write_screenshot

scene = read_scene("maps/level.cub")
textures = Textures(
    north=load_xpm(scene.north),
    south=load_xpm(scene.south),
    west=load_xpm(scene.west),
    east=load_xpm(scene.east),
    sprite=load_xpm(scene.sprite),
)
player = find_player(scene.grid)
frame = render_frame(scene, player, textures, find_sprites(scene.grid), 640, 480)
write_screenshot(frame, "view.bmp")
```

The modules:

* `cubecaster.scene` – `read_scene` and `parse_scene` build a `Scene`;
  `parse_resolution`, `parse_color` and `parse_texture` handle single lines.
  Invalid input raises `SceneError`.
* `cubecaster.map_check` – `validate_map` checks a map grid and returns a
  `MapInfo` with the grid and sprite count; `check_cell` and `check_diag`
  test whether a cell is enclosed. Problems raise `MapError`.
* `cubecaster.xpm` – `load_xpm`, `parse_xpm_text` and `parse_xpm_lines` decode
  XPM images into an `XpmImage` (`width`, `height`, `pixels`, `pixel(x, y)`);
  `strip_comments` removes C-style comments. Failures raise `XpmError`.
* `cubecaster.xpm_colors` – `color_by_name` looks up X11 colour names.
* `cubecaster.render` – `Frame`, `Player`, `Sprite`, `Textures`, `RayHit`,
  plus `cast_column`, `choose_texture`, `draw_wall_column`, `draw_sprites`,
  `fill_floor_ceiling` and `render_frame`.
* `cubecaster.bmp` – `encode_bmp` turns a frame into the bytes of a 24-bit
  BMP file; `write_screenshot` writes it to disk.
* `cubecaster.controls` – `Key`, `handle_key`, `move_forward`,
  `move_sideways` and `rotate`.
* `cubecaster.app` – `Game` (with `run` and `screenshot`), `screen_size`,
  `check_arguments` and `main`, the function behind the command.

## What it does not do

Textures are read only from XPM files; other image formats are not supported.
There is no mouse look, no sound, no minimap and no way to interact with
sprites: they are drawn but do not block movement.

## Tests

```
pip install .[test]
pytest
```