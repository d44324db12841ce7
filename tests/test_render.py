import pytest

from cubecaster.render import (
    Frame,
    Player,
    RayHit,
    Sprite,
    Textures,
    cast_column,
    choose_texture,
    draw_sprites,
    draw_wall_column,
    fill_floor_ceiling,
    find_player,
    find_sprites,
    render_frame,
)
from cubecaster.scene import Scene
from cubecaster.xpm import XpmImage

ROOM = (
    "111111111",
    "100000001",
    "100020001",
    "100000001",
    "1000N0001",
    "100000001",
    "100000001",
    "100000001",
    "111111111",
)

CORRIDOR = ("1111111", "1000001", "1111111")


def solid(color, size=4):
    return XpmImage(size, size, (color,) * (size * size))


@pytest.fixture
def textures():
    return Textures(
        north=solid(0x110000),
        south=solid(0x002200),
        west=solid(0x000033),
        east=solid(0x440044),
        sprite=solid(0x555555),
    )


def facing_north():
    return Player(4.5, 4.5, 0.0, -1.0, -0.66, 0.0)


@pytest.mark.parametrize(
    "letter, direction, plane",
    [
        ("N", (0.0, -1.0), (-0.66, 0.0)),
        ("S", (0.0, 1.0), (0.66, 0.0)),
        ("W", (-1.0, 0.0), (0.0, 0.66)),
        ("E", (1.0, 0.0), (0.0, -0.66)),
    ],
)
def test_find_player_start_letters(letter, direction, plane):
    player = find_player(("111", "1" + letter + "1", "111"))
    assert (player.pos_x, player.pos_y) == (1.5, 1.5)
    assert (player.dir_x, player.dir_y) == direction
    assert (player.plane_x, player.plane_y) == plane


def test_find_player_missing():
    with pytest.raises(ValueError):
        find_player(("111", "101", "111"))


def test_find_sprites_row_major():
    grid = ("11111", "12021", "10201", "11111")
    assert find_sprites(grid) == [Sprite(1.5, 1.5), Sprite(3.5, 1.5), Sprite(2.5, 2.5)]


def test_frame_put_get_round_trip():
    frame = Frame(3, 2)
    frame.put(2, 1, 0x123456)
    assert frame.get(2, 1) == 0x123456
    assert frame.get(0, 0) == 0


def test_frame_out_of_bounds():
    frame = Frame(3, 2)
    with pytest.raises(IndexError):
        frame.put(3, 0, 1)
    with pytest.raises(IndexError):
        frame.get(0, 2)


def test_frame_rejects_bad_size():
    with pytest.raises(ValueError):
        Frame(0, 4)


def test_fill_floor_ceiling_odd_height():
    frame = Frame(4, 5)
    fill_floor_ceiling(frame, 0xAAAAAA, 0xBBBBBB)
    for x in range(4):
        assert [frame.get(x, y) for y in range(5)] == [0xAAAAAA] * 2 + [0xBBBBBB] * 3


def test_cast_column_distance_east():
    player = Player(3.5, 1.5, 1.0, 0.0, 0.0, -0.66)
    hit = cast_column(CORRIDOR, player, 0.0, 100)
    assert hit.side == 0
    assert hit.distance == pytest.approx(2.5)
    assert hit.draw_end - hit.draw_start == hit.line_height


def test_cast_column_symmetric_east_west():
    east = cast_column(CORRIDOR, Player(3.5, 1.5, 1.0, 0.0, 0.0, -0.66), 0.0, 60)
    west = cast_column(CORRIDOR, Player(3.5, 1.5, -1.0, 0.0, 0.0, 0.66), 0.0, 60)
    assert east.distance == pytest.approx(west.distance)
    assert east.line_height == west.line_height
    assert east.ray_dir_x > 0 > west.ray_dir_x


def test_cast_column_closer_wall_is_taller():
    near = cast_column(CORRIDOR, Player(4.5, 1.5, 1.0, 0.0, 0.0, -0.66), 0.0, 60)
    far = cast_column(CORRIDOR, Player(1.5, 1.5, 1.0, 0.0, 0.0, -0.66), 0.0, 60)
    assert near.distance < far.distance
    assert near.line_height > far.line_height
    assert 0 <= near.draw_start <= far.draw_start
    assert far.draw_end <= near.draw_end <= 60


def test_cast_column_wall_x_in_unit_range():
    player = facing_north()
    for camera in (-1.0, -0.3, 0.0, 0.7):
        hit = cast_column(ROOM, player, camera, 40)
        assert 0.0 <= hit.wall_x < 1.0


@pytest.mark.parametrize(
    "side, ray_x, ray_y, face",
    [
        (1, 0.0, 1.0, "south"),
        (1, 0.0, -1.0, "north"),
        (0, 1.0, 0.0, "west"),
        (0, -1.0, 0.0, "east"),
    ],
)
def test_choose_texture(textures, side, ray_x, ray_y, face):
    hit = RayHit(side, ray_x, ray_y, 1.0, 10, 0, 10, 0.5)
    assert choose_texture(hit, textures) is getattr(textures, face)


def test_draw_wall_column_fills_only_slice():
    frame = Frame(3, 20)
    hit = RayHit(1, 0.0, -1.0, 2.0, 10, 5, 15, 0.25)
    draw_wall_column(frame, 1, hit, solid(0x00ABCD))
    column = [frame.get(1, y) for y in range(20)]
    assert column[5:15] == [0x00ABCD] * 10
    assert column[:5] == [0] * 5 and column[15:] == [0] * 5
    assert all(frame.get(0, y) == 0 for y in range(20))


def test_draw_wall_column_empty_line():
    frame = Frame(2, 10)
    hit = RayHit(0, 1.0, 0.0, 50.0, 0, 5, 5, 0.1)
    draw_wall_column(frame, 0, hit, solid(0x00ABCD))
    assert frame.pixels == [0] * 20


def test_draw_sprite_in_front(textures):
    frame = Frame(40, 40)
    draw_sprites(frame, facing_north(), [Sprite(4.5, 2.5)], textures.sprite, [100.0] * 40)
    assert frame.get(20, 20) == 0x555555
    assert frame.get(0, 0) == 0


def test_draw_sprite_hidden_by_wall(textures):
    frame = Frame(40, 40)
    draw_sprites(frame, facing_north(), [Sprite(4.5, 2.5)], textures.sprite, [1.0] * 40)
    assert frame.pixels == [0] * 1600


def test_draw_sprite_behind_player(textures):
    frame = Frame(40, 40)
    draw_sprites(frame, facing_north(), [Sprite(4.5, 6.5)], textures.sprite, [100.0] * 40)
    assert frame.pixels == [0] * 1600


def test_draw_sprite_transparent_pixels_skipped():
    frame = Frame(40, 40)
    clear = XpmImage(2, 2, (0xFF000000,) * 4)
    draw_sprites(frame, facing_north(), [Sprite(4.5, 2.5)], clear, [100.0] * 40)
    assert frame.pixels == [0] * 1600


def test_draw_sprites_near_one_drawn_last():
    frame = Frame(40, 40)
    near, far = Sprite(4.5, 3.5), Sprite(4.5, 2.5)
    draw_sprites(frame, facing_north(), [near], solid(0x0000AA), [100.0] * 40)
    draw_sprites(frame, facing_north(), [far], solid(0x00BB00), [100.0] * 40)
    expected_far_only = frame.get(20, 20)
    mixed = Frame(40, 40)
    draw_sprites(mixed, facing_north(), [near, far], solid(0x0000AA), [100.0] * 40)
    assert expected_far_only == 0x00BB00
    assert mixed.get(20, 20) == 0x0000AA


def make_scene(grid):
    return Scene(
        width=40, height=40, north="n.xpm", south="s.xpm", west="w.xpm",
        east="e.xpm", sprite="sp.xpm", floor=0x0F0F0F, ceiling=0xC0C0C0,
        grid=grid, sprite_count=len(find_sprites(grid)),
    )


def test_render_frame_layout(textures):
    grid = tuple(row.replace("2", "0") for row in ROOM)
    scene = make_scene(grid)
    frame = render_frame(scene, find_player(grid), textures, [], 40, 40)
    assert (frame.width, frame.height) == (40, 40)
    assert all(frame.get(x, 0) == scene.ceiling for x in range(40))
    assert all(frame.get(x, 39) == scene.floor for x in range(40))
    assert frame.get(20, 20) == textures.north.pixel(0, 0)


def test_render_frame_with_sprite(textures):
    scene = make_scene(ROOM)
    frame = render_frame(scene, find_player(ROOM), textures, find_sprites(ROOM), 40, 40)
    assert frame.get(20, 20) == textures.sprite.pixel(0, 0)
    assert frame.get(20, 0) == scene.ceiling