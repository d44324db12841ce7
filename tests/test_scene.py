import pytest

from cubecaster.scene import (
    OVERFLOW_DIMENSION,
    Scene,
    SceneError,
    parse_color,
    parse_resolution,
    parse_scene,
    parse_texture,
    read_scene,
)

MAP = ["111111", "100201", "10N001", "111111"]


@pytest.fixture
def textures(tmp_path):
    paths = {}
    for name in ("north", "south", "west", "east", "sprite"):
        path = tmp_path / f"{name}.xpm"
        path.write_text("/* XPM */\n")
        paths[name] = str(path)
    return paths


def scene_lines(textures, extra=(), map_rows=MAP):
    return [
        "R 640 480",
        f"NO {textures['north']}",
        f"SO {textures['south']}",
        f"WE {textures['west']}",
        f"EA {textures['east']}",
        f"S {textures['sprite']}",
        "F 10,20,30",
        "C 40,50,60",
        *extra,
        "",
        *map_rows,
    ]


def test_resolution_values():
    assert parse_resolution("R 1920 1080", 0) == (1920, 1080)


def test_resolution_with_indent_and_trailing_spaces():
    assert parse_resolution("  R   800  600  ", 2) == (800, 600)


def test_resolution_overflow_is_clamped():
    assert parse_resolution("R 99999999999 7", 0) == (OVERFLOW_DIMENSION, 7)


@pytest.mark.parametrize(
    "line",
    ["R1920 1080", "R 1920", "R 0 100", "R 100 0", "R 10 10 x", "R -5 10", "R 19a0 10"],
)
def test_resolution_errors(line):
    with pytest.raises(SceneError):
        parse_resolution(line, 0)


def test_color_white():
    assert parse_color("F 255,255,255", 0) == 0xFFFFFF


def test_color_pinned_value():
    assert parse_color("C 1,2,3", 0) == 0x010203


def test_color_commas_are_optional():
    assert parse_color("F 12 34 56", 0) == parse_color("F 12,34,56", 0)


def test_color_spaces_around_components():
    assert parse_color("  C  12 , 34 ,56 ", 2) == parse_color("C 12,34,56", 0)


@pytest.mark.parametrize(
    "line",
    ["F 256,0,0", "F 1,2", "F1,2,3", "F 1,2,3 x", "F 1,,2,3", "F a,b,c", "F 1,2,3,"],
)
def test_color_errors(line):
    with pytest.raises(SceneError):
        parse_color(line, 0)


def test_texture_north(textures):
    assert parse_texture(f"NO {textures['north']}", 0) == ("north", textures["north"])


def test_texture_south_is_not_sprite(textures):
    assert parse_texture(f"SO   {textures['south']}  ", 0) == ("south", textures["south"])


def test_texture_sprite(textures):
    assert parse_texture(f"  S {textures['sprite']}", 2) == ("sprite", textures["sprite"])


def test_texture_missing_file(tmp_path):
    with pytest.raises(SceneError):
        parse_texture(f"WE {tmp_path / 'absent.xpm'}", 0)


def test_texture_wrong_extension(tmp_path):
    path = tmp_path / "wall.png"
    path.write_bytes(b"")
    with pytest.raises(SceneError):
        parse_texture(f"EA {path}", 0)


@pytest.mark.parametrize("template", ["NX {}", "NO {} extra", "NO", "NO   ", "N{}"])
def test_texture_format_errors(textures, template):
    with pytest.raises(SceneError):
        parse_texture(template.format(textures["north"]), 0)


def test_parse_full_scene(textures):
    scene = parse_scene(scene_lines(textures))
    assert (scene.width, scene.height) == (640, 480)
    assert scene.north == textures["north"]
    assert scene.sprite == textures["sprite"]
    assert scene.floor == parse_color("F 10,20,30", 0)
    assert scene.ceiling == parse_color("C 40,50,60", 0)
    assert scene.grid == tuple(MAP)
    assert scene.sprite_count == 1


def test_element_order_does_not_matter(textures):
    lines = scene_lines(textures)
    header, rest = lines[:8], lines[8:]
    assert parse_scene(list(reversed(header)) + rest) == parse_scene(lines)


def test_lines_with_newlines_are_accepted(textures):
    lines = scene_lines(textures)
    assert parse_scene(line + "\n" for line in lines) == parse_scene(lines)


def test_duplicate_element(textures):
    with pytest.raises(SceneError):
        parse_scene(scene_lines(textures, extra=["F 1,1,1"]))


def test_duplicate_texture(textures):
    with pytest.raises(SceneError):
        parse_scene(scene_lines(textures, extra=[f"NO {textures['north']}"]))


def test_missing_element(textures):
    lines = [line for line in scene_lines(textures) if not line.startswith("C ")]
    with pytest.raises(SceneError, match="ceiling"):
        parse_scene(lines)


def test_missing_map(textures):
    lines = scene_lines(textures, map_rows=[])
    with pytest.raises(SceneError, match="map"):
        parse_scene(lines)


def test_unknown_line(textures):
    with pytest.raises(SceneError):
        parse_scene(scene_lines(textures, extra=["X something"]))


def test_element_after_map_is_rejected(textures):
    with pytest.raises(SceneError):
        parse_scene(scene_lines(textures) + ["C 1,2,3"])


def test_open_map(textures):
    with pytest.raises(SceneError):
        parse_scene(scene_lines(textures, map_rows=["111111", "100N01", "100001", "11101"]))


def test_map_without_player(textures):
    with pytest.raises(SceneError):
        parse_scene(scene_lines(textures, map_rows=["1111", "1001", "1111"]))


def test_read_scene_matches_parse(tmp_path, textures):
    lines = scene_lines(textures)
    path = tmp_path / "level.cub"
    path.write_text("\n".join(lines) + "\n")
    scene = read_scene(path)
    assert isinstance(scene, Scene)
    assert scene == parse_scene(lines)


def test_read_scene_missing_file(tmp_path):
    with pytest.raises(SceneError):
        read_scene(tmp_path / "absent.cub")


def test_read_empty_file(tmp_path):
    path = tmp_path / "empty.cub"
    path.write_text("")
    with pytest.raises(SceneError):
        read_scene(path)