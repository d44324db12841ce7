import pytest

from cubecaster.xpm_colors import NONE_COLOR, color_by_name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("snow", 0xfffafa),
        ("white", 0xffffff),
        ("black", 0x0),
        ("red", 0xff0000),
        ("navy", 0x80),
        ("steelblue3", 0x4f94cd),
        ("lightgreen", 0x90ee90),
    ],
)
def test_known_names(name, expected):
    assert color_by_name(name) == expected


def test_lookup_ignores_case():
    assert color_by_name("SNOW") == color_by_name("snow")
    assert color_by_name("Ghost White") == color_by_name("ghost white")


def test_first_entry_wins_for_repeated_names():
    assert color_by_name("dark slate") == 0x2f4f4f
    assert color_by_name("light slate") == 0x778899
    assert color_by_name("light goldenrod") == 0xfafad2


def test_none_is_transparent():
    assert color_by_name("none") == NONE_COLOR
    assert color_by_name("None") == -1


def test_unknown_name_gives_none():
    assert color_by_name("not a colour") is None
    assert color_by_name("") is None


def test_gray_and_grey_spellings_agree():
    for number in range(101):
        assert color_by_name(f"gray{number}") == color_by_name(f"grey{number}")


def test_gray_scale_ends_and_is_neutral():
    assert color_by_name("gray0") == color_by_name("black")
    assert color_by_name("gray100") == color_by_name("white")
    for number in range(101):
        value = color_by_name(f"gray{number}")
        red, green, blue = value >> 16, (value >> 8) & 0xFF, value & 0xFF
        assert red == green == blue


def test_gray_scale_is_increasing():
    values = [color_by_name(f"gray{number}") for number in range(101)]
    assert values == sorted(values)
    assert len(set(values)) == 101


def test_first_numbered_shade_matches_base_where_table_says_so():
    assert color_by_name("snow1") == color_by_name("snow")
    assert color_by_name("red1") == color_by_name("red")
    assert color_by_name("blue1") == color_by_name("blue")


def test_numbered_shades_get_darker():
    for family in ("snow", "red", "azure", "thistle", "gold"):
        shades = [color_by_name(f"{family}{n}") for n in range(1, 5)]
        assert shades == sorted(shades, reverse=True)


def test_every_colour_fits_in_24_bits():
    names = ["gray50", "thistle4", "mediumspringgreen", "dark red", "peru"]
    for name in names:
        value = color_by_name(name)
        assert 0 <= value <= 0xFFFFFF