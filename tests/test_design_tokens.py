import pytest

from padel.design_tokens import TOKENS, get_color, get_font_size, to_percentage


def test_get_color():
    assert get_color("colors.accent") == 0x1EB98C
    assert get_color("colors.background") == 0x000000


@pytest.mark.parametrize("path", ["accent", "", None, "spacing.pageTop"])
def test_get_color_invalid_path(path):
    with pytest.raises(ValueError):
        get_color(path)


def test_get_color_unknown_token():
    with pytest.raises(KeyError):
        get_color("colors.nope")


def test_get_font_size_scales_with_width():
    assert get_font_size("body", 400) == 22
    assert get_font_size("score", 466) == 51
    assert get_font_size("body") == get_font_size("body", 390)


def test_get_font_size_unknown_key():
    with pytest.raises(KeyError):
        get_font_size("giant")


@pytest.mark.parametrize("ratio, expected", [
    (0.05, "5%"),
    (0.06, "6%"),
    (0.165, "16.5%"),
    (0.1, "10%"),
    (1, "100%"),
])
def test_to_percentage(ratio, expected):
    assert to_percentage(ratio) == expected


def test_tokens_are_read_only():
    with pytest.raises(TypeError):
        TOKENS["colors"]["accent"] = 0
