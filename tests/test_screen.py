import math

import pytest

from padel.screen import (
    DEFAULT_METRICS,
    ScreenMetrics,
    clamp,
    ensure_number,
    get_round_safe_inset,
    get_round_safe_section_inset,
    get_screen_metrics,
    round_half_up,
)


# ---------------------------------------------------------
# Metrics
# ---------------------------------------------------------

def test_default_metrics():
    assert get_screen_metrics() == ScreenMetrics(390, 450, False)
    assert DEFAULT_METRICS.is_round is False


@pytest.mark.parametrize("info, is_round", [
    ({"width": 466, "height": 466}, True),
    ({"width": 480, "height": 490}, True),
    ({"width": 390, "height": 450}, False),
    ({"width": 336, "height": 384}, False),
])
def test_round_detection(info, is_round):
    assert get_screen_metrics(info).is_round is is_round


@pytest.mark.parametrize("info", [
    "invalid",
    {},
    {"width": 0, "height": 450},
    {"width": True, "height": 450},
    {"width": float("nan"), "height": 450},
    {"width": "466", "height": "466"},
])
def test_invalid_device_info_falls_back(info):
    assert get_screen_metrics(info) == DEFAULT_METRICS


# ---------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------

@pytest.mark.parametrize("value, expected", [
    (0.5, 1),
    (1.4, 1),
    (2.5, 3),
    (4.5, 5),
    (-0.5, 0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10


@pytest.mark.parametrize("value, expected", [
    (3, 3),
    (2.5, 2.5),
    (None, 7),
    ("3", 7),
    (True, 7),
    (float("nan"), 7),
])
def test_ensure_number(value, expected):
    assert ensure_number(value, 7) == expected


# ---------------------------------------------------------
# Round-screen inset
# ---------------------------------------------------------

def test_inset_at_centre_is_padding():
    assert get_round_safe_inset(466, 466, 233) == 4
    assert get_round_safe_inset(466, 466, 233, padding=10) == 10


def test_inset_at_edges_is_maximal():
    assert get_round_safe_inset(466, 466, 0) == 237
    assert get_round_safe_inset(466, 466, 466) == 237


def test_inset_outside_screen_is_clamped():
    assert get_round_safe_inset(466, 466, -50) == 237
    assert get_round_safe_inset(466, 466, 600) == 237


def test_inset_grows_away_from_centre():
    insets = [get_round_safe_inset(466, 466, y) for y in (233, 200, 150, 100, 50, 0)]

    assert insets == sorted(insets)


def test_inset_matches_chord_formula():
    expected = 233 - math.sqrt(233 ** 2 - 83 ** 2) + 4

    assert get_round_safe_inset(466, 466, 150) == pytest.approx(expected)


def test_section_inset_uses_wider_edge():
    top = get_round_safe_inset(466, 466, 100)

    assert get_round_safe_section_inset(466, 466, 100, 50) == top
    assert get_round_safe_section_inset(466, 466, 233, 0) == 4
