"""
Screen metrics and round-screen geometry.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from padel.config import (
    DEFAULT_SCREEN_HEIGHT,
    DEFAULT_SCREEN_WIDTH,
    ROUND_SAFE_PADDING,
    ROUND_SCREEN_TOLERANCE,
)


@dataclass(frozen=True)
class ScreenMetrics:
    width: int
    height: int
    is_round: bool = False


DEFAULT_METRICS = ScreenMetrics(
    width=DEFAULT_SCREEN_WIDTH,
    height=DEFAULT_SCREEN_HEIGHT,
    is_round=False,
)


def get_screen_metrics(device_info: Optional[Mapping[str, Any]] = None) -> ScreenMetrics:
    """
    Build metrics from a device info mapping ({"width": .., "height": ..}).

    A screen is treated as round when width and height differ by at most
    4% of the width. Falls back to the 390x450 square default.
    """
    if not isinstance(device_info, Mapping):
        return DEFAULT_METRICS

    width = device_info.get("width")
    height = device_info.get("height")

    if not _is_number(width) or not _is_number(height) or width <= 0 or height <= 0:
        return DEFAULT_METRICS

    is_round = abs(width - height) <= round_half_up(width * ROUND_SCREEN_TOLERANCE)
    return ScreenMetrics(width=int(width), height=int(height), is_round=is_round)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def ensure_number(value: Any, fallback: float = 0) -> float:
    return value if _is_number(value) else fallback


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; layout math rounds .5 up.
    return int(math.floor(value + 0.5))


def get_round_safe_inset(width: float, height: float, y: float, padding: float = ROUND_SAFE_PADDING) -> float:
    """
    Horizontal inset that keeps content at row y inside the visible chord
    of a circular display.
    """
    radius = width / 2
    from_center = y - height / 2
    half_chord = math.sqrt(max(0.0, radius * radius - from_center * from_center))
    return max(0.0, radius - half_chord + padding)


def get_round_safe_section_inset(
    width: float,
    height: float,
    section_top: float,
    section_height: float,
    padding: float = ROUND_SAFE_PADDING,
) -> float:
    top_inset = get_round_safe_inset(width, height, section_top, padding)
    bottom_inset = get_round_safe_inset(width, height, section_top + section_height, padding)
    return max(top_inset, bottom_inset)
