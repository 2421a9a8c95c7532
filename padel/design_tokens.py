"""
Design tokens for the score screens.

Typography and spacing values are ratios of a screen dimension; sizing
mixes absolute pixels (icons, touch targets) with ratios.
"""

from types import MappingProxyType

from padel.config import DEFAULT_SCREEN_WIDTH
from padel.screen import ensure_number, round_half_up

TOKENS = MappingProxyType({
    "colors": MappingProxyType({
        "background": 0x000000,
        "text": 0xFFFFFF,
        "mutedText": 0x888888,
        "accent": 0x1EB98C,
        "danger": 0xFF6D78,
        "primaryButton": 0x1EB98C,
        "secondaryButton": 0x24262B,
        "cardBackground": 0x1A1C20,
        "disabled": 0x444444,
        "divider": 0x333333,
    }),
    "typography": MappingProxyType({
        "pageTitle": 0.0825,
        "sectionTitle": 0.068,
        "body": 0.055,
        "bodyLarge": 0.08,
        "score": 0.11,
        "scoreDisplay": 0.28,
        "caption": 0.036,
        "button": 0.05,
        "buttonLarge": 0.055,
    }),
    "spacing": MappingProxyType({
        "pageTop": 0.05,
        "pageBottom": 0.06,
        "pageSide": 0.07,
        "pageSideRound": 0.12,
        "sectionGap": 0.02,
        "headerTop": 0.04,
        "headerToContent": 0.06,
        "footerBottom": 0.07,
    }),
    "sizing": MappingProxyType({
        "iconSmall": 24,
        "iconMedium": 32,
        "iconLarge": 48,
        "buttonHeight": 0.105,
        "buttonHeightLarge": 0.15,
        "buttonRadiusRatio": 0.5,
        "cardRadiusRatio": 0.07,
        "minTouchTarget": 48,
    }),
})


def get_color(path: str) -> int:
    """
    Look up a colour by dotted path, e.g. "colors.accent".
    """
    if not isinstance(path, str) or "." not in path:
        raise ValueError(f'Invalid color path: "{path}". Expected format: "colors.tokenName"')

    category, key = path.split(".", 1)

    if category != "colors":
        raise ValueError(f'Invalid color path: "{path}". Must start with "colors."')

    if key not in TOKENS["colors"]:
        available = ", ".join(TOKENS["colors"])
        raise KeyError(f'Unknown color token: "{key}". Available colors: {available}')

    return TOKENS["colors"][key]


def get_font_size(typography_key: str, screen_width: float = DEFAULT_SCREEN_WIDTH) -> int:
    if typography_key not in TOKENS["typography"]:
        available = ", ".join(TOKENS["typography"])
        raise KeyError(f'Unknown typography token: "{typography_key}". Available tokens: {available}')

    width = ensure_number(screen_width, DEFAULT_SCREEN_WIDTH)
    return round_half_up(width * TOKENS["typography"][typography_key])


def to_percentage(ratio: float) -> str:
    """0.05 -> "5%"."""
    return f"{round(ratio * 100, 4):g}%"
