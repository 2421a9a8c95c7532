"""
Schema factories for the common page structures.

Every factory returns a fresh plain-dict schema that resolve_layout()
accepts; callers may mutate the result freely.
"""

from typing import Any, Callable, Dict, Optional

from padel.design_tokens import TOKENS, to_percentage

Schema = Dict[str, Any]


def create_standard_page_layout(
    has_header: bool = True,
    has_footer: bool = True,
    header_height: Optional[Any] = None,
    footer_height: Optional[Any] = None,
) -> Schema:
    """
    header (top) / body (fill) / footer (bottom anchored).
    """
    if header_height is None:
        header_height = to_percentage(TOKENS["typography"]["pageTitle"] * 2)
    if footer_height is None:
        footer_height = to_percentage(TOKENS["typography"]["button"] * 2)

    sections: Dict[str, Dict[str, Any]] = {}

    if has_header:
        sections["header"] = {
            "top": 0,
            "height": header_height,
            "roundSafeInset": True,
        }

    body: Dict[str, Any] = {"height": "fill", "roundSafeInset": True}
    if has_header:
        body["after"] = "header"
        body["gap"] = to_percentage(TOKENS["spacing"]["headerToContent"])
    else:
        body["top"] = 0
    sections["body"] = body

    if has_footer:
        sections["footer"] = {
            "bottom": 0,
            "height": footer_height,
            # footer icons centre themselves
            "roundSafeInset": False,
        }

    return {"sections": sections, "elements": {}}


def create_page_with_footer_button(
    icon: str = "home-icon.png",
    on_click: Optional[Callable[[], Any]] = None,
    **layout_options,
) -> Schema:
    layout = create_standard_page_layout(**layout_options)

    if "footer" in layout["sections"]:
        meta: Dict[str, Any] = {"icon": icon}
        if on_click is not None:
            meta["onClick"] = on_click

        size = TOKENS["sizing"]["iconLarge"]
        layout["elements"]["footerButton"] = {
            "section": "footer",
            "x": "center",
            "y": "center",
            "width": size,
            "height": size,
            "align": "center",
            "_meta": meta,
        }

    return layout


def create_two_column_layout(parent_section: str) -> Schema:
    """
    Two half-width elements spanning the full height of parent_section.
    """
    if not isinstance(parent_section, str) or not parent_section.strip():
        raise ValueError("create_two_column_layout requires a valid parent_section name")

    return {
        "sections": {},
        "elements": {
            "leftColumn": {
                "section": parent_section,
                "x": 0,
                "y": 0,
                "width": "50%",
                "height": "100%",
                "align": "left",
            },
            "rightColumn": {
                "section": parent_section,
                "x": "50%",
                "y": 0,
                "width": "50%",
                "height": "100%",
                "align": "right",
            },
        },
    }


def create_game_screen_layout() -> Schema:
    """
    Live score screen: sets/games header, two score buttons with a divider
    and per-team minus buttons, home button in the footer.
    """
    spacing = TOKENS["spacing"]

    def text(section, x, y, width, height, color_key, label=None):
        meta = {"type": "text", "style": "body", "colorKey": color_key}
        if label is not None:
            meta["text"] = label
        return {
            "section": section,
            "x": x,
            "y": y,
            "width": width,
            "height": height,
            "align": "left",
            "_meta": meta,
        }

    return {
        "sections": {
            "header": {
                "top": to_percentage(spacing["headerTop"]),
                "height": "15%",
                "roundSafeInset": False,
            },
            "scoreArea": {
                "height": "fill",
                "after": "header",
                "gap": to_percentage(spacing["headerToContent"]),
                "roundSafeInset": False,
            },
            "footer": {
                "bottom": to_percentage(spacing["footerBottom"]),
                "height": "5%",
                "roundSafeInset": False,
            },
        },
        "elements": {
            # sets / games rows
            "setsLabel": text("header", "5%", "0%", "42%", "50%", "mutedText"),
            "setsValue": text("header", "48%", "0%", "52%", "50%", "accent"),
            "gamesLabel": text("header", "5%", "50%", "42%", "50%", "mutedText"),
            "gamesValue": text("header", "48%", "50%", "52%", "50%", "accent"),
            # score area
            "teamALabel": text("scoreArea", "0%", "0%", "50%", "10%", "mutedText", "A"),
            "teamBLabel": text("scoreArea", "50%", "0%", "50%", "10%", "mutedText", "B"),
            "teamAScore": {
                "section": "scoreArea",
                "x": "0%",
                "y": "10%",
                "width": "50%",
                "height": "50%",
                "align": "left",
                "_meta": {"type": "scoreButton", "team": "teamA"},
            },
            "teamBScore": {
                "section": "scoreArea",
                "x": "50%",
                "y": "10%",
                "width": "50%",
                "height": "50%",
                "align": "left",
                "_meta": {"type": "scoreButton", "team": "teamB"},
            },
            "divider": {
                "section": "scoreArea",
                "x": "center",
                "y": "5%",
                "width": 1,
                "height": "55%",
                "_meta": {"type": "divider", "orientation": "vertical"},
            },
            "teamAMinus": {
                "section": "scoreArea",
                "x": "5%",
                "y": "65%",
                "width": "20%",
                "height": "13%",
                "_meta": {"type": "minusButton", "team": "teamA"},
            },
            "teamBMinus": {
                "section": "scoreArea",
                "x": "75%",
                "y": "65%",
                "width": "20%",
                "height": "13%",
                "_meta": {"type": "minusButton", "team": "teamB"},
            },
            # footer
            "homeButton": {
                "section": "footer",
                "x": "center",
                "y": "center",
                "width": TOKENS["sizing"]["iconLarge"],
                "height": TOKENS["sizing"]["iconLarge"],
                "align": "center",
                "_meta": {"type": "iconButton", "icon": "home-icon.png"},
            },
        },
    }


def merge_layouts(*schemas: Schema) -> Schema:
    """
    Later schemas win on name clashes; keys other than sections/elements
    are copied through.
    """
    result: Schema = {"sections": {}, "elements": {}}

    for schema in schemas:
        if not isinstance(schema, dict):
            continue
        for key, value in schema.items():
            if key in ("sections", "elements"):
                if isinstance(value, dict):
                    result[key].update(value)
            else:
                result[key] = value

    return result
