"""
Declarative layout engine: resolves a schema of vertical sections and the
elements placed in them to absolute pixel rectangles.

Resolution runs in two passes:

1. Section pass: vertical strips sized in pixels, percentages of the
   screen height, "fill" (share of the remaining height), positioned from
   the top, after another section, from the bottom, or by a reference
   expression such as "header.bottom + 2%".
2. Element pass: rectangles positioned and sized relative to their parent
   section (or the whole screen), aligned and clamped to the screen.

A malformed schema never raises out of resolve_layout(); unrecognised
values resolve to 0 and a failing pass leaves whatever it resolved so far.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from padel.screen import (
    DEFAULT_METRICS,
    ScreenMetrics,
    clamp,
    ensure_number,
    get_round_safe_section_inset,
    round_half_up,
)

logger = logging.getLogger(__name__)

FILL = "fill"
CENTER = "center"

_PERCENT = re.compile(r"^(\d+(?:\.\d+)?)%$")
_PIXELS = re.compile(r"^(\d+(?:\.\d+)?)px$")
_REFERENCE = re.compile(r"^([A-Za-z_]\w*)\.(\w+)$")
_EXPRESSION = re.compile(r"^([A-Za-z_]\w*)\.(\w+)\s*([+-])\s*(\d+(?:\.\d+)?)(%|px)?$")


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.w

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


@dataclass
class ResolvedLayout:
    sections: Dict[str, Rect] = field(default_factory=dict)
    elements: Dict[str, Rect] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, float]]]:
        return {
            "sections": {name: rect.to_dict() for name, rect in self.sections.items()},
            "elements": {name: rect.to_dict() for name, rect in self.elements.items()},
        }


@dataclass(frozen=True)
class SectionSpec:
    top: Any = None
    bottom: Any = None
    after: Any = None
    gap: Any = None
    height: Any = None
    side_inset: Any = 0
    round_safe_inset: bool = True

    @staticmethod
    def from_raw(raw: Any) -> "SectionSpec":
        if not isinstance(raw, Mapping):
            return SectionSpec()

        side_inset = _first_present(raw, "sideInset", "side_inset")
        round_safe = _first_present(raw, "roundSafeInset", "round_safe_inset")

        return SectionSpec(
            top=raw.get("top"),
            bottom=raw.get("bottom"),
            after=raw.get("after"),
            gap=raw.get("gap"),
            height=raw.get("height"),
            side_inset=0 if side_inset is None else side_inset,
            round_safe_inset=True if round_safe is None else round_safe is not False,
        )


@dataclass(frozen=True)
class ElementSpec:
    section: Any = None
    x: Any = 0
    y: Any = 0
    width: Any = 0
    height: Any = 0
    align: str = "left"

    @staticmethod
    def from_raw(raw: Any) -> "ElementSpec":
        if not isinstance(raw, Mapping):
            return ElementSpec()

        def value(key, default):
            v = raw.get(key)
            return default if v is None else v

        return ElementSpec(
            section=raw.get("section"),
            x=value("x", 0),
            y=value("y", 0),
            width=value("width", 0),
            height=value("height", 0),
            align=value("align", "left"),
        )


def _first_present(raw: Mapping, *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


# =========================================================
# PUBLIC API
# =========================================================

def resolve_layout(schema: Any, metrics: Any = None) -> ResolvedLayout:
    """
    Resolve schema ({"sections": {...}, "elements": {...}}) against metrics.

    metrics may be a ScreenMetrics, a mapping with width/height/isRound,
    or None for the 390x450 square default.
    """
    try:
        width, height, is_round = _normalize_metrics(metrics)
        sections, elements = _normalize_schema(schema)

        layout = ResolvedLayout()

        try:
            _resolve_sections(sections, layout.sections, width, height, is_round)
        except Exception:
            logger.exception("Section resolution failed; keeping %d resolved sections", len(layout.sections))

        try:
            _resolve_elements(elements, layout.elements, layout.sections, width, height)
        except Exception:
            logger.exception("Element resolution failed")

        return layout
    except Exception:
        logger.exception("Layout resolution failed; returning an empty layout")
        return ResolvedLayout()


def safe_resolve_layout(schema: Any, metrics: Any = None) -> ResolvedLayout:
    try:
        return resolve_layout(schema, metrics)
    except Exception:
        return ResolvedLayout()


def parse_value(
    value: Any,
    base_dimension: float,
    sections: Optional[Mapping[str, Rect]] = None,
) -> Optional[float]:
    """
    Resolve one layout value to pixels.

    Grammar, in match order:
        None                      -> 0
        number                    -> pixels as-is
        "N%"                      -> round(base * clamp(N, 0, 100) / 100)
        "name.prop +/- N[%|px]"   -> reference plus/minus offset
        "name.prop"               -> reference (top, bottom, left, right)
        "fill" / "center"         -> None, resolved by the caller
        "Npx"                     -> N
        anything else             -> 0

    References need sections; without them they resolve to 0.
    """
    if value is None:
        return 0

    if isinstance(value, bool):
        return 0

    if isinstance(value, (int, float)):
        return ensure_number(value, 0)

    if not isinstance(value, str):
        return 0

    match = _PERCENT.match(value)
    if match:
        return _percent_of(base_dimension, float(match.group(1)))

    match = _EXPRESSION.match(value)
    if match and sections is not None:
        name, prop, operator, offset, unit = match.groups()
        base = _section_property(sections, name, prop)
        delta = _percent_of(base_dimension, float(offset)) if unit == "%" else _to_number(offset)
        return base + delta if operator == "+" else base - delta

    match = _REFERENCE.match(value)
    if match and sections is not None:
        return _section_property(sections, match.group(1), match.group(2))

    if value in (FILL, CENTER):
        return None

    match = _PIXELS.match(value)
    if match:
        return _to_number(match.group(1))

    return 0


# =========================================================
# NORMALIZATION
# =========================================================

def _normalize_metrics(metrics: Any) -> Tuple[float, float, bool]:
    if isinstance(metrics, ScreenMetrics):
        width, height, is_round = metrics.width, metrics.height, metrics.is_round
    elif isinstance(metrics, Mapping):
        width = metrics.get("width")
        height = metrics.get("height")
        is_round = metrics.get("isRound", metrics.get("is_round", False))
    else:
        return DEFAULT_METRICS.width, DEFAULT_METRICS.height, DEFAULT_METRICS.is_round

    return (
        ensure_number(width, DEFAULT_METRICS.width),
        ensure_number(height, DEFAULT_METRICS.height),
        bool(is_round),
    )


def _normalize_schema(schema: Any) -> Tuple[Mapping, Mapping]:
    if not isinstance(schema, Mapping):
        return {}, {}

    sections = schema.get("sections")
    elements = schema.get("elements")

    return (
        sections if isinstance(sections, Mapping) else {},
        elements if isinstance(elements, Mapping) else {},
    )


def _to_number(text: str) -> float:
    number = float(text)
    return int(number) if number.is_integer() else number


def _percent_of(base_dimension: float, percentage: float) -> int:
    return round_half_up(base_dimension * clamp(percentage, 0, 100) / 100)


def _section_property(sections: Mapping[str, Rect], name: str, prop: str) -> float:
    rect = sections.get(name)
    if rect is None:
        return 0

    if prop == "top":
        return rect.top
    if prop == "bottom":
        return rect.bottom
    if prop == "left":
        return rect.left
    if prop == "right":
        return rect.right
    return 0


def _is_reference(value: Any) -> bool:
    return isinstance(value, str) and bool(_REFERENCE.match(value) or _EXPRESSION.match(value))


# =========================================================
# SECTION PASS
# =========================================================

def _resolve_sections(
    sections: Mapping[str, Any],
    resolved: Dict[str, Rect],
    width: float,
    height: float,
    is_round: bool,
):
    """
    Stages:
    1. simple sections (top or resolved `after`) immediately
    2. sections whose top is a reference expression
    3. bottom-anchored sections, plain offsets before expressions
    4. fill sections share the remaining height
    5. sections placed after a section that was still unresolved
    """
    fill_sections: List[Tuple[str, SectionSpec]] = []
    bottom_anchored: List[Tuple[str, SectionSpec]] = []
    expression_top: List[Tuple[str, SectionSpec]] = []
    dependent: List[Tuple[str, SectionSpec]] = []

    for name, raw in sections.items():
        spec = SectionSpec.from_raw(raw)

        if spec.bottom is not None and spec.top is None and not spec.after:
            bottom_anchored.append((name, spec))
            continue

        if spec.height == FILL:
            fill_sections.append((name, spec))
            resolved[name] = Rect(0, 0, width, 0)  # placeholder until stage 4
            continue

        if _is_reference(spec.top):
            expression_top.append((name, spec))
            continue

        if spec.after and not _is_placed(resolved.get(spec.after)):
            dependent.append((name, spec))
            continue

        resolved[name] = _resolve_section(spec, resolved, width, height, is_round)

    for name, spec in expression_top:
        resolved[name] = _resolve_section(spec, resolved, width, height, is_round)

    plain_bottom = [(n, s) for n, s in bottom_anchored if not _is_reference(s.bottom)]
    reference_bottom = [(n, s) for n, s in bottom_anchored if _is_reference(s.bottom)]

    for name, spec in plain_bottom + reference_bottom:
        resolved[name] = _resolve_bottom_anchored(spec, resolved, width, height, is_round)

    if fill_sections:
        _resolve_fill_sections(fill_sections, sections, resolved, width, height, is_round)

    for name, spec in dependent:
        resolved[name] = _resolve_section(spec, resolved, width, height, is_round)


def _is_placed(rect: Optional[Rect]) -> bool:
    # fill placeholders have zero height until the fill stage
    return rect is not None and rect.h > 0


def _section_height(spec: SectionSpec, height: float) -> float:
    if spec.height is None or spec.height == FILL:
        return 0
    return parse_value(spec.height, height) or 0


def _gap(spec: SectionSpec, height: float) -> float:
    if spec.gap is None:
        return 0
    return parse_value(spec.gap, height) or 0


def _top_of(spec: SectionSpec, resolved: Mapping[str, Rect], height: float) -> float:
    if spec.top is not None:
        return parse_value(spec.top, height, resolved) or 0

    if spec.after:
        after = resolved.get(spec.after)
        if after is not None:
            return after.bottom + _gap(spec, height)

    return 0


def _side_inset(
    spec: SectionSpec,
    width: float,
    height: float,
    top: float,
    section_height: float,
    is_round: bool,
) -> float:
    # An explicit side inset wins over the round-screen inset.
    if spec.side_inset:
        return parse_value(spec.side_inset, width) or 0

    if is_round and spec.round_safe_inset:
        return get_round_safe_section_inset(width, height, top, section_height)

    return 0


def _section_rect(
    spec: SectionSpec,
    top: float,
    section_height: float,
    width: float,
    height: float,
    is_round: bool,
) -> Rect:
    inset = _side_inset(spec, width, height, top, section_height, is_round)
    return Rect(
        x=max(0, inset),
        y=max(0, top),
        w=max(0, width - inset * 2),
        h=max(0, section_height),
    )


def _resolve_section(spec: SectionSpec, resolved: Mapping[str, Rect], width, height, is_round) -> Rect:
    top = _top_of(spec, resolved, height)
    return _section_rect(spec, top, _section_height(spec, height), width, height, is_round)


def _resolve_bottom_anchored(spec: SectionSpec, resolved: Mapping[str, Rect], width, height, is_round) -> Rect:
    """
    bottom is a distance from the screen bottom ("10%", 0, "50px"), or an
    absolute reference expression ("footer.top - 2%").
    """
    if _is_reference(spec.bottom):
        bottom_y = parse_value(spec.bottom, height, resolved) or 0
    else:
        bottom_y = height - (parse_value(spec.bottom, height) or 0)

    section_height = _section_height(spec, height)
    top = max(0, bottom_y - section_height)
    return _section_rect(spec, top, section_height, width, height, is_round)


def _resolve_fill_sections(
    fill_sections: List[Tuple[str, SectionSpec]],
    all_sections: Mapping[str, Any],
    resolved: Dict[str, Rect],
    width: float,
    height: float,
    is_round: bool,
):
    """
    remaining = height - fixed heights - gaps of `after` sections (fill
    sections included). Split evenly with floor division; the last fill
    section takes the rounding remainder so the fills sum to remaining.
    """
    fixed = 0
    for raw in all_sections.values():
        spec = SectionSpec.from_raw(raw)
        if spec.height == FILL:
            continue
        fixed += _section_height(spec, height)
        if spec.after:
            fixed += _gap(spec, height)

    for _, spec in fill_sections:
        if spec.after:
            fixed += _gap(spec, height)

    count = len(fill_sections)
    remaining = max(0, height - fixed)
    each = math.floor(remaining / count)

    for index, (name, spec) in enumerate(fill_sections):
        is_last = index == count - 1
        section_height = remaining - each * index if is_last else each
        top = _top_of(spec, resolved, height)
        resolved[name] = _section_rect(spec, top, section_height, width, height, is_round)


# =========================================================
# ELEMENT PASS
# =========================================================

def _resolve_elements(
    elements: Mapping[str, Any],
    resolved: Dict[str, Rect],
    sections: Mapping[str, Rect],
    width: float,
    height: float,
):
    screen = Rect(0, 0, width, height)

    for name, raw in elements.items():
        try:
            resolved[name] = _resolve_element(ElementSpec.from_raw(raw), sections, screen)
        except Exception:
            logger.exception("Element %r could not be resolved", name)


def _resolve_element(spec: ElementSpec, sections: Mapping[str, Rect], screen: Rect) -> Rect:
    parent = screen
    if isinstance(spec.section, str) and spec.section in sections:
        parent = sections[spec.section]

    x = parse_value(spec.x, parent.w, sections) or 0
    y = parse_value(spec.y, parent.h, sections) or 0

    elem_w = parse_value(spec.width, parent.w, sections)
    if elem_w is None:
        elem_w = parent.w - x if spec.width == FILL else 0

    elem_h = parse_value(spec.height, parent.h, sections)
    if elem_h is None:
        elem_h = parent.h - y if spec.height == FILL else 0

    x = _apply_alignment(spec.align, x, elem_w, parent)

    if spec.x == CENTER:
        x = (parent.w - elem_w) / 2
    if spec.y == CENTER:
        y = (parent.h - elem_h) / 2

    return Rect(
        x=clamp(parent.x + x, 0, screen.w - elem_w),
        y=clamp(parent.y + y, 0, screen.h - elem_h),
        w=clamp(elem_w, 0, screen.w),
        h=clamp(elem_h, 0, screen.h),
    )


def _apply_alignment(align: str, x: float, elem_width: float, parent: Rect) -> float:
    if align == "center":
        return (parent.w - elem_width) / 2
    if align == "right":
        return parent.w - elem_width
    return x
