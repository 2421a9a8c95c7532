import pytest

from padel.layout_engine import Rect, ResolvedLayout, parse_value, resolve_layout, safe_resolve_layout
from padel.screen import ScreenMetrics, get_round_safe_section_inset


SQUARE = {"width": 400, "height": 500, "isRound": False}
ROUND = ScreenMetrics(466, 466, True)


def three_part_schema():
    return {
        "sections": {
            "header": {"top": 0, "height": "20%"},
            "body": {"height": "fill", "after": "header"},
            "footer": {"bottom": 0, "height": "10%"},
        }
    }


def sections_only(sections, metrics=SQUARE):
    return resolve_layout({"sections": sections}, metrics).sections


def element(spec, sections=None, metrics=SQUARE):
    schema = {"sections": sections or {}, "elements": {"e": spec}}
    return resolve_layout(schema, metrics).elements["e"]


# ---------------------------------------------------------
# Value grammar
# ---------------------------------------------------------

HEADER = {"header": Rect(10, 0, 100, 20)}


@pytest.mark.parametrize("value, base, sections, expected", [
    (None, 100, None, 0),
    (25, 100, None, 25),
    (12.5, 100, None, 12.5),
    ("50%", 200, None, 100),
    ("150%", 200, None, 200),
    ("0%", 200, None, 0),
    ("1%", 450, None, 5),
    ("12.5%", 100, None, 13),
    ("10px", 100, None, 10),
    ("2.5px", 100, None, 2.5),
    ("banana", 100, None, 0),
    ("-5%", 100, None, 0),
    (True, 100, None, 0),
    (float("nan"), 100, None, 0),
    ([1], 100, None, 0),
    ("header.bottom", 100, HEADER, 20),
    ("header.right", 100, HEADER, 110),
    ("header.left", 100, HEADER, 10),
    ("header.top", 100, HEADER, 0),
    ("header.bottom + 10px", 100, HEADER, 30),
    ("header.bottom+4", 100, HEADER, 24),
    ("header.right - 5%", 200, HEADER, 100),
    ("header.middle", 100, HEADER, 0),
    ("missing.top", 100, HEADER, 0),
    ("header.bottom", 100, None, 0),
    ("2.5px", 100, HEADER, 2.5),
    ("30%", 200, HEADER, 60),
])
def test_parse_value(value, base, sections, expected):
    assert parse_value(value, base, sections) == expected


@pytest.mark.parametrize("keyword", ["fill", "center"])
def test_parse_value_keywords_return_none(keyword):
    assert parse_value(keyword, 100) is None


# ---------------------------------------------------------
# Section pass
# ---------------------------------------------------------

def test_header_body_footer_on_default_screen():
    layout = resolve_layout(three_part_schema(), ScreenMetrics(390, 450))

    header = layout.sections["header"]
    body = layout.sections["body"]
    footer = layout.sections["footer"]

    assert (header.y, header.h) == (0, 90)
    assert (body.y, body.h) == (90, 315)
    assert (footer.y, footer.h) == (405, 45)
    assert header.w == body.w == footer.w == 390


@pytest.mark.parametrize("metrics", [None, "invalid", {"width": "wide"}, 42])
def test_missing_metrics_fall_back_to_default_screen(metrics):
    layout = resolve_layout(three_part_schema(), metrics)

    assert layout.sections["body"].h == 315
    assert layout.sections["footer"].y == 405


def test_fill_respects_gap():
    sections = sections_only({
        "header": {"top": 0, "height": "10%"},
        "body": {"height": "fill", "after": "header", "gap": "2%"},
        "footer": {"bottom": 0, "height": 50},
    })

    assert sections["body"].y == 60
    assert sections["body"].h == 390
    assert sections["body"].bottom == sections["footer"].top


@pytest.mark.parametrize("height", [0, 1, 7, 100, 451, 500])
@pytest.mark.parametrize("count", [1, 2, 3, 7])
def test_fill_distribution_is_exact(height, count):
    schema = {f"fill{n}": {"height": "fill"} for n in range(count)}

    sections = sections_only(schema, {"width": 100, "height": height})

    heights = [sections[f"fill{n}"].h for n in range(count)]
    assert sum(heights) == height
    assert max(heights) - min(heights) < count


def test_last_fill_section_takes_remainder():
    sections = sections_only({
        "a": {"height": "fill"},
        "b": {"height": "fill"},
        "c": {"height": "fill"},
    }, {"width": 100, "height": 100})

    assert [sections[n].h for n in "abc"] == [33, 33, 34]


def test_stacked_fill_sections():
    sections = sections_only({
        "header": {"top": 0, "height": 100},
        "upper": {"height": "fill", "after": "header"},
        "lower": {"height": "fill", "after": "upper"},
    })

    assert sections["upper"].y == 100
    assert sections["upper"].h == 200
    assert sections["lower"].y == 300
    assert sections["lower"].h == 200


def test_fill_without_space_is_zero_height():
    sections = sections_only({
        "big": {"top": 0, "height": 600},
        "body": {"height": "fill", "after": "big"},
    })

    assert sections["body"].h == 0


def test_section_after_fill_is_resolved_last():
    sections = sections_only({
        "header": {"top": 0, "height": 100},
        "body": {"height": "fill", "after": "header"},
        "footer": {"after": "body", "height": 50},
    })

    assert sections["body"].h == 350
    assert sections["footer"].y == 450


def test_after_chain_with_gap():
    sections = sections_only({
        "first": {"top": 10, "height": 40},
        "second": {"after": "first", "gap": "2%", "height": 30},
    })

    assert sections["second"].y == 60


def test_expression_top():
    sections = sections_only({
        "header": {"top": 0, "height": 50},
        "badge": {"top": "header.bottom + 2%", "height": 20},
        "chip": {"top": "header.bottom - 10", "height": 5},
        "flush": {"top": "header.bottom", "height": 5},
    })

    assert sections["badge"].y == 60
    assert sections["chip"].y == 40
    assert sections["flush"].y == 50


def test_bottom_anchored_sections():
    sections = sections_only({
        "footer": {"bottom": 0, "height": 50},
        "toolbar": {"bottom": "50px", "height": 30},
        "hint": {"bottom": "footer.top - 10px", "height": 40},
        "margin": {"bottom": "10%", "height": 20},
    })

    assert sections["footer"].y == 450
    assert sections["toolbar"].y == 420
    assert sections["hint"].y == 400
    assert sections["margin"].y == 430


def test_bottom_anchor_taller_than_screen_starts_at_zero():
    sections = sections_only({"tall": {"bottom": 0, "height": 900}})

    assert sections["tall"].y == 0


def test_resolved_rects_are_not_negative():
    sections = sections_only({
        "header": {"top": 0, "height": 20},
        "above": {"top": "header.top - 50px", "height": -10},
    })

    assert sections["above"].y == 0
    assert sections["above"].h == 0


def test_cyclic_after_references_degrade_without_error():
    sections = sections_only({
        "a": {"after": "b", "height": 10},
        "b": {"after": "a", "height": 10},
    })

    assert sections["a"].y == 0
    assert sections["b"].y == 10


def test_cyclic_expressions_degrade_without_error():
    sections = sections_only({
        "a": {"top": "b.bottom", "height": 10},
        "b": {"top": "a.bottom", "height": 10},
    })

    assert sections["a"].y == 0
    assert sections["b"].y == 10


# ---------------------------------------------------------
# Round screens
# ---------------------------------------------------------

def test_round_screen_applies_section_inset():
    sections = sections_only({"middle": {"top": 200, "height": 66}}, ROUND)

    inset = get_round_safe_section_inset(466, 466, 200, 66)
    middle = sections["middle"]

    assert middle.x == pytest.approx(inset)
    assert middle.w == pytest.approx(466 - 2 * inset)
    assert 4 < inset < 7


def test_zero_height_section_at_centre_gets_padding_inset():
    sections = sections_only({"line": {"top": 233, "height": 0}}, ROUND)

    assert sections["line"].x == 4
    assert sections["line"].w == 458


def test_round_inset_can_be_disabled():
    sections = sections_only({"strip": {"top": 200, "height": 66, "roundSafeInset": False}}, ROUND)

    assert sections["strip"].x == 0
    assert sections["strip"].w == 466


def test_section_touching_bezel_collapses_to_zero_width():
    sections = sections_only({"top": {"top": 0, "height": 40}}, ROUND)

    assert sections["top"].w == 0


@pytest.mark.parametrize("side_inset, expected_x", [(12, 12), ("10%", 47), ("8px", 8)])
def test_explicit_side_inset_wins(side_inset, expected_x):
    sections = sections_only({"s": {"top": 0, "height": 40, "sideInset": side_inset}}, ROUND)

    assert sections["s"].x == expected_x
    assert sections["s"].w == 466 - 2 * expected_x


def test_square_screen_has_no_inset():
    sections = sections_only({"s": {"top": 0, "height": 40}})

    assert sections["s"].x == 0
    assert sections["s"].w == 400


# ---------------------------------------------------------
# Element pass
# ---------------------------------------------------------

HEADER_SECTION = {"header": {"top": 100, "height": 100}}


def test_element_relative_to_section():
    rect = element({"section": "header", "x": 10, "y": 5, "width": 50, "height": 20}, HEADER_SECTION)

    assert rect == Rect(10, 105, 50, 20)


def test_element_percentages_use_parent_dimensions():
    rect = element({"section": "header", "x": "10%", "y": "50%", "width": "50%", "height": "25%"}, HEADER_SECTION)

    assert rect == Rect(40, 150, 200, 25)


def test_element_without_section_uses_screen():
    rect = element({"section": "nope", "x": 10, "y": 10, "width": 20, "height": 20})

    assert rect == Rect(10, 10, 20, 20)


@pytest.mark.parametrize("align, expected_x", [("left", 10), ("center", 150), ("right", 300)])
def test_element_alignment(align, expected_x):
    rect = element({"section": "header", "x": 10, "width": 100, "height": 10, "align": align}, HEADER_SECTION)

    assert rect.x == expected_x


def test_element_centre_keywords():
    rect = element({"section": "header", "x": "center", "y": "center", "width": 40, "height": 20}, HEADER_SECTION)

    assert rect == Rect(180, 140, 40, 20)


def test_element_fill_size():
    rect = element({"section": "header", "x": 10, "y": 30, "width": "fill", "height": "fill"}, HEADER_SECTION)

    assert rect == Rect(10, 130, 390, 70)


def test_element_is_clamped_to_screen():
    assert element({"x": 390, "y": 0, "width": 50, "height": 10}).x == 350
    assert element({"x": -20, "y": -5, "width": 50, "height": 10}).x == 0
    assert element({"x": 0, "y": 495, "width": 10, "height": 20}).y == 480


def test_negative_element_size_is_zero():
    rect = element({"width": -100, "height": -1})

    assert rect.w == 0
    assert rect.h == 0


def test_element_defaults():
    assert element({}) == Rect(0, 0, 0, 0)


def test_elements_reference_resolved_sections():
    rect = element(
        {"y": "header.bottom + 10px", "width": 10, "height": 10},
        HEADER_SECTION,
    )

    assert rect.y == 210


# ---------------------------------------------------------
# Failure handling
# ---------------------------------------------------------

@pytest.mark.parametrize("schema", [
    None,
    "bad",
    [],
    {},
    {"sections": "bad"},
    {"sections": {"a": None, "b": 5}},
    {"elements": {"e": "x", "f": None}},
    {"sections": {"a": {"top": {"nested": 1}, "height": [1]}}},
])
def test_malformed_schema_never_raises(schema):
    layout = resolve_layout(schema, SQUARE)

    assert isinstance(layout, ResolvedLayout)


def test_failing_section_pass_keeps_elements():
    schema = {
        "sections": {
            "ok": {"top": 0, "height": 10},
            "broken": {"after": ["unhashable"]},
        },
        "elements": {"e": {"width": 10, "height": 10}},
    }

    layout = resolve_layout(schema, SQUARE)

    assert layout.sections["ok"] == Rect(0, 0, 400, 10)
    assert "broken" not in layout.sections
    assert layout.elements["e"] == Rect(0, 0, 10, 10)


def test_safe_resolve_layout():
    assert safe_resolve_layout(three_part_schema()).sections["header"].h == 90
    assert safe_resolve_layout(None).to_dict() == {"sections": {}, "elements": {}}


def test_layout_to_dict():
    data = resolve_layout(three_part_schema(), ScreenMetrics(390, 450)).to_dict()

    assert data["sections"]["footer"] == {"x": 0, "y": 405, "w": 390, "h": 45}
    assert data["elements"] == {}


def test_rect_edges():
    rect = Rect(10, 20, 30, 40)

    assert (rect.top, rect.bottom, rect.left, rect.right) == (20, 60, 10, 40)
