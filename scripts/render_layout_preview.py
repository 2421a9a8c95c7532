# scripts/render_layout_preview.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from padel.layout_engine import resolve_layout
from padel.layout_presets import (
    create_game_screen_layout,
    create_page_with_footer_button,
    create_standard_page_layout,
)
from padel.screen import get_screen_metrics
from padel.timeline import build_match_timeline
from render.preview import LayoutPreviewRenderer

PRESETS = {
    "standard": create_standard_page_layout,
    "footer-button": create_page_with_footer_button,
    "game": create_game_screen_layout,
}


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--preset", choices=sorted(PRESETS), default="game")
    ap.add_argument("--width", type=int, default=466)
    ap.add_argument("--height", type=int, default=466)
    ap.add_argument("--out", type=str, default="layout_preview.png")
    ap.add_argument("--points", type=str, default="", help="Winner sequence to show, e.g. ABBA")
    ap.add_argument("--no-labels", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    metrics = get_screen_metrics({"width": args.width, "height": args.height})
    layout = resolve_layout(PRESETS[args.preset](), metrics)

    score_view = None
    if args.points:
        winners = ["teamA" if c.upper() == "A" else "teamB" for c in args.points if c.upper() in "AB"]
        timeline = build_match_timeline(winners)
        score_view = timeline[-1] if timeline else None

    renderer = LayoutPreviewRenderer(layout, metrics, score_view=score_view, show_labels=not args.no_labels)
    out_path = renderer.save(str(Path(args.out)))

    print(f"Screen: {metrics.width}x{metrics.height} round={metrics.is_round}")
    for name, rect in layout.sections.items():
        print(f"  section {name:<12} {rect.to_dict()}")
    print(f"Saved preview: {out_path}")


if __name__ == "__main__":
    main()
