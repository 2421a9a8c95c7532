# scripts/simulate_match.py
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from padel.constants import TEAM_A, TEAM_B
from padel.exceptions import MatchFinishedError
from padel.history_storage import MatchHistoryStorage
from padel.match_session import MatchSession
from padel.storage import FileStorageAdapter, InMemoryStorageAdapter, MatchStorage
from padel.timeline import build_match_timeline


def parse_winners(sequence: str):
    winners = []
    for c in sequence.upper():
        if c == "A":
            winners.append(TEAM_A)
        elif c == "B":
            winners.append(TEAM_B)
        elif not c.isspace() and c not in ",-":
            raise SystemExit(f"ERROR: unknown team {c!r}, use A or B")
    return winners


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("sequence", type=str, help="Point winners in order, e.g. AABAB")
    ap.add_argument("--best-of", type=int, default=3, choices=[1, 3, 5])
    ap.add_argument("--data-dir", type=str, default="", help="Persist to this directory (default: in memory)")
    ap.add_argument("--undo", type=int, default=0, help="Undo this many points after the replay")
    ap.add_argument("--timeline", action="store_true", help="Print the score after every point")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    adapter = FileStorageAdapter(Path(args.data_dir)) if args.data_dir else InMemoryStorageAdapter()

    session = MatchSession(
        best_of=args.best_of,
        storage=MatchStorage(adapter),
        history_storage=MatchHistoryStorage(adapter),
    )

    winners = parse_winners(args.sequence)

    if args.timeline:
        for view in build_match_timeline(winners, best_of=args.best_of):
            print(
                f"#{view.point_index:<4} set {view.set_number} "
                f"{view.team_a.points:>4}-{view.team_b.points:<4} "
                f"games {view.team_a.games}-{view.team_b.games} "
                f"sets {view.team_a.sets}-{view.team_b.sets}"
                + (" (tie-break)" if view.is_tie_break else "")
            )

    try:
        session.replay(winners)
    except MatchFinishedError as e:
        raise SystemExit(f"ERROR: {e}")

    for _ in range(args.undo):
        session.remove_point()

    print(json.dumps(session.state.to_dict(), indent=2))


if __name__ == "__main__":
    main()
