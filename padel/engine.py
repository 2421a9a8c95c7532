"""
Padel scoring state machine.

Pure transition functions over MatchState. Inputs are never mutated;
every transition returns a new state. Undo is snapshot based: add_point
pushes the pre-mutation state on the HistoryStack it is given, and
remove_point pops it back verbatim.
"""

import dataclasses
from copy import deepcopy
from typing import List, Optional, Tuple

from padel.config import (
    GAMES_TO_WIN_SET,
    MIN_WIN_MARGIN,
    TIE_BREAK_ENTRY_GAMES,
    TIE_BREAK_POINTS_TO_WIN,
)
from padel.constants import (
    ADVANTAGE,
    FORTY,
    GAME,
    LOVE,
    MATCH_STATUS_FINISHED,
    SCORE_POINT_SEQUENCE,
    TEAM_A,
    TEAM_B,
    TEAM_IDS,
    other_team,
)
from padel.exceptions import InvalidTeamError
from padel.history import HistoryStack
from padel.models import MatchState, SetResult


# =========================================================
# PUBLIC API
# =========================================================

def add_point(
    state: MatchState,
    team: str,
    history: Optional[HistoryStack] = None,
) -> MatchState:
    """
    Award one point to team and return the resulting state.

    The caller must not score a finished match; check state.status first.
    """
    _validate_team(team)

    if history is not None:
        history.push(state)

    next_state = deepcopy(state)

    if is_tie_break(next_state):
        _score_tie_break_point(next_state, team)
    else:
        _score_regular_point(next_state, team)

    return next_state


def remove_point(
    state: MatchState,
    history: Optional[HistoryStack] = None,
) -> MatchState:
    """
    Undo the most recent point by restoring the last snapshot.

    With no history (or an empty one) the input state is returned unchanged.
    """
    if history is None or history.is_empty():
        return state

    return history.pop()


def remove_point_for_team(
    state: MatchState,
    history: HistoryStack,
    team: str,
) -> Tuple[MatchState, HistoryStack]:
    """
    Remove the most recent point scored by team, keeping later points by
    the other team.

    The recorded snapshots are replayed: the scorer of every transition is
    inferred by re-applying add_point, then the match is rebuilt from the
    oldest snapshot without the removed point. Returns the rebuilt state and
    a fresh history. When a transition cannot be attributed, team never
    scored, or the rebuilt sequence would finish the match before its last
    point, the inputs are returned unchanged.
    """
    _validate_team(team)

    timeline = history.snapshots() + [deepcopy(state)]
    scorers = infer_scorers(timeline)

    if scorers is None or team not in scorers:
        return state, history

    removed_index = len(scorers) - 1 - scorers[::-1].index(team)

    rebuilt_history: HistoryStack = HistoryStack(limit=history.limit)
    rebuilt_state = timeline[0]

    for index, scorer in enumerate(scorers):
        if index == removed_index:
            continue
        if is_match_finished(rebuilt_state):
            # The shifted sequence ends the match early; keep the inputs.
            return state, history
        rebuilt_state = add_point(rebuilt_state, scorer, rebuilt_history)

    return rebuilt_state, rebuilt_history


def infer_scorers(timeline: List[MatchState]) -> Optional[List[str]]:
    """
    Return which team scored each consecutive transition of timeline,
    or None if some transition is not a single point.
    """
    scorers: List[str] = []

    for previous, current in zip(timeline, timeline[1:]):
        scorer = _scorer_for_transition(previous, current)
        if scorer is None:
            return None
        scorers.append(scorer)

    return scorers


# =========================================================
# PREDICATES
# =========================================================

def sets_to_win(best_of: int) -> int:
    return (best_of // 2) + 1


def is_game_won(scorer_points, opponent_points) -> bool:
    """
    Whether the point just won by a team at scorer_points ends the game.
    """
    if scorer_points == ADVANTAGE:
        return True
    return scorer_points == FORTY and opponent_points not in (FORTY, ADVANTAGE)


def is_set_won(games: int, opponent_games: int) -> bool:
    if games >= GAMES_TO_WIN_SET and games - opponent_games >= MIN_WIN_MARGIN:
        return True
    # 7-6 is only reachable through the tie-break.
    return games == TIE_BREAK_ENTRY_GAMES + 1 and opponent_games == TIE_BREAK_ENTRY_GAMES


def is_tie_break(state: MatchState) -> bool:
    current = state.current_set_status
    return (
        current.team_a_games == TIE_BREAK_ENTRY_GAMES
        and current.team_b_games == TIE_BREAK_ENTRY_GAMES
    )


def is_match_finished(state: MatchState) -> bool:
    return state.status == MATCH_STATUS_FINISHED


def winner_team(state: MatchState) -> Optional[str]:
    required = sets_to_win(state.best_of)

    if state.sets_won.team_a >= required:
        return TEAM_A
    if state.sets_won.team_b >= required:
        return TEAM_B
    return None


# =========================================================
# POINT LOGIC
# =========================================================

def _validate_team(team: str):
    if team not in TEAM_IDS:
        raise InvalidTeamError(f"Invalid team: {team!r}")


def _score_regular_point(state: MatchState, team: str):
    scorer = state.score_for(team)
    opponent = state.score_for(other_team(team))

    if is_game_won(scorer.points, opponent.points):
        scorer.points = GAME
        _finalize_game(state, team)
        return

    if scorer.points == FORTY and opponent.points == FORTY:
        scorer.points = ADVANTAGE
    elif scorer.points == FORTY and opponent.points == ADVANTAGE:
        # Advantage is cancelled, never passed across.
        opponent.points = FORTY
    else:
        scorer.points = SCORE_POINT_SEQUENCE[SCORE_POINT_SEQUENCE.index(scorer.points) + 1]


def _score_tie_break_point(state: MatchState, team: str):
    if team == TEAM_A:
        state.tie_break.team_a += 1
    else:
        state.tie_break.team_b += 1

    own = state.tie_break.team_a if team == TEAM_A else state.tie_break.team_b
    other = state.tie_break.team_b if team == TEAM_A else state.tie_break.team_a

    if own >= TIE_BREAK_POINTS_TO_WIN and own - other >= MIN_WIN_MARGIN:
        state.tie_break.team_a = 0
        state.tie_break.team_b = 0
        _finalize_game(state, team)


# =========================================================
# GAME / SET / MATCH LOGIC
# =========================================================

def _finalize_game(state: MatchState, team: str):
    state.team_a.points = LOVE
    state.team_b.points = LOVE

    current = state.current_set_status
    if team == TEAM_A:
        current.team_a_games += 1
    else:
        current.team_b_games += 1

    state.team_a.games = current.team_a_games
    state.team_b.games = current.team_b_games

    own = current.team_a_games if team == TEAM_A else current.team_b_games
    other = current.team_b_games if team == TEAM_A else current.team_a_games

    if is_set_won(own, other):
        _finalize_set(state, team)


def _finalize_set(state: MatchState, team: str):
    current = state.current_set_status

    state.set_history.append(
        SetResult(
            set_number=state.current_set,
            team_a_games=current.team_a_games,
            team_b_games=current.team_b_games,
        )
    )

    if team == TEAM_A:
        state.sets_won.team_a += 1
    else:
        state.sets_won.team_b += 1

    current.team_a_games = 0
    current.team_b_games = 0
    state.team_a.games = 0
    state.team_b.games = 0

    if winner_team(state) is not None:
        state.status = MATCH_STATUS_FINISHED
        return

    state.current_set += 1
    current.number = state.current_set


def _scorer_for_transition(previous: MatchState, current: MatchState) -> Optional[str]:
    # updated_at is stamped by callers after the transition, ignore it here
    target = dataclasses.replace(current, updated_at=previous.updated_at)

    for team in TEAM_IDS:
        if add_point(previous, team) == target:
            return team
    return None
