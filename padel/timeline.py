from dataclasses import dataclass
from typing import List, Optional

from padel.config import DEFAULT_BEST_OF
from padel.constants import TEAM_A, TEAM_B
from padel.engine import add_point, is_match_finished, is_tie_break, winner_team
from padel.models import MatchState, create_initial_match_state


@dataclass(frozen=True)
class TeamView:
    label: str
    points: str
    games: int
    sets: int


@dataclass(frozen=True)
class ScoreView:
    """
    Presentation snapshot of a match, what the score screen shows.
    """
    team_a: TeamView
    team_b: TeamView
    set_number: int
    is_tie_break: bool
    is_finished: bool
    winner: Optional[str]
    point_index: int = 0


def build_score_view(state: MatchState, point_index: int = 0) -> ScoreView:
    tie_break = is_tie_break(state)

    if tie_break:
        points_a = str(state.tie_break.team_a)
        points_b = str(state.tie_break.team_b)
    else:
        points_a = str(state.team_a.points)
        points_b = str(state.team_b.points)

    return ScoreView(
        team_a=TeamView(
            label=state.teams[TEAM_A].label,
            points=points_a,
            games=state.current_set_status.team_a_games,
            sets=state.sets_won.team_a,
        ),
        team_b=TeamView(
            label=state.teams[TEAM_B].label,
            points=points_b,
            games=state.current_set_status.team_b_games,
            sets=state.sets_won.team_b,
        ),
        set_number=state.current_set,
        is_tie_break=tie_break,
        is_finished=is_match_finished(state),
        winner=winner_team(state),
        point_index=point_index,
    )


def build_match_timeline(winners: List[str], best_of: int = DEFAULT_BEST_OF) -> List[ScoreView]:
    """
    Replays a match from scratch using winners (team ids).
    Returns one view per point, stopping at the point that ends the match.
    Does NOT mutate external state.
    """

    state = create_initial_match_state(best_of=best_of)

    timeline: List[ScoreView] = []

    for index, team in enumerate(winners):

        state = add_point(state, team)

        timeline.append(build_score_view(state, point_index=index + 1))

        if is_match_finished(state):
            break

    return timeline
