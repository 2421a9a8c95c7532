import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from padel.config import (
    DEFAULT_BEST_OF,
    DEFAULT_TEAM_A_LABEL,
    DEFAULT_TEAM_B_LABEL,
    SCHEMA_VERSION,
)
from padel.constants import (
    ADVANTAGE,
    GAME,
    LOVE,
    MATCH_STATUS_ACTIVE,
    MATCH_STATUSES,
    TEAM_A,
    TEAM_B,
    is_score_point,
)
from padel.exceptions import InvalidMatchStateError

ScorePoint = Union[int, str]


@dataclass
class TeamConfig:
    id: str
    label: str


@dataclass
class TeamScore:
    points: ScorePoint = LOVE
    games: int = 0


@dataclass
class CurrentSetStatus:
    number: int = 1
    team_a_games: int = 0
    team_b_games: int = 0


@dataclass
class SetsWon:
    team_a: int = 0
    team_b: int = 0


@dataclass
class SetResult:
    set_number: int
    team_a_games: int
    team_b_games: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "setNumber": self.set_number,
            "teamAGames": self.team_a_games,
            "teamBGames": self.team_b_games,
        }


@dataclass
class TieBreakScore:
    """
    Tie-break point counters, only non-zero while games are 6-6.
    """
    team_a: int = 0
    team_b: int = 0


def _default_teams() -> Dict[str, TeamConfig]:
    return {
        TEAM_A: TeamConfig(id=TEAM_A, label=DEFAULT_TEAM_A_LABEL),
        TEAM_B: TeamConfig(id=TEAM_B, label=DEFAULT_TEAM_B_LABEL),
    }


@dataclass
class MatchState:
    teams: Dict[str, TeamConfig] = field(default_factory=_default_teams)
    team_a: TeamScore = field(default_factory=TeamScore)
    team_b: TeamScore = field(default_factory=TeamScore)
    current_set_status: CurrentSetStatus = field(default_factory=CurrentSetStatus)
    current_set: int = 1
    status: str = MATCH_STATUS_ACTIVE
    sets_won: SetsWon = field(default_factory=SetsWon)
    set_history: List[SetResult] = field(default_factory=list)
    updated_at: float = 0
    best_of: int = DEFAULT_BEST_OF
    tie_break: TieBreakScore = field(default_factory=TieBreakScore)

    def score_for(self, team: str) -> TeamScore:
        return self.team_a if team == TEAM_A else self.team_b

    def to_dict(self) -> Dict[str, Any]:
        return {
            "teams": {
                team_id: {"id": config.id, "label": config.label}
                for team_id, config in self.teams.items()
            },
            "teamA": {"points": self.team_a.points, "games": self.team_a.games},
            "teamB": {"points": self.team_b.points, "games": self.team_b.games},
            "currentSetStatus": {
                "number": self.current_set_status.number,
                "teamAGames": self.current_set_status.team_a_games,
                "teamBGames": self.current_set_status.team_b_games,
            },
            "currentSet": self.current_set,
            "status": self.status,
            "setsWon": {"teamA": self.sets_won.team_a, "teamB": self.sets_won.team_b},
            "setHistory": [entry.to_dict() for entry in self.set_history],
            "updatedAt": self.updated_at,
            "bestOf": self.best_of,
            "tieBreak": {"teamA": self.tie_break.team_a, "teamB": self.tie_break.team_b},
            "schemaVersion": SCHEMA_VERSION,
        }

    @staticmethod
    def from_dict(data: Any) -> "MatchState":
        """
        Build a MatchState from its JSON dict shape.

        Raises InvalidMatchStateError when the shape does not validate.
        setsWon, setHistory, bestOf and tieBreak are optional so blobs
        written before they existed still load.
        """
        if not isinstance(data, dict):
            raise InvalidMatchStateError("match state must be an object")

        teams = _require_dict(data, "teams")
        team_configs = {
            team_id: _parse_team_config(teams.get(team_id), team_id)
            for team_id in (TEAM_A, TEAM_B)
        }

        current = _require_dict(data, "currentSetStatus")
        status = data.get("status")
        if status not in MATCH_STATUSES:
            raise InvalidMatchStateError(f"Invalid status: {status!r}")

        updated_at = data.get("updatedAt")
        if not _is_finite_number(updated_at):
            raise InvalidMatchStateError("updatedAt must be a finite number")

        sets_won = data.get("setsWon", {"teamA": 0, "teamB": 0})
        tie_break = data.get("tieBreak", {"teamA": 0, "teamB": 0})
        if not isinstance(sets_won, dict) or not isinstance(tie_break, dict):
            raise InvalidMatchStateError("setsWon and tieBreak must be objects")

        set_history = data.get("setHistory", [])
        if not isinstance(set_history, list):
            raise InvalidMatchStateError("setHistory must be a list")

        best_of = data.get("bestOf", DEFAULT_BEST_OF)
        if not _is_non_negative_int(best_of) or best_of == 0:
            raise InvalidMatchStateError("bestOf must be a positive integer")

        team_a = _parse_team_score(data.get("teamA"), "teamA")
        team_b = _parse_team_score(data.get("teamB"), "teamB")
        if team_a.points == ADVANTAGE and team_b.points == ADVANTAGE:
            raise InvalidMatchStateError("both teams cannot hold advantage")

        return MatchState(
            teams=team_configs,
            team_a=team_a,
            team_b=team_b,
            current_set_status=CurrentSetStatus(
                number=_require_count(current, "number"),
                team_a_games=_require_count(current, "teamAGames"),
                team_b_games=_require_count(current, "teamBGames"),
            ),
            current_set=_require_count(data, "currentSet"),
            status=status,
            sets_won=SetsWon(
                team_a=_require_count(sets_won, "teamA"),
                team_b=_require_count(sets_won, "teamB"),
            ),
            set_history=[_parse_set_result(entry) for entry in set_history],
            updated_at=updated_at,
            best_of=best_of,
            tie_break=TieBreakScore(
                team_a=_require_count(tie_break, "teamA"),
                team_b=_require_count(tie_break, "teamB"),
            ),
        )


def create_initial_match_state(
    updated_at: float = 0,
    best_of: int = DEFAULT_BEST_OF,
    team_a_label: str = DEFAULT_TEAM_A_LABEL,
    team_b_label: str = DEFAULT_TEAM_B_LABEL,
) -> MatchState:
    return MatchState(
        teams={
            TEAM_A: TeamConfig(id=TEAM_A, label=team_a_label),
            TEAM_B: TeamConfig(id=TEAM_B, label=team_b_label),
        },
        updated_at=updated_at,
        best_of=best_of,
    )


def is_match_state_dict(data: Any) -> bool:
    try:
        MatchState.from_dict(data)
    except InvalidMatchStateError:
        return False
    return True


# ---------------------------------------------------------
# Field validation helpers
# ---------------------------------------------------------

def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _require_dict(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise InvalidMatchStateError(f"{key} must be an object")
    return value


def _require_count(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if not _is_non_negative_int(value):
        raise InvalidMatchStateError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def _parse_team_config(value: Any, expected_id: str) -> TeamConfig:
    if not isinstance(value, dict) or value.get("id") != expected_id:
        raise InvalidMatchStateError(f"teams.{expected_id} is invalid")
    label = value.get("label")
    if not isinstance(label, str):
        raise InvalidMatchStateError(f"teams.{expected_id}.label must be a string")
    return TeamConfig(id=expected_id, label=label)


def _parse_team_score(value: Any, key: str) -> TeamScore:
    if not isinstance(value, dict):
        raise InvalidMatchStateError(f"{key} must be an object")
    points = value.get("points")
    if not is_score_point(points) or points == GAME:
        raise InvalidMatchStateError(f"{key}.points is not a score point: {points!r}")
    return TeamScore(points=points, games=_require_count(value, "games"))


def _parse_set_result(value: Any) -> SetResult:
    if not isinstance(value, dict):
        raise InvalidMatchStateError("setHistory entries must be objects")
    return SetResult(
        set_number=_require_count(value, "setNumber"),
        team_a_games=_require_count(value, "teamAGames"),
        team_b_games=_require_count(value, "teamBGames"),
    )
