import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from padel.config import HISTORY_STORAGE_KEY, MATCH_HISTORY_SCHEMA_VERSION, MAX_HISTORY_ENTRIES
from padel.constants import MATCH_STATUS_FINISHED, TEAM_A, TEAM_B
from padel.models import MatchState, SetResult
from padel.storage import FileStorageAdapter, StorageAdapter, now_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalTime:
    year: int
    month: int
    day: int
    hour: int
    minute: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "hour": self.hour,
            "minute": self.minute,
        }

    @staticmethod
    def from_timestamp_ms(timestamp_ms: int) -> "LocalTime":
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).astimezone()
        return LocalTime(
            year=moment.year,
            month=moment.month,
            day=moment.day,
            hour=moment.hour,
            minute=moment.minute,
        )


@dataclass(frozen=True)
class MatchHistoryEntry:
    """
    Summary of one finished match. Read-only once created.
    """
    id: str
    completed_at: int
    team_a_label: str
    team_b_label: str
    sets_won_team_a: int
    sets_won_team_b: int
    set_history: List[SetResult] = field(default_factory=list)
    winner_team: Optional[str] = None
    local_time: Optional[LocalTime] = None
    schema_version: int = MATCH_HISTORY_SCHEMA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "completedAt": self.completed_at,
            "localTime": self.local_time.to_dict() if self.local_time else None,
            "teamALabel": self.team_a_label,
            "teamBLabel": self.team_b_label,
            "setsWonTeamA": self.sets_won_team_a,
            "setsWonTeamB": self.sets_won_team_b,
            "setHistory": [entry.to_dict() for entry in self.set_history],
            "winnerTeam": self.winner_team,
            "schemaVersion": self.schema_version,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MatchHistoryEntry":
        local_time = d.get("localTime")
        return MatchHistoryEntry(
            id=d["id"],
            completed_at=d["completedAt"],
            team_a_label=d["teamALabel"],
            team_b_label=d["teamBLabel"],
            sets_won_team_a=d["setsWonTeamA"],
            sets_won_team_b=d["setsWonTeamB"],
            set_history=[
                SetResult(
                    set_number=int(s.get("setNumber", 1)),
                    team_a_games=int(s.get("teamAGames", 0)),
                    team_b_games=int(s.get("teamBGames", 0)),
                )
                for s in d["setHistory"]
                if isinstance(s, dict)
            ],
            winner_team=d.get("winnerTeam") if d.get("winnerTeam") in (TEAM_A, TEAM_B) else None,
            local_time=_parse_local_time(local_time),
            schema_version=int(d.get("schemaVersion", MATCH_HISTORY_SCHEMA_VERSION)),
        )


def create_match_history_entry(
    state: Optional[MatchState],
    timestamp_ms: Optional[int] = None,
) -> Optional[MatchHistoryEntry]:
    if state is None or state.status != MATCH_STATUS_FINISHED:
        return None

    timestamp = timestamp_ms if timestamp_ms is not None else now_ms()

    sets_a = state.sets_won.team_a
    sets_b = state.sets_won.team_b

    winner = None
    if sets_a > sets_b:
        winner = TEAM_A
    elif sets_b > sets_a:
        winner = TEAM_B

    return MatchHistoryEntry(
        id=str(timestamp),
        completed_at=timestamp,
        team_a_label=state.teams[TEAM_A].label,
        team_b_label=state.teams[TEAM_B].label,
        sets_won_team_a=sets_a,
        sets_won_team_b=sets_b,
        set_history=[
            SetResult(s.set_number, s.team_a_games, s.team_b_games)
            for s in state.set_history
        ],
        winner_team=winner,
        local_time=LocalTime.from_timestamp_ms(timestamp),
    )


def _is_valid_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False

    return (
        isinstance(entry.get("id"), str)
        and isinstance(entry.get("completedAt"), (int, float))
        and isinstance(entry.get("teamALabel"), str)
        and isinstance(entry.get("teamBLabel"), str)
        and isinstance(entry.get("setsWonTeamA"), int)
        and isinstance(entry.get("setsWonTeamB"), int)
        and isinstance(entry.get("setHistory"), list)
    )


class MatchHistoryStorage:
    """
    Persisted list of finished matches, newest first.

    Capped at max_entries; the oldest entries are evicted first.
    """

    def __init__(
        self,
        adapter: Optional[StorageAdapter] = None,
        key: str = HISTORY_STORAGE_KEY,
        max_entries: int = MAX_HISTORY_ENTRIES,
    ):
        self.adapter = adapter if adapter is not None else FileStorageAdapter()
        self.key = key
        self.max_entries = max_entries

    def save_match(self, state: Optional[MatchState], timestamp_ms: Optional[int] = None) -> bool:
        entry = create_match_history_entry(state, timestamp_ms)
        if entry is None:
            return False

        entries = [entry] + self.load_all()
        del entries[self.max_entries:]

        self._write(entries)
        return True

    def load_all(self) -> List[MatchHistoryEntry]:
        raw = self.adapter.load(self.key)
        if not raw:
            return []

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Match history is corrupted, ignoring it: %s", e)
            return []

        if not isinstance(parsed, dict) or not isinstance(parsed.get("matches"), list):
            return []

        entries = []
        for item in parsed["matches"]:
            if not _is_valid_entry(item):
                logger.debug("Skipping invalid history entry: %r", item)
                continue
            try:
                entries.append(MatchHistoryEntry.from_dict(item))
            except (TypeError, ValueError) as e:
                logger.debug("Skipping unreadable history entry: %s", e)

        return entries

    def load_by_id(self, match_id: str) -> Optional[MatchHistoryEntry]:
        if not match_id or not isinstance(match_id, str):
            return None

        for entry in self.load_all():
            if entry.id == match_id:
                return entry
        return None

    def count(self) -> int:
        return len(self.load_all())

    def clear(self) -> None:
        # Leaves an explicit empty list behind, not just a missing key.
        self.adapter.clear(self.key)
        self._write([])

    def _write(self, entries: List[MatchHistoryEntry]) -> None:
        payload = {
            "matches": [entry.to_dict() for entry in entries],
            "schemaVersion": MATCH_HISTORY_SCHEMA_VERSION,
        }
        self.adapter.save(self.key, json.dumps(payload, ensure_ascii=False))


def _parse_local_time(value: Any) -> Optional[LocalTime]:
    if not isinstance(value, dict):
        return None
    try:
        return LocalTime(
            year=int(value["year"]),
            month=int(value["month"]),
            day=int(value["day"]),
            hour=int(value["hour"]),
            minute=int(value["minute"]),
        )
    except (KeyError, TypeError, ValueError):
        return None
