import logging
from copy import deepcopy
from typing import Callable, List, Optional

from padel import engine
from padel.config import DEFAULT_BEST_OF, DEFAULT_TEAM_A_LABEL, DEFAULT_TEAM_B_LABEL, SUPPORTED_BEST_OF
from padel.constants import MATCH_STATUS_ACTIVE, TEAM_IDS
from padel.exceptions import InvalidTeamError, MatchFinishedError
from padel.history import HistoryStack
from padel.history_storage import MatchHistoryStorage
from padel.models import MatchState, create_initial_match_state
from padel.storage import MatchStorage, now_ms

logger = logging.getLogger(__name__)


class MatchSession:
    """
    Single local match session.

    Responsibilities:
    - Own the active MatchState and its undo HistoryStack
    - Apply scoring transitions and undo
    - Persist the active match after every change
    - Record the match in history once it finishes
    - Bulk replay a winner sequence (atomic)
    """

    def __init__(
        self,
        best_of: int = DEFAULT_BEST_OF,
        storage: Optional[MatchStorage] = None,
        history_storage: Optional[MatchHistoryStorage] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._validate_best_of(best_of)

        self._best_of = best_of
        self._storage = storage
        self._history_storage = history_storage
        self._clock = clock or now_ms
        self._state = create_initial_match_state(best_of=best_of)
        self._history: HistoryStack[MatchState] = HistoryStack()
        self._match_recorded = False

    # ---------------------------------------------------------
    # Accessors
    # ---------------------------------------------------------

    @property
    def state(self) -> MatchState:
        return deepcopy(self._state)

    @property
    def history_size(self) -> int:
        return self._history.size()

    @property
    def can_undo(self) -> bool:
        return not self._history.is_empty()

    @property
    def is_finished(self) -> bool:
        return engine.is_match_finished(self._state)

    # ---------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------

    def start_new_match(
        self,
        team_a_label: str = DEFAULT_TEAM_A_LABEL,
        team_b_label: str = DEFAULT_TEAM_B_LABEL,
        best_of: Optional[int] = None,
    ) -> MatchState:
        if best_of is not None:
            self._validate_best_of(best_of)
            self._best_of = best_of

        self._match_recorded = False
        self._history.clear()
        self._state = create_initial_match_state(
            updated_at=self._clock(),
            best_of=self._best_of,
            team_a_label=team_a_label,
            team_b_label=team_b_label,
        )
        self._persist()

        logger.info("Started new match (best of %d)", self._best_of)
        return self.state

    def resume(self) -> MatchState:
        """
        Continue the persisted active match, or start a new one when there
        is nothing valid to resume. Undo history does not survive a resume.
        """
        self._history.clear()

        saved = self._storage.load_match_state() if self._storage else None

        if saved is None or saved.status != MATCH_STATUS_ACTIVE:
            return self.start_new_match()

        self._match_recorded = False
        self._state = saved
        self._best_of = saved.best_of
        logger.info("Resumed match in set %d", saved.current_set)
        return self.state

    def abandon(self):
        self._history.clear()
        self._match_recorded = False
        self._state = create_initial_match_state(best_of=self._best_of)

        if self._storage:
            self._storage.clear_match_state()

    # ---------------------------------------------------------
    # Scoring
    # ---------------------------------------------------------

    def add_point(self, team: str) -> MatchState:
        if team not in TEAM_IDS:
            raise InvalidTeamError(f"Invalid team: {team!r}")

        if engine.is_match_finished(self._state):
            raise MatchFinishedError("Cannot add a point to a finished match")

        self._state = engine.add_point(self._state, team, self._history)
        self._state.updated_at = self._clock()

        if self.is_finished:
            self._on_match_finished()
        else:
            self._persist()

        return self.state

    def remove_point(self) -> MatchState:
        if not self.can_undo:
            return self.state

        self._state = engine.remove_point(self._state, self._history)
        self._persist()
        return self.state

    def remove_point_for_team(self, team: str) -> MatchState:
        state, history = engine.remove_point_for_team(self._state, self._history, team)

        if history is self._history:
            return self.state

        state.updated_at = self._clock()
        self._state = state
        self._history = history

        # The shifted sequence can finish the match on its last point.
        if self.is_finished:
            self._on_match_finished()
        else:
            self._persist()

        return self.state

    # ---------------------------------------------------------
    # Bulk replay
    # ---------------------------------------------------------

    def replay(self, winners: List[str]) -> MatchState:
        """
        Replace the current match with one rebuilt from winners.
        Atomic: if any entry fails -> no state mutation.
        """
        if not isinstance(winners, list):
            raise ValueError("winners must be a list")

        temp_state = create_initial_match_state(
            best_of=self._best_of,
            team_a_label=self._state.teams["teamA"].label,
            team_b_label=self._state.teams["teamB"].label,
        )
        temp_history: HistoryStack[MatchState] = HistoryStack()

        for index, team in enumerate(winners):
            if engine.is_match_finished(temp_state):
                raise MatchFinishedError(f"Point added after match finished at index {index}")
            temp_state = engine.add_point(temp_state, team, temp_history)

        # If everything succeeds -> commit
        temp_state.updated_at = self._clock()
        self._state = temp_state
        self._history = temp_history
        self._match_recorded = False

        if self.is_finished:
            self._on_match_finished()
        else:
            self._persist()

        return self.state

    def export_points(self) -> List[str]:
        """
        Team sequence that produced the current state, oldest first.
        """
        timeline = self._history.snapshots() + [self.state]
        return engine.infer_scorers(timeline) or []

    # ---------------------------------------------------------
    # Persistence
    # ---------------------------------------------------------

    def _persist(self):
        if self._storage is None:
            return

        if self._state.status == MATCH_STATUS_ACTIVE:
            self._storage.save_match_state(self._state, updated_at=self._state.updated_at)
        else:
            self._storage.clear_match_state()

    def _on_match_finished(self):
        winner = engine.winner_team(self._state)
        logger.info(
            "Match finished: %s wins %d-%d",
            winner,
            self._state.sets_won.team_a,
            self._state.sets_won.team_b,
        )

        # One history entry per match, even if undo reopens and refinishes it.
        if self._history_storage is not None and not self._match_recorded:
            self._match_recorded = self._history_storage.save_match(
                self._state, timestamp_ms=self._clock()
            )

        self._persist()

    @staticmethod
    def _validate_best_of(best_of: int):
        if best_of not in SUPPORTED_BEST_OF:
            raise ValueError(f"best_of must be one of {SUPPORTED_BEST_OF}, got {best_of}")
