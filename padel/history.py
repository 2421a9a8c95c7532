from copy import deepcopy
from typing import Generic, List, Optional, TypeVar

from padel.config import HISTORY_STACK_LIMIT
from padel.exceptions import SnapshotError

T = TypeVar("T")


class HistoryStack(Generic[T]):
    """
    Bounded LIFO stack of deep-copied state snapshots.

    Responsibilities:
    - Store a full deep copy on every push (never a shared reference)
    - Hand out copies on pop, so callers cannot mutate stored snapshots
    - Evict the oldest snapshot once the limit is reached
    """

    def __init__(self, limit: int = HISTORY_STACK_LIMIT):
        if limit <= 0:
            raise ValueError("limit must be positive")

        self._limit = limit
        self._snapshots: List[T] = []

    def push(self, state: T) -> T:
        if state is None:
            raise SnapshotError("History stack only accepts state snapshots, got None")

        self._snapshots.append(deepcopy(state))

        if len(self._snapshots) > self._limit:
            del self._snapshots[0]

        return deepcopy(self._snapshots[-1])

    def pop(self) -> Optional[T]:
        if not self._snapshots:
            return None

        return deepcopy(self._snapshots.pop())

    def peek(self) -> Optional[T]:
        if not self._snapshots:
            return None

        return deepcopy(self._snapshots[-1])

    def clear(self):
        self._snapshots.clear()

    def size(self) -> int:
        return len(self._snapshots)

    def is_empty(self) -> bool:
        return not self._snapshots

    def snapshots(self) -> List[T]:
        """Oldest first."""
        return deepcopy(self._snapshots)

    @property
    def limit(self) -> int:
        return self._limit

    def __len__(self) -> int:
        return len(self._snapshots)
