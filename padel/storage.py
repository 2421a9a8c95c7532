import json
import logging
import re
import time
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional, Protocol

from padel.config import DATA_DIR, MATCH_STATE_STORAGE_KEY
from padel.exceptions import InvalidMatchStateError
from padel.models import MatchState

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def key_to_filename(key: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", key) + ".json"


def now_ms() -> int:
    return int(time.time() * 1000)


class StorageAdapter(Protocol):
    """
    String key/value persistence used by the storage services.
    """

    def save(self, key: str, value: str) -> None:
        ...

    def load(self, key: str) -> Optional[str]:
        ...

    def clear(self, key: str) -> None:
        ...


class FileStorageAdapter:
    """
    One UTF-8 file per key under base_dir.

    I/O failures are logged and never raised: a failed write must not
    take the scoring UI down with it.
    """

    def __init__(self, base_dir: Path = DATA_DIR):
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self.base_dir / key_to_filename(key)

    def save(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(value)
        except OSError as e:
            logger.warning("Failed to write %s: %s", path, e)

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            return None

        return data or None

    def clear(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove %s: %s", path, e)


class InMemoryStorageAdapter:
    """
    Dict-backed adapter for tests and headless runs.
    """

    def __init__(self):
        self._items: Dict[str, str] = {}

    def save(self, key: str, value: str) -> None:
        self._items[key] = value

    def load(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def clear(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self):
        return list(self._items.keys())


class MatchStorage:
    """
    Persists the active match as a JSON blob under a single key.
    """

    def __init__(self, adapter: Optional[StorageAdapter] = None, key: str = MATCH_STATE_STORAGE_KEY):
        self.adapter = adapter if adapter is not None else FileStorageAdapter()
        self.key = key

    def save_match_state(self, state: MatchState, updated_at: Optional[float] = None) -> MatchState:
        """
        Write state stamped with updated_at (now when omitted) and return
        the written copy.
        """
        stamp = updated_at if updated_at is not None else now_ms()
        stamped = replace(state, updated_at=stamp)
        self.adapter.save(self.key, json.dumps(stamped.to_dict(), ensure_ascii=False))
        return stamped

    def load_match_state(self) -> Optional[MatchState]:
        raw = self.adapter.load(self.key)

        if not raw:
            return None

        try:
            return MatchState.from_dict(json.loads(raw))
        except (json.JSONDecodeError, InvalidMatchStateError) as e:
            logger.warning("Discarding invalid saved match state: %s", e)
            return None

    def clear_match_state(self) -> None:
        self.adapter.clear(self.key)
