import logging
from typing import Optional

from padel.history_storage import MatchHistoryStorage
from padel.match_session import MatchSession
from padel.storage import MatchStorage

logger = logging.getLogger(__name__)


def clear_all_app_data(
    match_storage: MatchStorage,
    history_storage: MatchHistoryStorage,
    session: Optional[MatchSession] = None,
) -> bool:
    """
    Clear the active match, the match history and the in-memory session.

    Every step runs even if an earlier one fails; returns False when any
    step raised.
    """
    success = True

    steps = [
        ("active match", match_storage.clear_match_state),
        ("match history", history_storage.clear),
    ]
    if session is not None:
        steps.append(("session", session.abandon))

    for name, step in steps:
        try:
            step()
        except Exception:
            logger.exception("Failed to clear %s", name)
            success = False

    logger.info("App data cleared (success=%s)", success)
    return success
