from padel.app_data import clear_all_app_data
from padel.constants import TEAM_A
from padel.history_storage import MatchHistoryStorage
from padel.match_session import MatchSession
from padel.models import create_initial_match_state
from padel.storage import InMemoryStorageAdapter, MatchStorage


class BrokenHistoryStorage(MatchHistoryStorage):

    def clear(self):
        raise OSError("disk full")


def test_clear_all_app_data():
    adapter = InMemoryStorageAdapter()
    match_storage = MatchStorage(adapter)
    history_storage = MatchHistoryStorage(adapter)
    session = MatchSession(storage=match_storage, history_storage=history_storage)
    session.add_point(TEAM_A)

    finished = create_initial_match_state()
    finished.status = "finished"
    history_storage.save_match(finished, timestamp_ms=1)

    assert clear_all_app_data(match_storage, history_storage, session) is True

    assert match_storage.load_match_state() is None
    assert history_storage.count() == 0
    assert session.state.team_a.points == 0


def test_failing_step_does_not_stop_the_others(caplog):
    adapter = InMemoryStorageAdapter()
    match_storage = MatchStorage(adapter)
    match_storage.save_match_state(create_initial_match_state())

    result = clear_all_app_data(match_storage, BrokenHistoryStorage(adapter))

    assert result is False
    assert match_storage.load_match_state() is None
    assert "Failed to clear match history" in caplog.text
