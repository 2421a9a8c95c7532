from padel.match_session import MatchSession
from padel.storage import InMemoryStorageAdapter, MatchStorage
from padel.history_storage import MatchHistoryStorage
from padel.timeline import build_score_view

adapter = InMemoryStorageAdapter()
session = MatchSession(
    best_of=3,
    storage=MatchStorage(adapter),
    history_storage=MatchHistoryStorage(adapter),
)
session.start_new_match("Blue", "Red")


def show(label):
    view = build_score_view(session.state)
    print(
        f"{label:<28} "
        f"{view.team_a.label} {view.team_a.points:>4} ({view.team_a.games}/{view.team_a.sets})  "
        f"{view.team_b.label} {view.team_b.points:>4} ({view.team_b.games}/{view.team_b.sets})"
    )


# Deuce, advantage, back to deuce
for _ in range(3):
    session.add_point("teamA")
    session.add_point("teamB")
show("Deuce")

session.add_point("teamA")
show("Advantage Blue")

session.add_point("teamB")
show("Back to deuce")

session.remove_point()
show("Undo")

session.add_point("teamA")
show("Game Blue")

# Set 1: Blue 6-0
for _ in range(5 * 4):
    session.add_point("teamA")
show("Set 1 to Blue")

# Set 2: Red takes it to a tie-break
for _ in range(5):
    for _ in range(4):
        session.add_point("teamA")
    for _ in range(4):
        session.add_point("teamB")
for _ in range(4):
    session.add_point("teamB")
for _ in range(4):
    session.add_point("teamA")
show("Tie-break")

for _ in range(7):
    session.add_point("teamA")
show("Match")

print("\nFinished:", session.is_finished)
history = MatchHistoryStorage(adapter)
print("History entries:", history.count())
for entry in history.load_all():
    print(entry.to_dict())
