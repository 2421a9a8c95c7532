"""
Score values and identifiers shared by the scoring modules.
"""

LOVE = 0
FIFTEEN = 15
THIRTY = 30
FORTY = 40
ADVANTAGE = "Ad"
GAME = "Game"

SCORE_POINTS = {
    "LOVE": LOVE,
    "FIFTEEN": FIFTEEN,
    "THIRTY": THIRTY,
    "FORTY": FORTY,
    "ADVANTAGE": ADVANTAGE,
    "GAME": GAME,
}

# Ordered progression used by the point transition logic.
SCORE_POINT_SEQUENCE = (LOVE, FIFTEEN, THIRTY, FORTY, ADVANTAGE, GAME)

TEAM_A = "teamA"
TEAM_B = "teamB"
TEAM_IDS = (TEAM_A, TEAM_B)

MATCH_STATUS_ACTIVE = "active"
MATCH_STATUS_FINISHED = "finished"
MATCH_STATUSES = (MATCH_STATUS_ACTIVE, MATCH_STATUS_FINISHED)


def other_team(team: str) -> str:
    return TEAM_B if team == TEAM_A else TEAM_A


def is_score_point(value) -> bool:
    # bool is an int subclass; True == 1 must not pass as a point value
    if isinstance(value, bool):
        return False
    return value in SCORE_POINT_SEQUENCE
