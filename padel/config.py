from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"

SCHEMA_VERSION = 1
MATCH_HISTORY_SCHEMA_VERSION = 1

DEFAULT_BEST_OF = 3
SUPPORTED_BEST_OF = (1, 3, 5)

GAMES_TO_WIN_SET = 6
TIE_BREAK_ENTRY_GAMES = 6
TIE_BREAK_POINTS_TO_WIN = 7
MIN_WIN_MARGIN = 2

# Undo depth per match; the oldest snapshot is evicted past this.
HISTORY_STACK_LIMIT = 500
MAX_HISTORY_ENTRIES = 50

MATCH_STATE_STORAGE_KEY = "padel-buddy.match-state"
HISTORY_STORAGE_KEY = "padel-buddy.match-history"

DEFAULT_TEAM_A_LABEL = "Team A"
DEFAULT_TEAM_B_LABEL = "Team B"

DEFAULT_SCREEN_WIDTH = 390
DEFAULT_SCREEN_HEIGHT = 450
ROUND_SCREEN_TOLERANCE = 0.04
ROUND_SAFE_PADDING = 4
