# constants.py
# Centralized constants shared by the analytics engine, fetch layer and reports. Do not change values without bumping schema_version.

SCHEMA_VERSION = "2.0.0"

# Monte-Carlo playoff simulation
DEFAULT_TRIALS = 500_000
DEFAULT_YIELD_EVERY = 5_000  # trials between cooperative yields / progress reports
DEFAULT_PLAYOFF_SPOTS = 6
TRAILING_WEEKS = 3  # window for the "last3" points model

# Sleeper league history walk
MAX_HISTORY_SEASONS = 12
MAX_FETCH_WEEK = 18

# Formatting
WIN_PCT_PLACES = 4
PCT_PLACES = 2

# Throttling defaults
DEFAULT_MIN_INTERVAL_SEC = 0.10  # ~600 rpm
