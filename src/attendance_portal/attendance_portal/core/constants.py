"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_DAY_OF_WEEK = 1
MAX_DAY_OF_WEEK = 6

DEFAULTER_THRESHOLD = 75
EDIT_ABUSE_THRESHOLD = 3
DEFAULT_HISTORY_LIMIT = 200
DEFAULT_TREND_DAYS = 7
