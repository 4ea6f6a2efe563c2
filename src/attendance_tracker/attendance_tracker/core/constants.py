"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_TIMEZONE = "UTC"
DEFAULT_LATE_CUTOFF = time(9, 0)
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_RECORDS_LIMIT = 500
DEFAULT_TREND_DAYS = 7
DEFAULT_RECENT_LIMIT = 7

UNKNOWN_DEPARTMENT = "Unknown"
NOT_AVAILABLE = "N/A"
