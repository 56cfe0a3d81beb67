"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Maximum beacon distance (metres) accepted for a mark. Inclusive.
PROXIMITY_THRESHOLD_METERS = 3.0

DEFAULT_SESSION_DAYS = 7
DEFAULT_TOTAL_ENROLLED = 30
DEFAULT_STORAGE_TIMEOUT_SECONDS = 10

# Longest inclusive date range a single report may cover.
MAX_REPORT_DAYS = 366
