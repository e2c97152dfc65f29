"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_HOUR = 60
SECONDS_PER_MINUTE = 60
DEFAULT_REPORT_DAYS = 7
