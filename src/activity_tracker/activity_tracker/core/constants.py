"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BUSINESS_DAY_CUTOFF_HOUR = 5
DEFAULT_MONITOR_HOURS = 24
DEFAULT_MONITOR_LIMIT = 100

AUTO_DAILY_MAX_DAYS = 31
AUTO_MONTHLY_MAX_DAYS = 366
