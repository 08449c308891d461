"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WORK_HOURS = 8.0
DEFAULT_GRACE_PERIOD_MINUTES = 15
DEFAULT_CHECK_IN_START = "08:00"
DEFAULT_CHECK_IN_END = "10:00"
DEFAULT_CHECK_OUT_START = "17:00"
DEFAULT_CHECK_OUT_END = "19:00"
DEFAULT_OVERTIME_RATE = 1.5
DEFAULT_AUTO_CHECKOUT = True

# A day shorter than (required work hours - this) with an early checkout is a half day.
HALF_DAY_SHORTFALL_HOURS = 2

DEFAULT_HISTORY_LIMIT = 15
DEFAULT_LIST_LIMIT = 100
DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"

# Upper bounds of the attendance_settings columns.
MAX_WORK_HOURS = 24.0
MAX_GRACE_PERIOD_MINUTES = 24 * 60
MAX_OVERTIME_RATE = 99.99
