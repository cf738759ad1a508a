"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LATE_GRACE_MINUTES = 0
DEFAULT_LIST_LIMIT = 500

EARTH_RADIUS_M = 6_371_000
DEFAULT_OFFICE_LAT = 11.603722
DEFAULT_OFFICE_LNG = 76.209250
DEFAULT_OFFICE_RADIUS_M = 100

EMPLOYEE_CODE_PREFIX = "EMP"
MIN_PASSWORD_LENGTH = 6

MAX_PHOTO_BYTES = 5 * 1024 * 1024
RECENT_ATTENDANCE_ACTIVITIES = 3
RECENT_LEAVE_ACTIVITIES = 2
MAX_RECENT_ACTIVITIES = 5
