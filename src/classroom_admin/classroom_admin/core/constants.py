"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus

DEFAULT_ATTENDANCE_STATUS = AttendanceStatus.PRESENT
DEFAULT_DUTY_WEEK_DAYS = 7
DEFAULT_STORE_RETRY_ATTEMPTS = 2
FACULTY_ATTENDANCE_PREVIEW = 8

COURSE_COLORS = (
    "#3b82f6",
    "#22c55e",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
)
