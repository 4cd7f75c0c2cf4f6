from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "ADMIN"
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"


class CalendarView(str, Enum):
    """Rendering granularity for the course calendar."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class GateState(str, Enum):
    """States of a ledger write request as it passes the permission gate."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED = "AUTHENTICATED"
    AUTHORIZED_MONITOR = "AUTHORIZED_MONITOR"
    REJECTED = "REJECTED"
