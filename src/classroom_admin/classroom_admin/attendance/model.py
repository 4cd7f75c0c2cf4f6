from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for one course meeting.

    Natural key: (student_id, course_id, attendance_date).
    """

    student_id: int
    course_id: int
    attendance_date: date
    status: AttendanceStatus
    recorded_by: int


@dataclass(frozen=True)
class AttendanceEntry:
    """One line of a monitor's bulk submission."""

    student_id: int
    status: AttendanceStatus


@dataclass(frozen=True)
class AttendanceCounts:
    """Read-model for student-facing summaries."""

    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late

    def to_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "late": self.late}


@dataclass(frozen=True)
class LatestAttendance:
    """The most recent recorded day of a course, with all records of that day."""

    course_id: int
    attendance_date: date
    records: Sequence[AttendanceRecord]
