from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceCounts, AttendanceEntry, AttendanceRecord, LatestAttendance


class AttendanceLedger(Protocol):
    """Idempotent store keyed by (student_id, course_id, attendance_date)."""

    def upsert(
        self,
        *,
        student_id: int,
        course_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        recorded_by: int,
    ) -> None:
        """Create the record for the key, or overwrite its status and recorded_by."""

        raise NotImplementedError

    def upsert_many(
        self,
        *,
        course_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
        recorded_by: int,
    ) -> None:
        """Upsert a whole bulk submission atomically (all entries or none)."""

        raise NotImplementedError

    def get_by_scope(self, *, course_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_student(self, student_id: int) -> AttendanceCounts:
        raise NotImplementedError

    def get_latest_for_course(self, course_id: int) -> Optional[LatestAttendance]:
        raise NotImplementedError
