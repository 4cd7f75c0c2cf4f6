from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..cohorts.membership import ensure_all_members
from ..cohorts.repository import CohortDirectory
from ..common.datetime_utils import DateLike, canonical_day
from ..common.retry import retry_on_store_error
from ..common.validators import parse_status, require_id
from ..core.constants import DEFAULT_STORE_RETRY_ATTEMPTS
from ..core.exceptions import ValidationError
from ..permissions.gate import PermissionGate
from ..users.service import SessionUser
from .model import AttendanceCounts, AttendanceEntry, LatestAttendance
from .repository import AttendanceLedger

logger = logging.getLogger(__name__)


def parse_entries(raw_entries: Iterable[Any]) -> list[AttendanceEntry]:
    """Turn submitted rows ({student_id, status} mappings or entries) into entries.

    Rejects an empty batch and a student listed twice.
    """
    if not isinstance(raw_entries, (list, tuple)):
        raise ValidationError("Attendance entries must be a list")

    entries: list[AttendanceEntry] = []
    seen: set[int] = set()
    for raw in raw_entries:
        if isinstance(raw, AttendanceEntry):
            entry = raw
        elif isinstance(raw, Mapping):
            entry = AttendanceEntry(
                student_id=require_id(raw.get("student_id"), "Student"),
                status=parse_status(raw.get("status")),
            )
        else:
            raise ValidationError("Attendance data is malformed")

        if entry.student_id in seen:
            raise ValidationError(f"Student {entry.student_id} appears twice in the submission")
        seen.add(entry.student_id)
        entries.append(entry)

    if not entries:
        raise ValidationError("No attendance entries submitted")
    return entries


class AttendanceService:
    """Use case: a cohort monitor records attendance for one course meeting."""

    def __init__(
        self,
        attendance: AttendanceLedger,
        directory: CohortDirectory,
        gate: PermissionGate,
        *,
        retry_attempts: int = DEFAULT_STORE_RETRY_ATTEMPTS,
    ):
        self._attendance = attendance
        self._directory = directory
        self._gate = gate
        self._retry_attempts = int(retry_attempts)

    def record(
        self,
        actor: Optional[SessionUser],
        *,
        course_id: Any,
        attendance_date: DateLike,
        entries: Iterable[Any],
    ) -> int:
        """Authorize, validate the whole batch, then upsert it in one transaction.

        Returns the number of records written.
        """
        grant = self._gate.require_monitor(actor)
        course = self._gate.require_course(grant, require_id(course_id, "Course"))
        day = canonical_day(attendance_date)

        batch = parse_entries(entries)
        ensure_all_members(self._directory, grant.cohort_id, [e.student_id for e in batch])

        retry_on_store_error(
            lambda: self._attendance.upsert_many(
                course_id=course.course_id,
                attendance_date=day,
                entries=batch,
                recorded_by=grant.monitor_id,
            ),
            attempts=self._retry_attempts,
            what="attendance upsert",
        )
        logger.info(
            "Monitor %s recorded %d attendance entries for course %s on %s",
            grant.monitor_id,
            len(batch),
            course.course_id,
            day,
        )
        return len(batch)

    def counts_for(self, student_id: int) -> AttendanceCounts:
        return self._attendance.get_by_student(int(student_id))

    def latest_for_courses(self, course_ids: Sequence[int]) -> dict[int, LatestAttendance]:
        out: dict[int, LatestAttendance] = {}
        for course_id in course_ids:
            latest = self._attendance.get_latest_for_course(int(course_id))
            if latest is not None:
                out[int(course_id)] = latest
        return out
