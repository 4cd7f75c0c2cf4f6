"""Default values for the monitor's bulk-edit forms.

Read-side merge only: existing ledger state wins, every other cohort member
gets the baseline (PRESENT for attendance, not selected for duty).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ..attendance.repository import AttendanceLedger
from ..cohorts.repository import CohortDirectory
from ..common.datetime_utils import DateLike, canonical_day
from ..common.keys import attendance_scope_key
from ..core.constants import DEFAULT_ATTENDANCE_STATUS
from ..core.enums import AttendanceStatus
from ..duty.repository import DutyLedger


@dataclass(frozen=True)
class AttendanceRosterRow:
    student_id: int
    full_name: str
    status: AttendanceStatus
    recorded: bool


@dataclass(frozen=True)
class AttendanceRoster:
    scope_key: str
    course_id: int
    attendance_date: date
    rows: Sequence[AttendanceRosterRow]
    has_existing: bool

    def to_dict(self) -> dict:
        return {
            "scope": self.scope_key,
            "course_id": self.course_id,
            "date": self.attendance_date.isoformat(),
            "has_existing": self.has_existing,
            "entries": [
                {"student_id": r.student_id, "name": r.full_name, "status": r.status.value, "recorded": r.recorded}
                for r in self.rows
            ],
        }


@dataclass(frozen=True)
class DutyRosterRow:
    student_id: int
    full_name: str
    selected: bool


@dataclass(frozen=True)
class DutyRoster:
    cohort_id: int
    duty_date: date
    rows: Sequence[DutyRosterRow]
    has_existing: bool

    def to_dict(self) -> dict:
        return {
            "cohort_id": self.cohort_id,
            "date": self.duty_date.isoformat(),
            "has_existing": self.has_existing,
            "members": [{"student_id": r.student_id, "name": r.full_name, "selected": r.selected} for r in self.rows],
        }


class PrefillResolver:
    def __init__(self, attendance: AttendanceLedger, duty: DutyLedger, directory: CohortDirectory):
        self._attendance = attendance
        self._duty = duty
        self._directory = directory

    def attendance_defaults(self, *, cohort_id: int, course_id: int, attendance_date: DateLike) -> AttendanceRoster:
        day = canonical_day(attendance_date)
        existing = {
            r.student_id: r.status
            for r in self._attendance.get_by_scope(course_id=int(course_id), attendance_date=day)
        }
        members = self._directory.list_members(int(cohort_id))
        rows = [
            AttendanceRosterRow(
                student_id=m.student_id,
                full_name=m.full_name,
                status=existing.get(m.student_id, DEFAULT_ATTENDANCE_STATUS),
                recorded=m.student_id in existing,
            )
            for m in members
        ]
        return AttendanceRoster(
            scope_key=attendance_scope_key(course_id, day),
            course_id=int(course_id),
            attendance_date=day,
            rows=rows,
            has_existing=any(r.recorded for r in rows),
        )

    def duty_defaults(self, *, cohort_id: int, duty_date: DateLike) -> DutyRoster:
        day = canonical_day(duty_date)
        record = self._duty.get_for_date(cohort_id=int(cohort_id), duty_date=day)
        assigned = record.assignee_ids if record else frozenset()
        rows = [
            DutyRosterRow(student_id=m.student_id, full_name=m.full_name, selected=m.student_id in assigned)
            for m in self._directory.list_members(int(cohort_id))
        ]
        return DutyRoster(
            cohort_id=int(cohort_id),
            duty_date=day,
            rows=rows,
            has_existing=record is not None,
        )
