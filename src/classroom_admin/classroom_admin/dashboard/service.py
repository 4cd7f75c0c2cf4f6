from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from ..attendance.service import AttendanceService
from ..cohorts.membership import members_by_id
from ..cohorts.model import CohortMember
from ..cohorts.repository import CohortDirectory
from ..common.datetime_utils import DateLike
from ..core.constants import FACULTY_ATTENDANCE_PREVIEW
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..duty.model import DutyRecord
from ..duty.service import DutyService
from ..permissions.gate import PermissionGate
from ..prefill.resolver import PrefillResolver
from ..users.service import SessionUser


def _names(ids: Iterable[int], members: Mapping[int, CohortMember]) -> list[str]:
    names = [members[i].full_name if i in members else "Unknown" for i in ids]
    return sorted(names)


def _duty_to_ui(record: Optional[DutyRecord], members: Mapping[int, CohortMember]) -> Optional[dict]:
    if record is None:
        return None
    return {"date": record.duty_date.isoformat(), "assignee_names": _names(record.assignee_ids, members)}


class DashboardService:
    """Capability-scoped view builders.

    Students get a read-only summary; the monitor additionally gets the
    editable rosters; faculty get a supervision overview of their courses.
    """

    def __init__(
        self,
        directory: CohortDirectory,
        attendance: AttendanceService,
        duty: DutyService,
        prefill: PrefillResolver,
        gate: PermissionGate,
    ):
        self._directory = directory
        self._attendance = attendance
        self._duty = duty
        self._prefill = prefill
        self._gate = gate

    def build_for(self, actor: SessionUser, *, today: date) -> dict:
        if actor.role == Role.STUDENT:
            if self._gate.evaluate(actor).allowed:
                return self.build_monitor_panel(actor, today=today)
            return self.build_student_summary(actor, today=today)
        if actor.role == Role.FACULTY:
            return self.build_faculty_overview(actor, today=today)
        raise AuthorizationError("No dashboard for this role")

    def build_student_summary(self, actor: SessionUser, *, today: date) -> dict:
        if actor.role != Role.STUDENT:
            raise AuthorizationError("Only students have a class dashboard")

        summary = {
            "kind": "student",
            "cohort_id": actor.cohort_id,
            "courses": [],
            "today_duty": None,
            "week_duties": [],
            "my_attendance": self._attendance.counts_for(actor.user_id).to_dict(),
        }
        if actor.cohort_id is None:
            return summary

        members = members_by_id(self._directory, actor.cohort_id)
        summary["courses"] = [
            {"course_id": c.course_id, "code": c.code, "name": c.name}
            for c in self._directory.list_courses(actor.cohort_id)
        ]
        summary["today_duty"] = _duty_to_ui(self._duty.for_date(actor.cohort_id, today), members)
        summary["week_duties"] = [_duty_to_ui(r, members) for r in self._duty.week_from(actor.cohort_id, today)]
        return summary

    def build_monitor_panel(
        self,
        actor: SessionUser,
        *,
        today: date,
        course_id: Optional[int] = None,
        attendance_date: Optional[DateLike] = None,
        duty_date: Optional[DateLike] = None,
    ) -> dict:
        grant = self._gate.require_monitor(actor)

        panel = self.build_student_summary(actor, today=today)
        panel["kind"] = "monitor"
        panel["members"] = [
            {"student_id": m.student_id, "name": m.full_name} for m in self._directory.list_members(grant.cohort_id)
        ]
        panel["duty_form"] = self._prefill.duty_defaults(
            cohort_id=grant.cohort_id, duty_date=duty_date or today
        ).to_dict()

        panel["attendance_form"] = None
        if course_id is not None:
            course = self._gate.require_course(grant, course_id)
            panel["attendance_form"] = self._prefill.attendance_defaults(
                cohort_id=grant.cohort_id,
                course_id=course.course_id,
                attendance_date=attendance_date or today,
            ).to_dict()
        return panel

    def build_faculty_overview(self, actor: SessionUser, *, today: date) -> dict:
        if actor.role != Role.FACULTY:
            raise AuthorizationError("Only faculty have a supervision overview")

        courses = list(self._directory.list_courses_for_instructor(actor.user_id))
        cohort_ids = sorted({c.cohort_id for c in courses if c.cohort_id is not None})
        members = {cid: members_by_id(self._directory, cid) for cid in cohort_ids}
        duties = self._duty.for_cohorts_on(cohort_ids, today)
        latest = self._attendance.latest_for_courses([c.course_id for c in courses])

        rows = []
        for c in courses:
            cohort_members = members.get(c.cohort_id, {})
            duty = duties.get(c.cohort_id) if c.cohort_id is not None else None
            last = latest.get(c.course_id)
            latest_ui = None
            if last is not None:
                entries = [
                    {
                        "student_name": cohort_members[r.student_id].full_name if r.student_id in cohort_members else None,
                        "status": r.status.value,
                    }
                    for r in last.records
                ]
                latest_ui = {
                    "date": last.attendance_date.isoformat(),
                    "entries": entries[:FACULTY_ATTENDANCE_PREVIEW],
                    "total": len(entries),
                }
            rows.append(
                {
                    "course_id": c.course_id,
                    "code": c.code,
                    "name": c.name,
                    "cohort_id": c.cohort_id,
                    "today_duty_names": _names(duty.assignee_ids, cohort_members) if duty else [],
                    "latest_attendance": latest_ui,
                }
            )
        return {"kind": "faculty", "date": today.isoformat(), "courses": rows}
