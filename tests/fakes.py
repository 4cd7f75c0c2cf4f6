"""In-memory stand-ins for the MySQL repositories plus a small shared fixture world."""

from __future__ import annotations

from datetime import date
from typing import Optional

from werkzeug.security import generate_password_hash

from src.classroom_admin.classroom_admin.attendance.model import (
    AttendanceCounts,
    AttendanceRecord,
    LatestAttendance,
)
from src.classroom_admin.classroom_admin.cohorts.model import CohortMember, CourseRef
from src.classroom_admin.classroom_admin.core.enums import AttendanceStatus, Role
from src.classroom_admin.classroom_admin.core.exceptions import StoreError
from src.classroom_admin.classroom_admin.duty.model import DutyRecord
from src.classroom_admin.classroom_admin.schedules.model import CourseSchedule
from src.classroom_admin.classroom_admin.users.model import User
from src.classroom_admin.classroom_admin.users.service import SessionUser

COHORT_A = 1
COHORT_B = 2
COURSE_A1 = 100
COURSE_A2 = 101
COURSE_B1 = 200
INSTRUCTOR = 900

# Student ids: cohort A = 11..15 (11 is monitor), cohort B = 21..22 (21 is monitor)
MEMBERS = {
    COHORT_A: [
        CohortMember(student_id=11, full_name="Alice", cohort_id=COHORT_A),
        CohortMember(student_id=12, full_name="Bob", cohort_id=COHORT_A),
        CohortMember(student_id=13, full_name="Carol", cohort_id=COHORT_A),
        CohortMember(student_id=14, full_name="Dave", cohort_id=COHORT_A),
        CohortMember(student_id=15, full_name="Erin", cohort_id=COHORT_A),
    ],
    COHORT_B: [
        CohortMember(student_id=21, full_name="Frank", cohort_id=COHORT_B),
        CohortMember(student_id=22, full_name="Grace", cohort_id=COHORT_B),
    ],
}

COURSES = {
    COURSE_A1: CourseRef(course_id=COURSE_A1, code="CS101", name="Programming", cohort_id=COHORT_A, instructor_id=INSTRUCTOR),
    COURSE_A2: CourseRef(course_id=COURSE_A2, code="MA101", name="Calculus", cohort_id=COHORT_A, instructor_id=INSTRUCTOR),
    COURSE_B1: CourseRef(course_id=COURSE_B1, code="EN101", name="English", cohort_id=COHORT_B, instructor_id=None),
}


class InMemoryDirectory:
    def __init__(self, members=None, courses=None):
        self.members = {k: list(v) for k, v in (members or MEMBERS).items()}
        self.courses = dict(courses or COURSES)

    def list_members(self, cohort_id: int):
        return sorted(self.members.get(cohort_id, []), key=lambda m: (m.full_name, m.student_id))

    def get_course(self, course_id: int) -> Optional[CourseRef]:
        return self.courses.get(course_id)

    def list_courses(self, cohort_id: int):
        return sorted((c for c in self.courses.values() if c.cohort_id == cohort_id), key=lambda c: c.code)

    def list_courses_for_instructor(self, instructor_id: int):
        return sorted((c for c in self.courses.values() if c.instructor_id == instructor_id), key=lambda c: c.code)


class InMemoryAttendanceLedger:
    """Dict keyed by the natural key; ``fail_next`` simulates transient store failures."""

    def __init__(self):
        self.rows: dict[tuple[int, int, date], AttendanceRecord] = {}
        self.fail_next = 0
        self.write_calls = 0

    def _maybe_fail(self):
        self.write_calls += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            raise StoreError("simulated outage")

    def upsert(self, *, student_id, course_id, attendance_date, status, recorded_by):
        self._maybe_fail()
        self.rows[(student_id, course_id, attendance_date)] = AttendanceRecord(
            student_id=student_id,
            course_id=course_id,
            attendance_date=attendance_date,
            status=status,
            recorded_by=recorded_by,
        )

    def upsert_many(self, *, course_id, attendance_date, entries, recorded_by):
        self._maybe_fail()
        for e in entries:
            self.rows[(e.student_id, course_id, attendance_date)] = AttendanceRecord(
                student_id=e.student_id,
                course_id=course_id,
                attendance_date=attendance_date,
                status=e.status,
                recorded_by=recorded_by,
            )

    def get_by_scope(self, *, course_id, attendance_date):
        return sorted(
            (r for r in self.rows.values() if r.course_id == course_id and r.attendance_date == attendance_date),
            key=lambda r: r.student_id,
        )

    def get_by_student(self, student_id):
        statuses = [r.status for r in self.rows.values() if r.student_id == student_id]
        return AttendanceCounts(
            present=statuses.count(AttendanceStatus.PRESENT),
            absent=statuses.count(AttendanceStatus.ABSENT),
            late=statuses.count(AttendanceStatus.LATE),
        )

    def get_latest_for_course(self, course_id):
        days = [r.attendance_date for r in self.rows.values() if r.course_id == course_id]
        if not days:
            return None
        latest = max(days)
        return LatestAttendance(
            course_id=course_id,
            attendance_date=latest,
            records=self.get_by_scope(course_id=course_id, attendance_date=latest),
        )


class InMemoryDutyLedger:
    def __init__(self):
        self.rows: dict[tuple[int, date], DutyRecord] = {}
        self.fail_next = 0
        self.write_calls = 0

    def assign(self, *, cohort_id, duty_date, assignee_ids, assigned_by):
        self.write_calls += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            raise StoreError("simulated outage")
        self.rows[(cohort_id, duty_date)] = DutyRecord(
            cohort_id=cohort_id,
            duty_date=duty_date,
            assignee_ids=frozenset(assignee_ids),
            assigned_by=assigned_by,
        )

    def get_for_date(self, *, cohort_id, duty_date):
        return self.rows.get((cohort_id, duty_date))

    def get_for_range(self, *, cohort_id, start, end):
        return sorted(
            (r for (c, d), r in self.rows.items() if c == cohort_id and start <= d <= end),
            key=lambda r: r.duty_date,
        )

    def get_for_cohorts_on(self, *, cohort_ids, duty_date):
        return {c: r for (c, d), r in self.rows.items() if c in cohort_ids and d == duty_date}


class InMemorySchedules:
    def __init__(self, courses):
        self.courses = list(courses)

    def list_for_cohort(self, cohort_id):
        return sorted((c for c in self.courses if c.cohort_id == cohort_id), key=lambda c: c.code)

    def list_for_instructor(self, instructor_id):
        return [c for c in self.courses if c.instructor_id == instructor_id]

    def list_all(self):
        return sorted(self.courses, key=lambda c: c.code)


class InMemoryUsers:
    def __init__(self, users):
        self.by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self.by_id.get(user_id)

    def get_by_email(self, email):
        return next((u for u in self.by_id.values() if u.email == email), None)


def _user(user_id, name, role, cohort_id=None, is_monitor=False, is_active=True) -> User:
    return User(
        user_id=user_id,
        full_name=name,
        email=f"{name.lower()}@test.com",
        password_hash=generate_password_hash("pw123456"),
        role=role,
        cohort_id=cohort_id,
        is_monitor=is_monitor,
        is_active=is_active,
    )


USERS = [
    _user(11, "Alice", Role.STUDENT, COHORT_A, is_monitor=True),
    _user(12, "Bob", Role.STUDENT, COHORT_A),
    _user(21, "Frank", Role.STUDENT, COHORT_B, is_monitor=True),
    _user(30, "Orphan", Role.STUDENT, None, is_monitor=True),
    _user(INSTRUCTOR, "Prof", Role.FACULTY),
    _user(1, "Admin", Role.ADMIN),
]

SCHEDULES = [
    CourseSchedule(
        course_id=COURSE_A1,
        name="Programming",
        code="CS101",
        semester_start=date(2024, 3, 4),
        semester_end=date(2024, 3, 25),
        weekday=1,
        start_time="09:00",
        end_time="10:30",
        instructor_name="Prof",
        instructor_id=INSTRUCTOR,
        cohort_id=COHORT_A,
        cohort_name="Class A",
    ),
    CourseSchedule(
        course_id=COURSE_A2,
        name="Calculus",
        code="MA101",
        semester_start=date(2024, 3, 4),
        semester_end=date(2024, 3, 25),
        weekday=3,
        start_time="13:00",
        end_time="14:30",
        instructor_name="Prof",
        instructor_id=INSTRUCTOR,
        cohort_id=COHORT_A,
        cohort_name="Class A",
    ),
    CourseSchedule(
        course_id=COURSE_B1,
        name="English",
        code="EN101",
        semester_start=date(2024, 3, 4),
        semester_end=date(2024, 3, 25),
        weekday=2,
        start_time="10:00",
        end_time="11:30",
        cohort_id=COHORT_B,
        cohort_name="Class B",
    ),
]


def session_user(user_id: int) -> SessionUser:
    return SessionUser.from_user(next(u for u in USERS if u.user_id == user_id))
