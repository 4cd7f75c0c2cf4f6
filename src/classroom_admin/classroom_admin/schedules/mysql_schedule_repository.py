from __future__ import annotations

from typing import Any, Dict, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, mysql_time_to_hhmm
from .model import CourseSchedule
from .repository import CourseScheduleRepository

_SELECT = """
    SELECT
        c.course_id, c.course_code, c.course_name,
        c.semester_start, c.semester_end, c.day_of_week, c.start_time, c.end_time,
        c.cohort_id, co.cohort_name, c.instructor_id,
        u.full_name AS instructor_name
    FROM courses c
    LEFT JOIN cohorts co ON co.cohort_id = c.cohort_id
    LEFT JOIN users u ON u.user_id = c.instructor_id
"""


def _to_schedule(r: Dict[str, Any]) -> CourseSchedule:
    return CourseSchedule(
        course_id=int(r["course_id"]),
        name=r["course_name"],
        code=r["course_code"],
        semester_start=r.get("semester_start"),
        semester_end=r.get("semester_end"),
        weekday=int(r["day_of_week"]) if r.get("day_of_week") is not None else None,
        start_time=mysql_time_to_hhmm(r.get("start_time")),
        end_time=mysql_time_to_hhmm(r.get("end_time")),
        instructor_name=r.get("instructor_name"),
        instructor_id=int(r["instructor_id"]) if r.get("instructor_id") is not None else None,
        cohort_id=int(r["cohort_id"]) if r.get("cohort_id") is not None else None,
        cohort_name=r.get("cohort_name"),
    )


class MySQLScheduleRepository(CourseScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_cohort(self, cohort_id: int) -> Sequence[CourseSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.cohort_id=%s ORDER BY c.course_code ASC", (int(cohort_id),))
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_for_instructor(self, instructor_id: int) -> Sequence[CourseSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.instructor_id=%s ORDER BY c.course_code ASC", (int(instructor_id),))
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[CourseSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY c.course_code ASC")
            return [_to_schedule(r) for r in fetchall(cur)]
