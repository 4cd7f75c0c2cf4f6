from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CohortMember, CourseRef
from .repository import CohortDirectory


def _to_course(r: Dict[str, Any]) -> CourseRef:
    return CourseRef(
        course_id=int(r["course_id"]),
        code=r["course_code"],
        name=r["course_name"],
        cohort_id=int(r["cohort_id"]) if r.get("cohort_id") is not None else None,
        instructor_id=int(r["instructor_id"]) if r.get("instructor_id") is not None else None,
    )


class MySQLCohortDirectory(CohortDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_members(self, cohort_id: int) -> Sequence[CohortMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, cohort_id
                FROM users
                WHERE cohort_id=%s AND role='STUDENT' AND is_active=1
                ORDER BY full_name ASC, user_id ASC
                """,
                (int(cohort_id),),
            )
            return [
                CohortMember(student_id=int(r["user_id"]), full_name=r["full_name"], cohort_id=int(r["cohort_id"]))
                for r in fetchall(cur)
            ]

    def get_course(self, course_id: int) -> Optional[CourseRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT course_id, course_code, course_name, cohort_id, instructor_id
                FROM courses
                WHERE course_id=%s
                """,
                (int(course_id),),
            )
            r = fetchone(cur)
            return _to_course(r) if r else None

    def list_courses(self, cohort_id: int) -> Sequence[CourseRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT course_id, course_code, course_name, cohort_id, instructor_id
                FROM courses
                WHERE cohort_id=%s
                ORDER BY course_code ASC
                """,
                (int(cohort_id),),
            )
            return [_to_course(r) for r in fetchall(cur)]

    def list_courses_for_instructor(self, instructor_id: int) -> Sequence[CourseRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT course_id, course_code, course_name, cohort_id, instructor_id
                FROM courses
                WHERE instructor_id=%s
                ORDER BY course_code ASC
                """,
                (int(instructor_id),),
            )
            return [_to_course(r) for r in fetchall(cur)]
