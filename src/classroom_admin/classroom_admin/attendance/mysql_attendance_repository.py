from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceCounts, AttendanceEntry, AttendanceRecord, LatestAttendance
from .repository import AttendanceLedger

logger = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO attendance_records(student_id, course_id, attendance_date, status, recorded_by)
    VALUES(%s,%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE status=VALUES(status), recorded_by=VALUES(recorded_by)
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=int(r["student_id"]),
        course_id=int(r["course_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        recorded_by=int(r["recorded_by"]),
    )


class MySQLAttendanceRepository(AttendanceLedger):
    """Attendance ledger on MySQL.

    Relies on UNIQUE(student_id, course_id, attendance_date) so that
    ``INSERT ... ON DUPLICATE KEY UPDATE`` is a true upsert.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        student_id: int,
        course_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        recorded_by: int,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _UPSERT_SQL,
                (int(student_id), int(course_id), attendance_date, status.value, int(recorded_by)),
            )

    def upsert_many(
        self,
        *,
        course_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
        recorded_by: int,
    ) -> None:
        if not entries:
            return
        rows = [
            (int(e.student_id), int(course_id), attendance_date, e.status.value, int(recorded_by))
            for e in entries
        ]
        # One db_cursor block == one transaction, so the batch is all-or-nothing.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_UPSERT_SQL, rows)
        logger.debug("Upserted %d attendance rows for course %s on %s", len(rows), course_id, attendance_date)

    def get_by_scope(self, *, course_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, course_id, attendance_date, status, recorded_by
                FROM attendance_records
                WHERE course_id=%s AND attendance_date=%s
                ORDER BY student_id ASC
                """,
                (int(course_id), attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_student(self, student_id: int) -> AttendanceCounts:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n
                FROM attendance_records
                WHERE student_id=%s
                GROUP BY status
                """,
                (int(student_id),),
            )
            counts = {r["status"]: int(r["n"]) for r in fetchall(cur)}
            return AttendanceCounts(
                present=counts.get(AttendanceStatus.PRESENT.value, 0),
                absent=counts.get(AttendanceStatus.ABSENT.value, 0),
                late=counts.get(AttendanceStatus.LATE.value, 0),
            )

    def get_latest_for_course(self, course_id: int) -> Optional[LatestAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT MAX(attendance_date) AS latest FROM attendance_records WHERE course_id=%s",
                (int(course_id),),
            )
            r = fetchone(cur)
            latest = r.get("latest") if r else None
            if latest is None:
                return None

            cur.execute(
                """
                SELECT student_id, course_id, attendance_date, status, recorded_by
                FROM attendance_records
                WHERE course_id=%s AND attendance_date=%s
                ORDER BY student_id ASC
                """,
                (int(course_id), latest),
            )
            return LatestAttendance(
                course_id=int(course_id),
                attendance_date=latest,
                records=[_to_record(row) for row in fetchall(cur)],
            )
