from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import AbstractSet, Any, Dict, List, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import DutyRecord
from .repository import DutyLedger

_SELECT = """
    SELECT d.duty_id, d.cohort_id, d.duty_date, d.assigned_by, a.student_id
    FROM duty_records d
    LEFT JOIN duty_assignees a ON a.duty_id = d.duty_id
"""


def _group(rows: List[Dict[str, Any]]) -> List[DutyRecord]:
    heads: Dict[int, Dict[str, Any]] = {}
    assignees: Dict[int, set] = defaultdict(set)
    for r in rows:
        duty_id = int(r["duty_id"])
        heads.setdefault(duty_id, r)
        if r.get("student_id") is not None:
            assignees[duty_id].add(int(r["student_id"]))

    out = [
        DutyRecord(
            cohort_id=int(head["cohort_id"]),
            duty_date=head["duty_date"],
            assignee_ids=frozenset(assignees[duty_id]),
            assigned_by=int(head["assigned_by"]) if head.get("assigned_by") is not None else None,
        )
        for duty_id, head in heads.items()
    ]
    out.sort(key=lambda d: (d.duty_date, d.cohort_id))
    return out


class MySQLDutyRepository(DutyLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def assign(self, *, cohort_id: int, duty_date: date, assignee_ids: AbstractSet[int], assigned_by: int) -> None:
        # Header upsert + full replacement of assignees in a single transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO duty_records(cohort_id, duty_date, assigned_by)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE assigned_by=VALUES(assigned_by)
                """,
                (int(cohort_id), duty_date, int(assigned_by)),
            )
            cur.execute(
                "SELECT duty_id FROM duty_records WHERE cohort_id=%s AND duty_date=%s",
                (int(cohort_id), duty_date),
            )
            duty_id = int(fetchone(cur)["duty_id"])

            cur.execute("DELETE FROM duty_assignees WHERE duty_id=%s", (duty_id,))
            cur.executemany(
                "INSERT INTO duty_assignees(duty_id, student_id) VALUES(%s,%s)",
                [(duty_id, int(sid)) for sid in sorted(assignee_ids)],
            )

    def get_for_date(self, *, cohort_id: int, duty_date: date) -> Optional[DutyRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE d.cohort_id=%s AND d.duty_date=%s", (int(cohort_id), duty_date))
            records = _group(fetchall(cur))
            return records[0] if records else None

    def get_for_range(self, *, cohort_id: int, start: date, end: date) -> Sequence[DutyRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE d.cohort_id=%s AND d.duty_date BETWEEN %s AND %s",
                (int(cohort_id), start, end),
            )
            return _group(fetchall(cur))

    def get_for_cohorts_on(self, *, cohort_ids: Sequence[int], duty_date: date) -> Mapping[int, DutyRecord]:
        ids = sorted({int(c) for c in cohort_ids})
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE d.duty_date=%s AND d.cohort_id IN ({in_placeholders(ids)})",
                (duty_date, *ids),
            )
            return {r.cohort_id: r for r in _group(fetchall(cur))}
