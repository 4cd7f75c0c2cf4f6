"""Natural-key construction for ledger lookups.

Maps built from ledger rows are keyed with these functions so that the key
format lives in one place.
"""

from __future__ import annotations

from datetime import date

from .datetime_utils import DateLike, canonical_day


def day_token(value: DateLike) -> str:
    return canonical_day(value).isoformat()


def attendance_key(student_id: int, course_id: int, value: DateLike) -> tuple[int, int, date]:
    return int(student_id), int(course_id), canonical_day(value)


def attendance_scope_key(course_id: int, value: DateLike) -> str:
    """Key of one bulk-edit form: ``<course_id>|<YYYY-MM-DD>``."""
    return f"{int(course_id)}|{day_token(value)}"


def duty_key(cohort_id: int, value: DateLike) -> tuple[int, date]:
    return int(cohort_id), canonical_day(value)


def occurrence_id(course_id: int, value: DateLike) -> str:
    return f"{course_id}-{day_token(value)}"
