from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CohortMember:
    student_id: int
    full_name: str
    cohort_id: int


@dataclass(frozen=True)
class CourseRef:
    """Course metadata as provided by the directory (no schedule fields)."""

    course_id: int
    code: str
    name: str
    cohort_id: Optional[int]
    instructor_id: Optional[int] = None
