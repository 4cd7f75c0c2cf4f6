from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CohortMember, CourseRef


class CohortDirectory(Protocol):
    """Read-only directory: cohort membership and course-to-cohort mapping."""

    def list_members(self, cohort_id: int) -> Sequence[CohortMember]:
        """Students of the cohort, ordered by name."""

        raise NotImplementedError

    def get_course(self, course_id: int) -> Optional[CourseRef]:
        raise NotImplementedError

    def list_courses(self, cohort_id: int) -> Sequence[CourseRef]:
        """Courses of the cohort, ordered by code."""

        raise NotImplementedError

    def list_courses_for_instructor(self, instructor_id: int) -> Sequence[CourseRef]:
        raise NotImplementedError
