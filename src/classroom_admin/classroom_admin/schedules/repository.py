from __future__ import annotations

from typing import Protocol, Sequence

from .model import CourseSchedule


class CourseScheduleRepository(Protocol):
    def list_for_cohort(self, cohort_id: int) -> Sequence[CourseSchedule]:
        """Courses of a cohort, ordered by code."""

        raise NotImplementedError

    def list_for_instructor(self, instructor_id: int) -> Sequence[CourseSchedule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[CourseSchedule]:
        raise NotImplementedError
