from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class CourseSchedule:
    """Weekly recurrence descriptor of a course: one fixed weekday per semester.

    ``weekday`` is Sunday=0 .. Saturday=6; times are "HH:MM" wall-clock.
    """

    course_id: int
    name: str
    code: str = ""
    semester_start: Optional[date] = None
    semester_end: Optional[date] = None
    weekday: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    instructor_name: Optional[str] = None
    instructor_id: Optional[int] = None
    cohort_id: Optional[int] = None
    cohort_name: Optional[str] = None

    @property
    def is_schedulable(self) -> bool:
        return None not in (self.semester_start, self.semester_end, self.weekday, self.start_time, self.end_time)


@dataclass(frozen=True)
class Occurrence:
    """One concrete meeting of a course. Derived on every read, never stored."""

    occurrence_id: str
    course_id: int
    title: str
    start: datetime
    end: datetime
    instructor_name: Optional[str] = None
    cohort_name: Optional[str] = None
    color_index: int = 0
    color: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.occurrence_id,
            "course_id": self.course_id,
            "title": self.title,
            "start": self.start.isoformat(timespec="minutes"),
            "end": self.end.isoformat(timespec="minutes"),
            "instructor_name": self.instructor_name,
            "cohort_name": self.cohort_name,
            "color_index": self.color_index,
            "color": self.color,
        }
