from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..core.constants import COURSE_COLORS
from .expander import DateWindow, expand_course
from .model import CourseSchedule, Occurrence


class ScheduleAggregator:
    """Merge many courses into one timeline with a stable color per course.

    The Nth distinct course (input order) gets palette color ``N mod len(palette)``.
    Colors repeat once the palette wraps.
    """

    def __init__(self, palette: Sequence[str] = COURSE_COLORS):
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = tuple(palette)

    def color_indexes(self, courses: Iterable[CourseSchedule]) -> dict[int, int]:
        indexes: dict[int, int] = {}
        for course in courses:
            if course.course_id not in indexes:
                indexes[course.course_id] = len(indexes) % len(self._palette)
        return indexes

    def aggregate(self, courses: Sequence[CourseSchedule], window: Optional[DateWindow] = None) -> list[Occurrence]:
        indexes = self.color_indexes(courses)
        seen: set[int] = set()
        out: list[Occurrence] = []
        for course in courses:
            if course.course_id in seen:
                continue
            seen.add(course.course_id)
            idx = indexes[course.course_id]
            for occ in expand_course(course, window):
                out.append(replace(occ, color_index=idx, color=self._palette[idx]))
        out.sort(key=lambda o: (o.start, o.course_id))
        return out
