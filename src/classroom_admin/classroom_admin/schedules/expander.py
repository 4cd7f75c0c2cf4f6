"""Expand a course's weekly recurrence into concrete calendar occurrences."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import canonical_day, iter_days, sunday_based_weekday, wall_clock_or_midnight
from ..common.keys import occurrence_id
from ..core.exceptions import ValidationError
from .model import CourseSchedule, Occurrence

logger = logging.getLogger(__name__)

DateWindow = Tuple[date, date]


def occurrence_title(course: CourseSchedule) -> str:
    return " · ".join(part for part in (course.name, course.cohort_name) if part)


def expand_course(course: CourseSchedule, window: Optional[DateWindow] = None) -> list[Occurrence]:
    """Occurrences of ``course`` in ascending date order.

    Walks every day from semester_start to semester_end inclusive and keeps the
    days whose weekday (Sunday=0) matches. Start/end are that day's date with
    the course's wall-clock times; malformed times become 00:00. A course with
    any recurrence field missing, or a malformed semester date, yields
    nothing.

    ``window`` (inclusive start, end) restricts the result to those days.
    """

    if not course.is_schedulable:
        logger.debug("Course %s has no complete recurrence, skipping", course.course_id)
        return []

    try:
        first, last = canonical_day(course.semester_start), canonical_day(course.semester_end)
    except ValidationError:
        logger.debug("Course %s has a malformed semester date, skipping", course.course_id)
        return []
    if window is not None:
        first, last = max(first, window[0]), min(last, window[1])
    if first > last or course.weekday not in range(7):
        return []

    start_t = wall_clock_or_midnight(course.start_time)
    end_t = wall_clock_or_midnight(course.end_time)
    title = occurrence_title(course)

    out: list[Occurrence] = []
    for day in iter_days(first, last):
        if sunday_based_weekday(day) != course.weekday:
            continue
        out.append(
            Occurrence(
                occurrence_id=occurrence_id(course.course_id, day),
                course_id=course.course_id,
                title=title,
                start=datetime.combine(day, start_t),
                end=datetime.combine(day, end_t),
                instructor_name=course.instructor_name,
                cohort_name=course.cohort_name,
            )
        )
    return out
