from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from ..common.datetime_utils import sunday_based_weekday
from ..core.enums import CalendarView, Role
from ..users.service import SessionUser
from .aggregator import ScheduleAggregator
from .model import CourseSchedule, Occurrence
from .repository import CourseScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarWindow:
    """Inclusive date range shown by one calendar view."""

    view: CalendarView
    start: date
    end: date

    @classmethod
    def for_view(cls, view: CalendarView, anchor: date) -> "CalendarWindow":
        if view == CalendarView.DAY:
            return cls(view, anchor, anchor)
        if view == CalendarView.WEEK:
            # Weeks run Sunday..Saturday, matching the weekday numbering of courses.
            start = anchor - timedelta(days=sunday_based_weekday(anchor))
            return cls(view, start, start + timedelta(days=6))
        last_day = calendar.monthrange(anchor.year, anchor.month)[1]
        return cls(view, anchor.replace(day=1), anchor.replace(day=last_day))

    def as_tuple(self) -> tuple[date, date]:
        return self.start, self.end


class ScheduleService:
    """Read-only course calendar. Occurrences are recomputed on every call."""

    def __init__(self, schedules: CourseScheduleRepository, aggregator: ScheduleAggregator | None = None):
        self._schedules = schedules
        self._aggregator = aggregator or ScheduleAggregator()

    def courses_for(self, actor: SessionUser) -> Sequence[CourseSchedule]:
        if actor.role == Role.STUDENT:
            if actor.cohort_id is None:
                return []
            return self._schedules.list_for_cohort(actor.cohort_id)
        if actor.role == Role.FACULTY:
            return self._schedules.list_for_instructor(actor.user_id)
        return self._schedules.list_all()

    def calendar_for(self, actor: SessionUser, *, view: CalendarView, anchor: date) -> tuple[CalendarWindow, list[Occurrence]]:
        window = CalendarWindow.for_view(view, anchor)
        courses = self.courses_for(actor)
        occurrences = self._aggregator.aggregate(courses, window.as_tuple())
        logger.debug(
            "Calendar for user %s: %d courses, %d occurrences in %s..%s",
            actor.user_id,
            len(courses),
            len(occurrences),
            window.start,
            window.end,
        )
        return window, occurrences
