from __future__ import annotations

from flask import Flask, g, request

from ..common.http import date_arg, make_login_required, ok
from ..container import Container
from ..core.enums import CalendarView
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container)

    def _parse_view(value: str | None) -> CalendarView:
        try:
            return CalendarView((value or CalendarView.WEEK.value).lower())
        except ValueError:
            raise ValidationError("view must be one of: day, week, month")

    @app.route("/api/schedule", methods=["GET"], endpoint="schedule")
    @login_required
    def schedule():
        view = _parse_view(request.args.get("view"))
        window, occurrences = container.schedule_service.calendar_for(g.actor, view=view, anchor=date_arg())
        return ok(
            {
                "view": window.view.value,
                "start": window.start.isoformat(),
                "end": window.end.isoformat(),
                "events": [o.to_dict() for o in occurrences],
            }
        )
