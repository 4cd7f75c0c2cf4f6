from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import make_login_required, ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container)

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        today = now_local().date()
        course_id = request.args.get("course_id")
        if course_id:
            attendance_date = request.args.get("date")
            data = container.dashboard_service.build_monitor_panel(
                g.actor,
                today=today,
                course_id=require_id(course_id, "Course"),
                attendance_date=parse_iso_date(attendance_date) if attendance_date else today,
            )
        else:
            data = container.dashboard_service.build_for(g.actor, today=today)
        return ok(data)
