from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import date_arg, json_body, make_login_required, ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container)

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_record")
    @login_required
    def attendance_record():
        data = json_body()
        written = container.attendance_service.record(
            g.actor,
            course_id=data.get("course_id"),
            attendance_date=parse_iso_date(str(data.get("date") or "")),
            entries=data.get("entries"),
        )
        return ok({"written": written})

    @app.route("/api/attendance/prefill", methods=["GET"], endpoint="attendance_prefill")
    @login_required
    def attendance_prefill():
        grant = container.permission_gate.require_monitor(g.actor)
        course = container.permission_gate.require_course(grant, require_id(request.args.get("course_id"), "Course"))
        roster = container.prefill_resolver.attendance_defaults(
            cohort_id=grant.cohort_id,
            course_id=course.course_id,
            attendance_date=date_arg(),
        )
        return ok(roster.to_dict())

    @app.route("/api/attendance/me", methods=["GET"], endpoint="attendance_me")
    @login_required
    def attendance_me():
        return ok(container.attendance_service.counts_for(g.actor.user_id).to_dict())
