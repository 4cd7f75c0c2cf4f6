from __future__ import annotations

from flask import Flask, g

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import date_arg, json_body, make_login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import DutyRecord


def _to_ui(record: DutyRecord, names: dict[int, str]) -> dict:
    return {
        "date": record.duty_date.isoformat(),
        "assignee_ids": sorted(record.assignee_ids),
        "assignee_names": sorted(names.get(i, "Unknown") for i in record.assignee_ids),
    }


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container)

    def _own_cohort() -> int:
        if g.actor.cohort_id is None:
            raise ValidationError("You have not been assigned to a cohort")
        return g.actor.cohort_id

    def _member_names(cohort_id: int) -> dict[int, str]:
        return {m.student_id: m.full_name for m in container.cohort_directory.list_members(cohort_id)}

    @app.route("/api/duty", methods=["POST"], endpoint="duty_assign")
    @login_required
    def duty_assign():
        data = json_body()
        record = container.duty_service.assign(
            g.actor,
            duty_date=parse_iso_date(str(data.get("date") or "")),
            assignee_ids=data.get("assignee_ids"),
        )
        return ok(_to_ui(record, _member_names(record.cohort_id)))

    @app.route("/api/duty/today", methods=["GET"], endpoint="duty_today")
    @login_required
    def duty_today():
        cohort_id = _own_cohort()
        record = container.duty_service.for_date(cohort_id, now_local().date())
        return ok(_to_ui(record, _member_names(cohort_id)) if record else None)

    @app.route("/api/duty/week", methods=["GET"], endpoint="duty_week")
    @login_required
    def duty_week():
        cohort_id = _own_cohort()
        names = _member_names(cohort_id)
        records = container.duty_service.week_from(cohort_id, date_arg())
        return ok([_to_ui(r, names) for r in records])

    @app.route("/api/duty/prefill", methods=["GET"], endpoint="duty_prefill")
    @login_required
    def duty_prefill():
        grant = container.permission_gate.require_monitor(g.actor)
        roster = container.prefill_resolver.duty_defaults(cohort_id=grant.cohort_id, duty_date=date_arg())
        return ok(roster.to_dict())
