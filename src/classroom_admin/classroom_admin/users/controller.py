from __future__ import annotations

from flask import Flask, g, session

from ..common.http import json_body, make_login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container)

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(str(data.get("email") or ""), str(data.get("password") or ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["user_id"] = s_user.user_id
        session["role"] = s_user.role.value

        app.logger.info("User %s logged in", s_user.user_id)
        return ok(
            {
                "user_id": s_user.user_id,
                "full_name": s_user.full_name,
                "role": s_user.role.value,
                "cohort_id": s_user.cohort_id,
                "is_monitor": s_user.is_monitor,
            }
        )

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        actor = g.actor
        decision = container.permission_gate.evaluate(actor)
        return ok(
            {
                "user_id": actor.user_id,
                "full_name": actor.full_name,
                "role": actor.role.value,
                "cohort_id": actor.cohort_id,
                "is_monitor": actor.is_monitor,
                "can_write_ledgers": decision.allowed,
            }
        )
