"""Shared pieces of the JSON controllers: session loading and error mapping."""

from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Any

from flask import Flask, current_app, g, jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ScopeMismatchError,
    StoreError,
    ValidationError,
)
from .datetime_utils import now_local, parse_iso_date

STORE_FAILURE_MESSAGE = "The service is temporarily unavailable, please try again"


def make_login_required(container):
    """Decorator that loads a fresh SessionUser into ``g.actor`` or answers 401."""

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = container.auth_service.resolve(session.get("user_id"))
            if actor is None:
                session.clear()
                raise AuthenticationError("Please log in first")
            g.actor = actor
            return view(*args, **kwargs)

        return wrapper

    return login_required


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def date_arg(name: str = "date") -> date:
    value = request.args.get(name)
    return parse_iso_date(value) if value else now_local().date()


def ok(payload: Any = None, status: int = 200):
    body = {"success": True}
    if payload is not None:
        body["data"] = payload
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    def _fail(message: str, status: int, **extra):
        return jsonify({"success": False, "message": message, **extra}), status

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return _fail(str(e), 400)

    @app.errorhandler(ScopeMismatchError)
    def _scope(e: ScopeMismatchError):
        return _fail(str(e), 422, ids=list(e.ids))

    @app.errorhandler(AuthenticationError)
    def _authn(e: AuthenticationError):
        return _fail(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authz(e: AuthorizationError):
        current_app.logger.warning("Forbidden %s %s: %s", request.method, request.path, e)
        return _fail(str(e), 403)

    @app.errorhandler(StoreError)
    def _store(e: StoreError):
        current_app.logger.error("Store failure on %s %s: %s", request.method, request.path, e)
        return _fail(STORE_FAILURE_MESSAGE, 503, retryable=True)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return _fail(str(e), 400)
