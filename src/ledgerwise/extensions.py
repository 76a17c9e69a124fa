"""Ledger wiring for Flask: context storage, caller identity and error envelopes."""

from __future__ import annotations

from typing import Any

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .context import LedgerContext
from .errors import LedgerError, NotFoundError, ValidationError
from .infra.repositories import SQLModelUserRepository
from .logging_config import get_logger

EXTENSION_KEY = "ledgerwise"
USER_HEADER = "X-User-Id"

logger = get_logger("api")


def init_ledger(app: Flask, context: LedgerContext) -> None:
    """Attach the ledger context to the app."""

    app.extensions[EXTENSION_KEY] = context


def get_ledger() -> LedgerContext:
    """Return the ledger context of the current app."""

    context = current_app.extensions.get(EXTENSION_KEY)
    if context is None:  # pragma: no cover - misconfigured app
        raise RuntimeError("Ledger context not initialized")
    return context


def current_user_id() -> int:
    """Owner id taken from the ``X-User-Id`` header; the owner must exist."""

    raw = request.headers.get(USER_HEADER, "").strip()
    try:
        user_id = int(raw)
    except ValueError:
        raise ValidationError(f"{USER_HEADER} header must be a user id") from None
    with get_ledger().unit_of_work() as session:
        if SQLModelUserRepository(session).get_by_id(user_id) is None:
            raise NotFoundError("User not found")
    return user_id


def success(data: Any, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def _failure(payload: dict[str, Any], status: int):
    return jsonify({"success": False, "error": payload}), status


def register_error_handlers(app: Flask) -> None:
    """Map failures onto the ``{"success": false, "error": ...}`` envelope."""

    @app.errorhandler(LedgerError)
    def _ledger_error(exc: LedgerError):
        level = logger.error if exc.status_code >= 500 else logger.warning
        level(
            "Request failed",
            extra={"code": exc.code, "error": exc.message, "path": request.path},
        )
        return _failure(exc.to_dict(), exc.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        status = exc.code or 500
        if status == 404:
            code = "NOT_FOUND"
        elif status >= 500:
            code = "SERVER_ERROR"
        else:
            code = "VALIDATION_ERROR"
        return _failure(
            {"message": exc.description or exc.name, "code": code, "statusCode": status}, status
        )

    @app.errorhandler(Exception)
    def _unexpected_error(exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.path})
        return _failure(
            {"message": "Internal server error", "code": "SERVER_ERROR", "statusCode": 500}, 500
        )
