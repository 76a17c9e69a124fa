"""Error taxonomy shared by services and the HTTP surface.

Every failure carries a stable machine-readable ``code`` and the transport
status a caller should map it to.
"""

from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Base class for engine failures."""

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "statusCode": self.status_code,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(LedgerError):
    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(LedgerError):
    code = "NOT_FOUND"
    status_code = 404


class EditWindowExpired(LedgerError):
    code = "EDIT_WINDOW_EXPIRED"
    status_code = 403


class UndoExpired(LedgerError):
    code = "UNDO_EXPIRED"
    status_code = 403


class ConflictError(LedgerError):
    code = "CONFLICT"
    status_code = 409


class InternalError(LedgerError):
    """Persistence-layer failure; the unit of work has been rolled back."""

    code = "SERVER_ERROR"
    status_code = 500
