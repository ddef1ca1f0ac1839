"""
Typed failure outcomes raised by the service layer.

Services raise these; the exception handlers registered in ``hrms_api.main``
are the only place they are turned into HTTP responses.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.exc import IntegrityError


class HRMSError(Exception):
    """Base class for all expected request failures."""

    status_code: int = 500

    def __init__(self, message: str, *, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailed(HRMSError):
    status_code = 400


class Unauthenticated(HRMSError):
    status_code = 401


class InvalidCredentials(Unauthenticated):
    """Login failure. Deliberately identical for unknown email and bad password."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class NotFound(HRMSError):
    """Entity is absent or belongs to another organisation."""

    status_code = 404


class Conflict(HRMSError):
    status_code = 400


UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when a store error comes from a unique constraint or index.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports it in the message.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    return "unique constraint" in str(orig).lower()
