"""
Error kinds raised by the record store and the request handlers.

Each subclass fixes the HTTP status, severity and remediation hint that the
API layer puts into the failure envelope, so handlers never have to inspect
exception messages.

Usage:
    from personal_manager.core.errors import NotFoundError

    if not affected:
        raise NotFoundError("Journey", journey_id)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import exc as sa_exc


class StoreError(Exception):
    """Base class for every failure surfaced to API callers."""

    kind = "unknown"
    severity = "medium"
    status_code = 500
    suggestion = "Try again or contact support"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.kind,
            "severity": self.severity,
            "message": self.message,
            "suggestion": self.suggestion,
        }
        if self.details:
            out["details"] = self.details
        return out


class StoreConnectionError(StoreError):
    """The record store could not be reached."""

    kind = "connection"
    severity = "critical"
    status_code = 503
    suggestion = "Check that the database service is running and DATABASE_URL is correct"


class AuthError(StoreError):
    """Credentials were rejected."""

    kind = "authentication"
    severity = "high"
    status_code = 401
    suggestion = "Check the username and password"


class SchemaError(StoreError):
    """A table or column the query needs is missing or malformed."""

    kind = "schema"
    suggestion = "Restart the service so the schema is created, or migrate the database"


class ConstraintError(StoreError):
    kind = "constraint"
    status_code = 409
    suggestion = "Check for duplicate data or dangling references"


class NotFoundError(StoreError):
    kind = "not_found"
    severity = "low"
    status_code = 404
    suggestion = "Refresh the list; the record may already have been removed"

    def __init__(self, resource: str, record_id: Any):
        super().__init__(
            f"{resource} not found",
            details={"resource": resource, "id": record_id},
        )


class ValidationError(StoreError):
    kind = "validation"
    severity = "low"
    status_code = 400
    suggestion = "Fill in every required field with a valid value"


def from_sqlalchemy(error: sa_exc.SQLAlchemyError) -> StoreError:
    """Translate a SQLAlchemy exception into a StoreError by its type."""
    message = str(getattr(error, "orig", None) or error)
    if isinstance(error, sa_exc.IntegrityError):
        return ConstraintError(f"Database constraint violation: {message}")
    if isinstance(error, sa_exc.DataError):
        return ValidationError(f"Data type mismatch: {message}")
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return StoreConnectionError(f"Database connection failed: {message}")
    if isinstance(error, (sa_exc.InterfaceError, sa_exc.DisconnectionError, sa_exc.TimeoutError)):
        return StoreConnectionError(f"Database connection failed: {message}")
    if isinstance(error, (sa_exc.OperationalError, sa_exc.ProgrammingError, sa_exc.NoSuchTableError)):
        return SchemaError(f"Database schema error: {message}")
    return StoreError(f"Database error: {message}")
