"""Error taxonomy for TaskFlow API calls.

Every gateway operation either returns a typed value or raises one of the
classes below. Callers branch on the class, never on HTTP status codes.
"""

from __future__ import annotations

from typing import Any


class TaskFlowError(Exception):
    """Base class for all TaskFlow client errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class Unauthorized(TaskFlowError):
    """The session credential is missing, invalid or expired."""


class NotFound(TaskFlowError):
    """The referenced entity no longer exists (or is not visible to us)."""


class ValidationFailed(TaskFlowError):
    """Caller-correctable input error.

    Attributes:
        field: Name of the offending field, or None when the server did not
            attribute the error to a single field.
        details: Full field -> message map as reported.
    """

    def __init__(
        self,
        field: str | None,
        message: str,
        details: dict[str, str] | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, status_code)
        self.field = field
        self.details = details or ({field: message} if field else {})

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class Conflict(TaskFlowError):
    """Concurrent modification rejected by the server."""


class NetworkFailure(TaskFlowError):
    """Transport-level failure: unreachable host, timeout, broken connection."""


class ServerFailure(TaskFlowError):
    """The server answered with a 5xx or an unreadable payload."""


class SessionPersistenceError(TaskFlowError):
    """Session entries could not be written to or removed from storage."""


def error_from_response(status_code: int, body: Any) -> TaskFlowError:
    """Classify an HTTP error response into the TaskFlow error taxonomy.

    *body* is the decoded JSON error payload (``{status, message, timestamp,
    details}``) or None when the response had no JSON body.
    """
    message = None
    details: dict[str, str] = {}
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        raw_details = body.get("details")
        if isinstance(raw_details, dict):
            details = {str(k): str(v) for k, v in raw_details.items()}

    if status_code in (400, 422):
        if details:
            field, field_message = next(iter(details.items()))
            return ValidationFailed(
                field, field_message, details=details, status_code=status_code
            )
        return ValidationFailed(
            None, message or "Invalid request", status_code=status_code
        )
    if status_code == 401:
        return Unauthorized(message or "Authentication required", status_code)
    if status_code in (403, 404):
        return NotFound(message or "Resource not found", status_code)
    if status_code == 409:
        return Conflict(message or "Resource was modified concurrently", status_code)
    if status_code == 408:
        return NetworkFailure(message or "Request timed out", status_code)
    if status_code == 429:
        return ServerFailure(message or "Too many requests", status_code)
    if 400 <= status_code < 500:
        return ValidationFailed(
            None, message or f"Request rejected ({status_code})", status_code=status_code
        )
    if status_code >= 500:
        return ServerFailure(message or f"Server error ({status_code})", status_code)
    return ServerFailure(message or f"Unexpected response ({status_code})", status_code)
