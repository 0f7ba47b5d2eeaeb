"""
Typed exception hierarchy for the back office.

Services raise these; the API layer renders them as ``{"error": message}``
with the class's HTTP status. Callers catch by type, not by message:

    BackOfficeError (base)
    |
    +-- ValidationError      400  missing or malformed input
    +-- InvalidStateError    400  operation not allowed in the current status
    +-- UnauthorizedError    401  absent, invalid or expired token
    +-- ForbiddenError       403  role or ownership violation
    +-- NotFoundError        404
    +-- ConflictError        409  unique constraint or referenced row
    +-- InternalError        500

Webhook dispatch failures are not part of this hierarchy: they are caught
inside the document workflow and turned into a FAILED status.
"""

from typing import Any, Optional


class BackOfficeError(Exception):
    """Base exception for all domain errors."""

    code: str = "BACKOFFICE_ERROR"
    status_code: int = 500

    def __init__(self, message: str, **details: Any):
        # message is an i18n catalogue key or literal text
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(BackOfficeError):
    code: str = "VALIDATION_ERROR"
    status_code: int = 400


class InvalidStateError(BackOfficeError):
    """The resource exists but its status does not allow the operation."""

    code: str = "INVALID_STATE"
    status_code: int = 400

    def __init__(self, message: str, current_status: Optional[str] = None, **details: Any):
        self.current_status = current_status
        super().__init__(message, **details)


class UnauthorizedError(BackOfficeError):
    code: str = "UNAUTHORIZED"
    status_code: int = 401


class ForbiddenError(BackOfficeError):
    code: str = "FORBIDDEN"
    status_code: int = 403


class NotFoundError(BackOfficeError):
    code: str = "NOT_FOUND"
    status_code: int = 404


class ConflictError(BackOfficeError):
    code: str = "CONFLICT"
    status_code: int = 409


class InternalError(BackOfficeError):
    code: str = "INTERNAL_ERROR"
    status_code: int = 500


class WebhookDispatchError(Exception):
    """Outbound rendering request failed (network error or non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
