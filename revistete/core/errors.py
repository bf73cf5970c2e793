"""Error taxonomy for the ReVistete API.

Every failure a route can report is one of the classes below. The global
handlers in ``revistete.api.error_handlers`` turn them into the JSON
envelope ``{"success": false, "message": ..., "errors": [...]}``.

Session failures share a single message, so an expired token and a missing
one produce the same response.
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_response(self) -> dict:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


# ─── 400-level ────────────────────────────────────────────────────────────────

class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Validation error"


class ConflictError(AppError):
    status_code = 400
    code = "CONFLICT"
    default_message = "Resource already exists"


class AuthError(AppError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class SessionError(AppError):
    status_code = 401
    code = "INVALID_SESSION"
    default_message = "Not authorized, invalid or expired session"


class AuthorizationError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


# ─── 500-level ────────────────────────────────────────────────────────────────

class TransientError(AppError):
    """Upstream or store timeout. Not retried here; retrying is the caller's call."""

    status_code = 500
    code = "SERVICE_UNAVAILABLE"
    default_message = "Service temporarily unavailable, please try again"


class UnhandledError(AppError):
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail

    def to_response(self) -> dict:
        body = super().to_response()
        if self.detail:
            body["detail"] = self.detail
        return body
