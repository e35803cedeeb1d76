"""
Domain exceptions raised by the service layer.

Each exception knows the HTTP status and the error category it renders as;
the handlers in ``app.api.errors`` turn them into the JSON error envelope
``{"error": ..., "message": ..., "details": [...]}``.
"""

from typing import Any, Optional


class AppError(Exception):
    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(
        self,
        message: str,
        details: Optional[list[dict[str, Any]]] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        # Short machine-readable cause for logs and metrics; not rendered
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Input rejected by structural or business validation."""

    status_code = 400
    error = "Validation Error"


class BadRequestError(AppError):
    """Request is well-formed but violates a registration rule."""

    status_code = 400
    error = "Bad Request"


class NotFoundError(AppError):
    status_code = 404
    error = "Not Found"


class ConflictError(AppError):
    status_code = 409
    error = "Conflict"


class InternalError(AppError):
    status_code = 500
    error = "Internal Server Error"
