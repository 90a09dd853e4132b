"""
Typed application errors.

Services raise these; api/errors.py turns them into the error envelope:
    {"success": false, "data": null, "metadata": null,
     "error": {"code": ..., "message": ..., "details": ...}}
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input data"


class BadRequestError(AppError):
    status_code = 400
    code = "BAD_REQUEST_ERROR"
    default_message = "Bad request"


class AuthenticationError(AppError):
    status_code = 401
    code = "AUTHENTICATION_ERROR"
    default_message = "Authentication failed"


class AuthorizationError(AppError):
    status_code = 403
    code = "AUTHORIZATION_ERROR"
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND_ERROR"
    default_message = "Resource not found"


class ConflictError(AppError):
    """Uniqueness violation or a delete blocked by live references."""

    status_code = 409
    code = "CONFLICT_ERROR"
    default_message = "Resource already exists"

    def __init__(self, message: str | None = None, field: str | None = None,
                 details: Optional[Dict[str, Any]] = None):
        if field is not None:
            details = {**(details or {}), "field": field}
        self.field = field
        super().__init__(message, details)


class TooManyRequestsError(AppError):
    status_code = 429
    code = "TOO_MANY_REQUESTS_ERROR"
    default_message = "Too many requests"


class InternalServerError(AppError):
    default_message = "Internal server error"
