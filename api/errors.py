from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from api.utils.responses import error_payload
from utils.exceptions import AppError

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "BAD_REQUEST_ERROR",
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND_ERROR",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT_ERROR",
    415: "BAD_REQUEST_ERROR",
    429: "TOO_MANY_REQUESTS_ERROR",
}


def error_response(code: str, message: str, status: int, details: dict | None = None):
    return jsonify(error_payload(code, message, details)), status


def _rollback():
    storage = current_app.extensions.get("storage")
    if storage is not None:
        storage.rollback()


def register_error_handlers(app):
    # Typed application errors raised by services and decorators
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.exception("Application error", exc_info=err)
        return error_response(err.code, err.message, err.status_code, details=err.details)

    # Marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("VALIDATION_ERROR", "Validation failed", 400, details=err.messages)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        _rollback()
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        logger.warning("Integrity error: %s", message)
        details = {"db_error": message} if current_app.debug else None
        # Heuristics: tailor the status
        if "unique constraint" in lower_msg or "unique violation" in lower_msg or "duplicate" in lower_msg:
            return error_response("CONFLICT_ERROR", "Resource already exists", 409, details=details)
        if "foreign key" in lower_msg:
            return error_response("BAD_REQUEST_ERROR", "Referenced resource constraint failed", 400, details=details)
        if "check constraint" in lower_msg or "constraint failed" in lower_msg:
            return error_response("BAD_REQUEST_ERROR", "Check constraint failed", 400, details=details)
        # Generic integrity issue
        return error_response("BAD_REQUEST_ERROR", "Integrity error", 400, details=details)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        code = _HTTP_CODES.get(status, "INTERNAL_SERVER_ERROR" if status >= 500 else "BAD_REQUEST_ERROR")
        return error_response(code, err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        _rollback()
        logger.exception("Unhandled exception", exc_info=err)
        # In dev, include exception details to speed up debugging
        details = None
        if current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_SERVER_ERROR", "Internal server error", 500, details=details)
