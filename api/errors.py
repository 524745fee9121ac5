from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging


class ApiError(Exception):
    """Base of the error taxonomy; every subclass maps to one HTTP status."""

    status_code = 500
    error = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, errors: list | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class RequestValidationError(ApiError):
    status_code = 400
    error = "VALIDATION_ERROR"
    default_message = "Invalid input"


class Unauthenticated(ApiError):
    status_code = 401
    error = "UNAUTHENTICATED"
    default_message = "Unauthorized request"


class InvalidToken(Unauthenticated):
    error = "INVALID_TOKEN"
    default_message = "Invalid or expired token"


class TokenStale(InvalidToken):
    error = "TOKEN_STALE"
    default_message = "Refresh token is expired or used"


class Forbidden(ApiError):
    status_code = 403
    error = "FORBIDDEN"
    default_message = "You are not allowed to access this resource"


class NotFound(ApiError):
    status_code = 404
    error = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = 409
    error = "CONFLICT"
    default_message = "Conflict"


class ServerError(ApiError):
    pass


def _flatten_messages(messages, prefix: str = "") -> list:
    # marshmallow nests field errors as dict -> list[str] (or deeper dicts)
    if isinstance(messages, dict):
        out = []
        for key, value in messages.items():
            out.extend(_flatten_messages(value, f"{prefix}{key}: " if key != "_schema" else prefix))
        return out
    if isinstance(messages, (list, tuple)):
        out = []
        for value in messages:
            out.extend(_flatten_messages(value, prefix))
        return out
    return [f"{prefix}{messages}"]


def error_response(error: str, message: str, status: int, errors: list | None = None):
    payload = {
        "statusCode": status,
        "error": error,
        "message": message,
        "errors": errors or [],
        "data": None,
        "success": False,
    }
    return jsonify(payload), status


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            logging.exception("Server error", exc_info=err)
        return error_response(err.error, err.message, err.status_code, err.errors)

    # marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("VALIDATION_ERROR", "Invalid input", 400, _flatten_messages(err.messages))

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # The database message is logged, never returned
        logging.warning("Integrity error: %s", getattr(err, "orig", err))
        lower_msg = str(getattr(err, "orig", err)).lower()
        if "unique constraint" in lower_msg or "unique violation" in lower_msg or "duplicate" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        if "foreign key" in lower_msg:
            return error_response("VALIDATION_ERROR", "Referenced resource does not exist.", 400)
        return error_response("VALIDATION_ERROR", "Integrity error.", 400)

    # Werkzeug HTTPExceptions (unknown routes, wrong method, ...) keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 400
        return error_response(err.name.upper().replace(" ", "_"), err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        return error_response(ServerError.error, ServerError.default_message, ServerError.status_code)
