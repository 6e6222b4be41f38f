import logging

from flask import jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from notehub.extensions import db

log = logging.getLogger("notehub.error")


class ApiError(Exception):
    def __init__(self, message, status_code=400, code="bad_request", details=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}


class NotFound(ApiError):
    def __init__(self, message="Resource not found.", details=None):
        super().__init__(message, 404, "not_found", details)


class StorageError(ApiError):
    """Échec d'upload ou de suppression côté stockage après reprises."""

    def __init__(self, message="File storage is unavailable.", details=None):
        super().__init__(message, 502, "storage_error", details)


def _json_error(message, status, code, details=None):
    return jsonify({
        "error": {"code": code, "message": message, "details": details or {}}
    }), status


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return _json_error(e.message, e.status_code, e.code, e.details)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return _json_error("Invalid request.", 400, "validation_error", e.messages)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        # Ex: 404, 405, 413, 429…
        return _json_error(e.description or "HTTP error", e.code or 500, "http_error")

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e: SQLAlchemyError):
        db.session.rollback()
        log.exception("database_error")
        return _json_error("Database error.", 500, "database_error")

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # traceback côté serveur uniquement
        log.exception("unhandled_exception")
        return _json_error("Internal server error.", 500, "internal_error")
