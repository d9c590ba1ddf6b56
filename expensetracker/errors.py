"""API error types and the JSON error handlers registered on the app.

Every error response body has the shape ``{"message": str}``.
"""
import logging

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"message": self.message}


class ValidationError(ApiError):
    status_code = 400


class ConflictError(ApiError):
    # duplicates are reported as 400 with a specific message
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class InvalidTokenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            logger.error("API error: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        db.session.rollback()
        logger.exception("Unhandled error")
        body = {"message": "Something went wrong on the server"}
        if current_app.config.get("APP_ENV") == "development":
            body["error"] = str(err)
        return jsonify(body), 500
