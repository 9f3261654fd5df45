from flask import jsonify
from werkzeug.exceptions import HTTPException


class ServiceError(Exception):
    """Base exception for business rule violations raised by services."""

    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class ValidationError(ServiceError):
    """Invalid input"""

    status_code = 400


class Unauthorized(ServiceError):
    """Authentication required"""

    status_code = 401


class Forbidden(ServiceError):
    """Access forbidden: insufficient permissions"""

    status_code = 403


class NotFound(ServiceError):
    """Resource not found"""

    status_code = 404


class ProviderError(ServiceError):
    """External provider failure"""

    status_code = 502


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"error": error.description}), error.code
