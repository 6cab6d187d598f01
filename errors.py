"""
API errors and their JSON responses
"""
from flask import jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Error reported to the client as {"message": ...}"""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationFailed(ApiError):
    status_code = 400


class DuplicateAdmission(ApiError):
    status_code = 400

    def __init__(self, message="Admission number already exists"):
        super().__init__(message)


class NotFound(ApiError):
    status_code = 404


def error_response(message, status_code):
    return jsonify({'message': message}), status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description, error.code)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        app.logger.warning("Integrity error: %s", error.orig)
        return error_response("Record conflicts with existing data", 400)

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_fault(error):
        app.logger.exception("Storage fault")
        return error_response("Internal server error", 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        app.logger.exception("Unhandled error")
        return error_response("Internal server error", 500)
