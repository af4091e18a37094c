from flask import jsonify
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from locadora.extensions import db


class AppError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.message}


class NotFoundError(AppError):
    status_code = 404


class UnauthenticatedError(AppError):
    status_code = 401


class InvalidStateError(AppError):
    """A record or a derived value broke one of the allocation or lifecycle invariants."""

    status_code = 409


class InsufficientAvailabilityError(InvalidStateError):
    def __init__(self, message, equipment_id=None, requested=None, available=None):
        super().__init__(message)
        self.equipment_id = equipment_id
        self.requested = requested
        self.available = available

    def to_dict(self):
        return {
            "error": self.message,
            "equipment_id": self.equipment_id,
            "requested": self.requested,
            "available": self.available,
        }


class ConflictError(AppError):
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err):
        if err.status_code >= 500:
            app.logger.error("Application error: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(StaleDataError)
    def handle_stale_data(_err):
        db.session.rollback()
        app.logger.warning("Concurrent modification detected")
        return jsonify({"error": "Record was modified concurrently. Reload and try again."}), 409

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(_err):
        db.session.rollback()
        app.logger.warning("Database integrity error")
        return jsonify({"error": "Conflict. Resource already exists."}), 409

    @app.errorhandler(400)
    def bad_request(_err):
        return jsonify({"error": "Bad request"}), 400

    @app.errorhandler(401)
    def unauthorized(_err):
        return jsonify({"error": "Unauthorized"}), 401

    @app.errorhandler(403)
    def forbidden(_err):
        return jsonify({"error": "Forbidden"}), 403

    @app.errorhandler(404)
    def not_found(_err):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_err):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def too_many_requests(_err):
        return jsonify({"error": "Too many requests"}), 429

    @app.errorhandler(500)
    def server_error(_err):
        app.logger.exception("Internal server error")
        return jsonify({"error": "Internal server error"}), 500
