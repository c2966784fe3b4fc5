from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .errors import (
    AppError,
    AuthorizationError,
    ConsensusError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    WinnerMismatchError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return jsonify({"error": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(AuthorizationError)
def handle_authorization_error(error):
    """Handles attempts to write someone else's data."""
    current_app.logger.warning(f"Authorization Error: {error.message}")
    return jsonify({"error": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return jsonify({"error": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(ConsensusError)
def handle_consensus_error(error):
    """Handles matches whose players have not agreed yet."""
    current_app.logger.info(f"Consensus Error: {error.message}")
    body = {"error": error.message}
    if isinstance(error, WinnerMismatchError):
        body["player1Selection"] = error.player1_selection
        body["player2Selection"] = error.player2_selection
    return jsonify(body), error.status_code


@error_handlers_bp.app_errorhandler(PersistenceError)
def handle_persistence_error(error):
    """Handles store failures without exposing their details."""
    current_app.logger.error(f"Persistence Error: {error.message}")
    return jsonify({"error": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return jsonify({"error": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"error": "Not found."}), 404


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify({"error": "An unexpected error occurred."}), 500


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or invalid form submission.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return jsonify({"error": "Your session may have expired. Please try again."}), 400
