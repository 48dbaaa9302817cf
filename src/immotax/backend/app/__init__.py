"""Application factory for the Immotax backend services."""

from __future__ import annotations

import logging
import os
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, HTTPException

from immotax.backend.config.year_config import ConfigurationError

from .http import problem_response
from .models import InvalidRegimeError
from .routes import register_routes
from .routes.config import get_configuration_metadata
from .routes.simulations import LEDGER_EXTENSION
from .services.autofill import EmptyLedger, RentalLedger

_LOGGER = logging.getLogger(__name__)


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip() for origin in raw.split(",") if origin.strip()}


def create_app(ledger: RentalLedger | None = None) -> Flask:
    """Create and configure the Flask application instance.

    ``ledger`` supplies recorded rental transactions to simulations that ask
    for auto-fill; without one, auto-filled figures resolve to zero.
    """

    app = Flask(__name__)
    app.extensions[LEDGER_EXTENSION] = ledger or EmptyLedger()

    allowed_origins = _parse_allowed_origins(os.getenv("IMMOTAX_ALLOWED_ORIGINS"))
    if not allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=1,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type", "X-User-Id"],
    )

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(InvalidRegimeError)
    def handle_invalid_regime(error: InvalidRegimeError):
        return problem_response(
            "invalid_regime", status=400, message=str(error)
        ).to_response()

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(error: ConfigurationError):
        """Fiscal parameters failed validation; nothing can be computed."""

        _LOGGER.error("Invalid fiscal configuration: %s", error)
        return problem_response(
            "configuration_error",
            status=500,
            message="Fiscal configuration is invalid",
        ).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Gracefully surface domain validation errors to clients."""

        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error

        _LOGGER.exception("Unhandled error while serving request")
        return problem_response(
            "internal_error",
            status=500,
            message="An unexpected error occurred",
        ).to_response()

    return app
