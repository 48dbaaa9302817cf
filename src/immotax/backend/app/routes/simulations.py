"""REST endpoints for single-year tax simulations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, jsonify, request

from immotax.backend.app.services import simulate_tax
from immotax.backend.config.year_config import resolve_year_configuration
from immotax.backend.services import (
    build_json_response,
    parse_json_payload,
    resolve_user_id,
)

from .config import serialise_tax_configuration

blueprint = Blueprint("simulations", __name__, url_prefix="/api/v1/tax")

LEDGER_EXTENSION = "immotax.ledger"


@blueprint.post("/simulate")
def create_simulation() -> tuple[Any, int]:
    """Simulate the household tax with and without the rental income."""

    payload = parse_json_payload(request)
    result = simulate_tax(
        payload,
        ledger=current_app.extensions.get(LEDGER_EXTENSION),
        user_id=resolve_user_id(request),
    )
    return build_json_response(result)


@blueprint.get("/config")
def get_default_tax_configuration() -> tuple[Any, int]:
    """Expose the tax parameters of the default fiscal year."""

    return jsonify(serialise_tax_configuration(resolve_year_configuration())), 200
