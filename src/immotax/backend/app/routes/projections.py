"""REST endpoints for multi-year profitability projections."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from immotax.backend.app.services import build_interest_schedule, run_projection
from immotax.backend.services import build_json_response, parse_json_payload

blueprint = Blueprint("projections", __name__, url_prefix="/api/v1/projections")


@blueprint.post("")
def create_projection() -> tuple[Any, int]:
    """Project yearly cashflow and the break-even year of a property."""

    return build_json_response(run_projection(parse_json_payload(request)))


@blueprint.post("/interests")
def create_interest_schedule() -> tuple[Any, int]:
    """Return the yearly interest paid on each submitted loan."""

    return build_json_response(build_interest_schedule(parse_json_payload(request)))
