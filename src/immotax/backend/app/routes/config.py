"""Expose the fiscal parameters consumed by the web client.

The client renders the bracket table and pre-fills rates from these
endpoints so that no fiscal constant is duplicated in the browser.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from immotax.backend.app.http import problem_response
from immotax.backend.config.year_config import (
    FiscalYearConfig,
    load_manifest,
    load_year_configuration,
    manifest_entries,
)
from immotax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    return {
        "version": get_project_version(),
        "supported_years": list(manifest.supported_years),
        "default_year": manifest.default_year,
    }


def serialise_tax_configuration(config: FiscalYearConfig) -> dict[str, Any]:
    """Return the bracket table and rates of ``config`` in client form."""

    decote = config.income_tax.decote
    return {
        "year": config.year,
        "label": config.meta.get("label"),
        "tax_brackets": [
            {"min": bracket.lower_bound, "max": bracket.upper_bound, "rate": bracket.rate}
            for bracket in config.brackets
        ],
        "social_security_rate": config.social_levies.rate,
        "abattement_rate": config.salary.abattement_rate,
        "micro_foncier_rate": config.rental.micro_foncier_abattement_rate,
        "decote": decote.model_dump(mode="json") if decote is not None else None,
        "quotient_cap_per_half_share": config.income_tax.quotient_cap_per_half_share,
    }


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return the declared fiscal years with their manifest status."""

    metadata = get_configuration_metadata()
    years = [
        {"year": entry.year, "status": entry.status, "notes_url": entry.notes_url}
        for entry in sorted(manifest_entries(), key=lambda entry: entry.year)
    ]
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/tax")
def get_tax_configuration(year: int) -> tuple[Any, int]:
    """Expose the income tax scale and rental rates for ``year``."""

    try:
        config = load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    return jsonify(serialise_tax_configuration(config)), 200
