"""Profitability projection and loan interest schedules for a property."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict
from datetime import date
from typing import Any

from immotax.backend.app.models import (
    InterestScheduleRequest,
    ProjectionInput,
    ProjectionRequest,
    ProjectionResult,
    YearlyInterest,
    parse_payload,
)

from .calculators import (
    compute_yearly_interests,
    interest_schedule,
    project_profitability,
    round_currency,
)
from .simulation_service import load_configuration

_LOGGER = logging.getLogger(__name__)


def build_projection_input(
    request: ProjectionRequest, *, today: date | None = None
) -> ProjectionInput:
    """Fill projection defaults from the fiscal year and derive loan interest."""

    config = load_configuration(request.year)
    horizon = (
        request.horizon_years
        if request.horizon_years is not None
        else config.projection.default_horizon_years
    )
    flat_tax_rate = (
        request.flat_tax_rate
        if request.flat_tax_rate is not None
        else config.projection.default_flat_tax_rate
    )

    inputs = ProjectionInput(
        purchase_price=request.purchase_price,
        loan_amount=request.loan_amount,
        acquisition_costs=request.acquisition_costs,
        annual_rent=request.annual_rent,
        annual_charges=request.annual_charges,
        interest_per_year=tuple(request.interest_per_year or ()),
        horizon_years=horizon,
        flat_tax_rate=flat_tax_rate,
        start_year=request.start_year,
        purchase_date=request.purchase_date,
    )

    if request.loans:
        start_year = inputs.resolve_start_year(today)
        schedule = interest_schedule(request.loans, start_year, horizon)
        inputs = inputs.model_copy(update={"interest_per_year": schedule})
        _LOGGER.debug(
            "Derived %d year(s) of interest from %d loan(s)", len(schedule), len(request.loans)
        )

    return inputs


def serialise_projection(result: ProjectionResult, inputs: ProjectionInput) -> dict[str, Any]:
    rows = [
        {
            key: round_currency(value) if isinstance(value, float) else value
            for key, value in asdict(row).items()
        }
        for row in result.rows
    ]
    return {
        "rows": rows,
        "break_even_year": result.break_even_year,
        "down_payment": round_currency(result.down_payment),
        "initial_outlay": round_currency(result.initial_outlay),
        "horizon_years": inputs.horizon_years,
        "flat_tax_rate": inputs.flat_tax_rate,
    }


def run_projection(
    payload: Mapping[str, Any] | ProjectionRequest, *, today: date | None = None
) -> dict[str, Any]:
    """Validate ``payload`` and return the serialised projection table."""

    request_model = parse_payload(ProjectionRequest, payload, subject="projection payload")
    inputs = build_projection_input(request_model, today=today)
    result = project_profitability(inputs, today=today)
    return serialise_projection(result, inputs)


def _serialise_interest_row(row: YearlyInterest) -> dict[str, Any]:
    return {
        "year": row.year,
        "total_interest": round_currency(row.total_interest),
        "details": [
            {
                "loan_id": detail.loan_id,
                "loan_name": detail.loan_name,
                "repayment_type": detail.repayment_type,
                "interest": round_currency(detail.interest),
                "amount": round_currency(detail.amount),
            }
            for detail in row.details
        ],
    }


def build_interest_schedule(
    payload: Mapping[str, Any] | InterestScheduleRequest,
) -> dict[str, Any]:
    """Validate ``payload`` and return yearly interest per loan."""

    request_model = parse_payload(
        InterestScheduleRequest, payload, subject="interest schedule payload"
    )
    rows = compute_yearly_interests(
        request_model.loans, request_model.start_year, request_model.end_year
    )
    return {"years": [_serialise_interest_row(row) for row in rows]}


__all__ = [
    "build_interest_schedule",
    "build_projection_input",
    "run_projection",
    "serialise_projection",
]
