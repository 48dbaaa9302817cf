"""Orchestrate request validation, auto-fill, and the tax simulation.

The simulation service resolves the fiscal year configuration, optionally
pulls recorded rental totals from the ledger, and hands a fully resolved
``TaxSimulationInput`` to the pure calculators. Profiling hooks live here so
the calculators stay free of timing concerns.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from immotax.backend.app.models import (
    RentalRegime,
    TaxCalculationResult,
    TaxSimulationInput,
    TaxSimulationRequest,
    parse_payload,
)
from immotax.backend.config.year_config import (
    FiscalYearConfig,
    resolve_year_configuration,
)
from immotax.backend.services.request_parser import ANONYMOUS_USER

from .autofill import EmptyLedger, RentalLedger
from .calculators import calculate_tax_simulation, round_currency

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("IMMOTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def load_configuration(year: int | None) -> FiscalYearConfig:
    """Return the configuration for ``year``, rejecting undeclared years."""

    try:
        return resolve_year_configuration(year)
    except FileNotFoundError as exc:
        raise ValueError(f"Unsupported tax year {year}") from exc


def resolve_simulation_input(
    request: TaxSimulationRequest,
    config: FiscalYearConfig,
    *,
    ledger: RentalLedger,
    user_id: str = ANONYMOUS_USER,
) -> TaxSimulationInput:
    """Build the engine input, substituting ledger totals when requested."""

    regime = RentalRegime.parse(request.regime)

    gross_rent = request.gross_rent
    deductible_charges = request.deductible_charges
    management_fee_percentage = request.management_fee_percentage

    if request.autofill:
        recorded = ledger.fiscal_data_for_year(user_id, config.year)
        gross_rent = recorded.rent_collected
        deductible_charges = recorded.deductible_charges
        if recorded.management_fee_percentage is not None:
            management_fee_percentage = recorded.management_fee_percentage
        _LOGGER.info(
            "Auto-filled rental figures for %s (%s): %d transaction(s)",
            user_id,
            config.year,
            len(recorded.transactions),
        )

    return TaxSimulationInput(
        year=config.year,
        gross_salary=request.gross_salary,
        shares=request.shares,
        household=request.household,
        retirement_contribution=request.retirement_contribution,
        gross_rent=gross_rent,
        deductible_charges=deductible_charges,
        works=request.works,
        management_fee_percentage=management_fee_percentage,
        include_management_fees=request.include_management_fees,
        regime=regime,
        other_income=request.other_income,
        autofilled=request.autofill,
    )


def serialise_simulation_result(result: TaxCalculationResult) -> dict[str, Any]:
    """Return the client payload for ``result`` with currency rounded."""

    payload = result.model_dump(mode="json", by_alias=True)
    return {
        key: round_currency(value) if isinstance(value, float) else value
        for key, value in payload.items()
    }


def simulate_tax(
    payload: Mapping[str, Any] | TaxSimulationRequest,
    *,
    ledger: RentalLedger | None = None,
    user_id: str = ANONYMOUS_USER,
) -> dict[str, Any]:
    """Validate ``payload``, run the simulation and serialise the result."""

    request_model = parse_payload(TaxSimulationRequest, payload, subject="simulation payload")

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = load_configuration(request_model.year)

    with _profile_section("resolve_input", timings):
        inputs = resolve_simulation_input(
            request_model, config, ledger=ledger or EmptyLedger(), user_id=user_id
        )

    with _profile_section("simulation", timings):
        result = calculate_tax_simulation(inputs, config)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "simulate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return serialise_simulation_result(result)


__all__ = [
    "load_configuration",
    "resolve_simulation_input",
    "serialise_simulation_result",
    "simulate_tax",
]
