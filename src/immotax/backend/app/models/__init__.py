"""Typed request/response models shared across the simulation services.

Engine records live in :mod:`.domain` so the calculators can depend on them
without pulling in the HTTP payload models defined in :mod:`.api`. Inputs are
frozen Pydantic models; derived projection rows are plain frozen dataclasses.
"""

from __future__ import annotations

from .api import (
    InterestScheduleRequest,
    ProjectionRequest,
    TaxSimulationRequest,
    format_validation_error,
    parse_payload,
)
from .domain import (
    Household,
    InvalidRegimeError,
    LoanInterestDetail,
    LoanTerms,
    ProjectionInput,
    ProjectionResult,
    RentalRegime,
    TaxCalculationResult,
    TaxParameters,
    TaxSimulationInput,
    YearlyInterest,
    YearlyProjectionRow,
)

__all__ = [
    "Household",
    "InterestScheduleRequest",
    "InvalidRegimeError",
    "LoanInterestDetail",
    "LoanTerms",
    "ProjectionInput",
    "ProjectionRequest",
    "ProjectionResult",
    "RentalRegime",
    "TaxCalculationResult",
    "TaxParameters",
    "TaxSimulationInput",
    "TaxSimulationRequest",
    "YearlyInterest",
    "YearlyProjectionRow",
    "format_validation_error",
    "parse_payload",
]
