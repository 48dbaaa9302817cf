"""Pydantic models describing the public API surface."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .domain import Household, LoanTerms

_ModelT = TypeVar("_ModelT", bound=BaseModel)

MAX_HORIZON_YEARS = 100
MAX_LOANS = 20

__all__ = [
    "TaxSimulationRequest",
    "ProjectionRequest",
    "InterestScheduleRequest",
    "format_validation_error",
    "parse_payload",
]


class TaxSimulationRequest(BaseModel):
    """Payload accepted by the tax simulation endpoint.

    Field names follow the JSON contract shared with the web client, hence the
    French aliases.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    gross_salary: float = Field(alias="salaire_brut_annuel", gt=0)
    shares: float = Field(alias="parts_quotient_familial", ge=1)
    household: Household = Field(default=Household.SINGLE, alias="situation_familiale")
    retirement_contribution: float = Field(
        default=0.0, alias="versement_PER_deductible", ge=0
    )
    gross_rent: float = Field(default=0.0, alias="loyers_percus_total", ge=0)
    deductible_charges: float = Field(default=0.0, alias="charges_foncieres_total", ge=0)
    works: float = Field(default=0.0, alias="travaux_deja_effectues", ge=0)
    management_fee_percentage: float | None = Field(
        default=None, alias="pourcentage_gestion", ge=0, le=100
    )
    regime: Any = Field(alias="regime_foncier")
    other_income: float = Field(default=0.0, alias="autres_revenus_imposables", ge=0)
    autofill: bool = Field(default=False, alias="autofill_from_db")
    include_management_fees: bool = Field(
        default=True, alias="inclure_frais_gestion_autofill"
    )
    year: int | None = Field(default=None, alias="annee_parametres")

    @field_validator("household", mode="before")
    @classmethod
    def _parse_household(cls, value: Any) -> Household:
        return Household.parse(value)

    @field_validator(
        "retirement_contribution",
        "gross_rent",
        "deductible_charges",
        "works",
        "other_income",
        mode="before",
    )
    @classmethod
    def _default_missing_amounts(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("autofill", "include_management_fees", mode="before")
    @classmethod
    def _default_missing_flags(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            defaults = {"autofill": False, "include_management_fees": True}
            return defaults.get(info.field_name, False)
        return value


class ProjectionRequest(BaseModel):
    """Payload accepted by the profitability projection endpoint."""

    model_config = ConfigDict(extra="forbid")

    purchase_price: float = Field(ge=0)
    loan_amount: float = Field(default=0.0, ge=0)
    acquisition_costs: float = Field(default=0.0, ge=0)
    annual_rent: float = Field(ge=0)
    annual_charges: float = Field(default=0.0, ge=0)
    interest_per_year: list[float] | None = Field(default=None, max_length=MAX_HORIZON_YEARS)
    loans: list[LoanTerms] = Field(default_factory=list, max_length=MAX_LOANS)
    horizon_years: int | None = Field(default=None, le=MAX_HORIZON_YEARS)
    flat_tax_rate: float | None = Field(default=None, ge=0, le=1)
    start_year: int | None = Field(default=None, ge=1900, le=2200)
    purchase_date: date | None = None
    year: int | None = None

    @model_validator(mode="after")
    def _reject_conflicting_interest_sources(self) -> "ProjectionRequest":
        if self.interest_per_year and self.loans:
            raise ValueError("Provide either 'interest_per_year' or 'loans', not both")
        return self


class InterestScheduleRequest(BaseModel):
    """Payload accepted by the loan interest schedule endpoint."""

    model_config = ConfigDict(extra="forbid")

    loans: list[LoanTerms] = Field(min_length=1, max_length=MAX_LOANS)
    start_year: int = Field(ge=1900, le=2200)
    end_year: int = Field(ge=1900, le=2200)

    @model_validator(mode="after")
    def _validate_range(self) -> "InterestScheduleRequest":
        if self.end_year < self.start_year:
            raise ValueError("end_year cannot precede start_year")
        if self.end_year - self.start_year >= MAX_HORIZON_YEARS:
            raise ValueError(
                f"The interest schedule cannot span more than {MAX_HORIZON_YEARS} years"
            )
        return self


def format_validation_error(error: ValidationError, *, subject: str = "payload") -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid {subject}: {details}"


def parse_payload(
    model: type[_ModelT], payload: Mapping[str, Any] | BaseModel, *, subject: str
) -> _ModelT:
    """Validate ``payload`` against ``model``, raising ``ValueError`` on failure."""

    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="python", by_alias=True)
    if not isinstance(payload, Mapping):
        raise ValueError(f"{subject.capitalize()} must be a mapping")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc, subject=subject)) from exc
