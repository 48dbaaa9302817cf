"""Engine inputs and results shared by the calculators and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "Household",
    "InvalidRegimeError",
    "LoanInterestDetail",
    "LoanTerms",
    "ProjectionInput",
    "ProjectionResult",
    "RentalRegime",
    "TaxCalculationResult",
    "TaxParameters",
    "TaxSimulationInput",
    "YearlyInterest",
    "YearlyProjectionRow",
]

MAX_LOAN_YEARS = 50


class InvalidRegimeError(ValueError):
    """Raised when a rental regime selector is neither flat nor itemized."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Unknown rental regime {value!r}; expected 'micro' (flat) or 'reel' (itemized)"
        )
        self.value = value


class RentalRegime(str, Enum):
    """Rental income regimes: micro-foncier (flat) or régime réel (itemized)."""

    FLAT = "micro"
    ITEMIZED = "reel"

    @classmethod
    def parse(cls, value: Any) -> RentalRegime:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            regime = _REGIME_ALIASES.get(value.strip().lower())
            if regime is not None:
                return regime
        raise InvalidRegimeError(value)


_REGIME_ALIASES = {
    "micro": RentalRegime.FLAT,
    "micro-foncier": RentalRegime.FLAT,
    "micro_foncier": RentalRegime.FLAT,
    "flat": RentalRegime.FLAT,
    "reel": RentalRegime.ITEMIZED,
    "réel": RentalRegime.ITEMIZED,
    "itemized": RentalRegime.ITEMIZED,
}


class Household(str, Enum):
    """Household type, which selects the décote parameters."""

    SINGLE = "single"
    COUPLE = "couple"

    @classmethod
    def parse(cls, value: Any) -> Household:
        if value is None:
            return cls.SINGLE
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower()
        if normalised in {"single", "celibataire", "célibataire"}:
            return cls.SINGLE
        if normalised in {"couple", "marie", "marié", "pacse", "pacsé"}:
            return cls.COUPLE
        raise ValueError(f"Unknown household type {value!r}")


class TaxSimulationInput(BaseModel):
    """Validated and resolved input of a single-year simulation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    gross_salary: float = Field(ge=0)
    shares: float = Field(ge=1)
    household: Household = Household.SINGLE
    retirement_contribution: float = Field(default=0.0, ge=0)
    gross_rent: float = Field(default=0.0, ge=0)
    deductible_charges: float = Field(default=0.0, ge=0)
    works: float = Field(default=0.0, ge=0)
    management_fee_percentage: float | None = Field(default=None, ge=0, le=100)
    include_management_fees: bool = True
    regime: RentalRegime
    other_income: float = Field(default=0.0, ge=0)
    autofilled: bool = False


class TaxParameters(BaseModel):
    """Décote parameters echoed back with a simulation result."""

    model_config = ConfigDict(frozen=True)

    single_threshold: float = Field(serialization_alias="seuilCelibataire")
    couple_threshold: float = Field(serialization_alias="seuilCouple")
    single_flat_amount: float = Field(serialization_alias="forfaitCelibataire")
    couple_flat_amount: float = Field(serialization_alias="forfaitCouple")
    rate: float = Field(serialization_alias="taux")


class TaxCalculationResult(BaseModel):
    """Outcome of a single-year simulation, unrounded.

    Serialising with ``by_alias=True`` yields the keys expected by the web
    client.
    """

    model_config = ConfigDict(frozen=True)

    year: int = Field(serialization_alias="annee_parametres")
    gross_salary: float = Field(serialization_alias="salaire_brut_annuel")
    taxable_salary: float = Field(serialization_alias="salaire_imposable")
    net_rental_income: float = Field(serialization_alias="revenu_foncier_net")
    gross_rent: float = Field(serialization_alias="loyers_percus_total")
    deductible_charges: float = Field(serialization_alias="charges_foncieres_total")
    management_fees: float = Field(serialization_alias="frais_gestion")
    works: float = Field(serialization_alias="travaux_deja_effectues")
    retirement_contribution: float = Field(serialization_alias="versement_PER_deductible")
    management_fee_percentage: float | None = Field(
        default=None, serialization_alias="pourcentage_gestion"
    )
    regime: RentalRegime = Field(serialization_alias="regime_foncier")
    autofilled: bool = Field(serialization_alias="autofill_from_db")
    include_management_fees: bool = Field(
        serialization_alias="inclure_frais_gestion_autofill"
    )
    gross_tax_without_rental: float = Field(serialization_alias="IR_brut_sans_foncier")
    gross_tax_with_rental: float = Field(serialization_alias="IR_brut_avec_foncier")
    decote_without_rental: float = Field(serialization_alias="decote_sans_foncier")
    decote_with_rental: float = Field(serialization_alias="decote_avec_foncier")
    tax_without_rental: float = Field(serialization_alias="IR_sans_foncier")
    tax_with_rental: float = Field(serialization_alias="IR_avec_foncier")
    social_levy: float = Field(serialization_alias="PS_foncier")
    total_without_rental: float = Field(serialization_alias="total_sans_foncier")
    total_with_rental: float = Field(serialization_alias="total_avec_foncier")
    tax_delta: float = Field(serialization_alias="delta_impot")
    net_profit: float = Field(serialization_alias="benefice_net")
    gross_profit: float = Field(serialization_alias="benefice_brut")
    total_charges: float = Field(serialization_alias="total_charges")
    effective_rate_without_rental: float = Field(
        serialization_alias="taux_effectif_sans_foncier"
    )
    effective_rate_with_rental: float = Field(
        serialization_alias="taux_effectif_avec_foncier"
    )
    tax_params: TaxParameters | None = None


class ProjectionInput(BaseModel):
    """Inputs of the multi-year profitability projection."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    purchase_price: float = Field(ge=0)
    loan_amount: float = Field(default=0.0, ge=0)
    acquisition_costs: float = Field(default=0.0, ge=0)
    annual_rent: float = Field(ge=0)
    annual_charges: float = Field(default=0.0, ge=0)
    interest_per_year: tuple[float, ...] = ()
    horizon_years: int
    flat_tax_rate: float = Field(ge=0, le=1)
    start_year: int | None = None
    purchase_date: date | None = None

    @property
    def down_payment(self) -> float:
        return max(0.0, self.purchase_price - self.loan_amount)

    def resolve_start_year(self, today: date | None = None) -> int:
        if self.start_year is not None:
            return self.start_year
        if self.purchase_date is not None:
            return self.purchase_date.year
        return (today or date.today()).year


@dataclass(frozen=True)
class YearlyProjectionRow:
    """One year of the profitability table."""

    year: int
    annual_rent: float
    annual_charges: float
    interest: float
    net_result: float
    tax: float
    cashflow: float
    cumulative_cashflow: float


@dataclass(frozen=True)
class ProjectionResult:
    """Projection rows plus the first year with a positive cumulative cashflow."""

    rows: tuple[YearlyProjectionRow, ...]
    break_even_year: int | None
    down_payment: float
    initial_outlay: float


class LoanTerms(BaseModel):
    """A property loan as needed to derive its yearly interest."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str | None = None
    name: str = ""
    amount: float = Field(gt=0)
    annual_rate: float = Field(ge=0, le=1)
    start_date: date
    end_date: date
    repayment_type: Literal["amortizing", "in_fine"] = "amortizing"
    amortization_profile: Literal["annuity", "constant_principal"] = "annuity"
    monthly_payment: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _validate_dates(self) -> LoanTerms:
        if self.end_date < self.start_date:
            raise ValueError("Loan end_date cannot precede start_date")
        if self.total_months > MAX_LOAN_YEARS * 12:
            raise ValueError(f"Loans cannot run for more than {MAX_LOAN_YEARS} years")
        return self

    @property
    def total_months(self) -> int:
        return (
            (self.end_date.year - self.start_date.year) * 12
            + (self.end_date.month - self.start_date.month)
            + 1
        )


@dataclass(frozen=True)
class LoanInterestDetail:
    loan_id: str | None
    loan_name: str
    repayment_type: str
    interest: float
    amount: float


@dataclass(frozen=True)
class YearlyInterest:
    year: int
    total_interest: float
    details: tuple[LoanInterestDetail, ...] = field(default_factory=tuple)
