"""Pydantic models describing the fiscal year configuration schema."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _ensure_rate(value: float, label: str) -> None:
    if value < 0 or value > 1:
        raise ConfigurationError(f"{label} must be between 0 and 1")


class TaxBracket(ImmutableModel):
    """One marginal-rate slice of the progressive income tax scale.

    ``lower_bound`` is inclusive and ``upper_bound`` exclusive; the top bracket
    leaves ``upper_bound`` unset. The JSON and YAML representations use the
    ``min``/``max`` keys exposed by the configuration endpoint.
    """

    lower_bound: float = Field(alias="min")
    upper_bound: float | None = Field(default=None, alias="max")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        _ensure_rate(self.rate, "Tax rates")
        if self.lower_bound < 0:
            raise ConfigurationError("Lower bounds must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ConfigurationError("Upper bounds must exceed their lower bound")
        return self


def ensure_contiguous_brackets(brackets: Sequence[TaxBracket]) -> None:
    """Raise :class:`ConfigurationError` unless ``brackets`` form a full scale.

    The schedule must start at zero, each bracket must begin where the
    previous one ends, and only the final bracket may be open-ended.
    """

    if not brackets:
        raise ConfigurationError("At least one tax bracket must be defined")

    if brackets[0].lower_bound != 0:
        raise ConfigurationError("The first tax bracket must start at 0")

    for previous, current in zip(brackets, brackets[1:]):
        if previous.upper_bound is None:
            raise ConfigurationError("Only the final tax bracket may be open-ended")
        if current.lower_bound < previous.upper_bound:
            raise ConfigurationError(
                f"Tax brackets overlap at {current.lower_bound:g}"
            )
        if current.lower_bound > previous.upper_bound:
            raise ConfigurationError(
                f"Gap between tax brackets at {previous.upper_bound:g}"
            )

    if brackets[-1].upper_bound is not None:
        raise ConfigurationError("Final tax bracket must have an open upper bound")


class DecoteBand(ImmutableModel):
    """Décote parameters for one household type."""

    threshold: float
    flat_amount: float

    @model_validator(mode="after")
    def _validate_amounts(self) -> DecoteBand:
        if self.threshold < 0:
            raise ConfigurationError("Décote thresholds must be non-negative")
        if self.flat_amount < 0:
            raise ConfigurationError("Décote flat amounts must be non-negative")
        return self


class DecoteConfig(ImmutableModel):
    """Reduction granted to households whose gross income tax is small."""

    rate: float
    single: DecoteBand
    couple: DecoteBand

    @model_validator(mode="after")
    def _validate_rate(self) -> DecoteConfig:
        _ensure_rate(self.rate, "Décote rate")
        return self

    def band_for(self, household: str) -> DecoteBand:
        if household == "couple":
            return self.couple
        return self.single


class IncomeTaxConfig(ImmutableModel):
    """Progressive scale and décote applied to household income.

    ``quotient_cap_per_half_share`` limits the tax advantage of each half
    share above the household base (one share when single, two as a couple).
    """

    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    decote: DecoteConfig | None = None
    quotient_cap_per_half_share: float | None = None

    @field_validator("brackets", mode="before")
    @classmethod
    def _coerce_brackets(cls, value: Any) -> Sequence[Any]:
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        raise ConfigurationError("'tax_brackets' must be a list of brackets")

    @model_validator(mode="after")
    def _validate_scale(self) -> IncomeTaxConfig:
        ensure_contiguous_brackets(self.brackets)
        cap = self.quotient_cap_per_half_share
        if cap is not None and cap < 0:
            raise ConfigurationError("The quotient cap per half share must be non-negative")
        return self


class SalaryConfig(ImmutableModel):
    """Flat professional-expense deduction applied to salaries."""

    abattement_rate: float

    @model_validator(mode="after")
    def _validate_rate(self) -> SalaryConfig:
        _ensure_rate(self.abattement_rate, "Salary abattement rate")
        return self


class RentalConfig(ImmutableModel):
    """Parameters of the rental income regimes."""

    micro_foncier_abattement_rate: float
    default_management_fee_percentage: float = 0.0

    @model_validator(mode="after")
    def _validate_values(self) -> RentalConfig:
        _ensure_rate(self.micro_foncier_abattement_rate, "Micro-foncier abattement rate")
        if not 0 <= self.default_management_fee_percentage <= 100:
            raise ConfigurationError(
                "Default management fee percentage must be between 0 and 100"
            )
        return self


class SocialLevyConfig(ImmutableModel):
    """Social levies (prélèvements sociaux) charged on rental income."""

    rate: float

    @model_validator(mode="after")
    def _validate_rate(self) -> SocialLevyConfig:
        _ensure_rate(self.rate, "Social levy rate")
        return self


class ProjectionConfig(ImmutableModel):
    """Defaults for the multi-year profitability projection."""

    default_horizon_years: int = 20
    default_flat_tax_rate: float = 0.30

    @model_validator(mode="after")
    def _validate_values(self) -> ProjectionConfig:
        if self.default_horizon_years <= 0:
            raise ConfigurationError("Default projection horizon must be positive")
        _ensure_rate(self.default_flat_tax_rate, "Default projection tax rate")
        return self


class FiscalYearConfig(ImmutableModel):
    """Structured representation of one fiscal year's parameters."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    income_tax: IncomeTaxConfig
    salary: SalaryConfig
    rental: RentalConfig
    social_levies: SocialLevyConfig
    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("income_tax", "salary", "rental", "social_levies"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")

        return prepared

    @property
    def brackets(self) -> Sequence[TaxBracket]:
        return self.income_tax.brackets


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported fiscal year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available fiscal year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> Self:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))

    @computed_field
    @property
    def default_year(self) -> int | None:
        active = [entry.year for entry in self.years if entry.status == "active"]
        return max(active) if active else None


__all__ = [
    "ConfigurationError",
    "DecoteBand",
    "DecoteConfig",
    "FiscalYearConfig",
    "ImmutableModel",
    "IncomeTaxConfig",
    "ProjectionConfig",
    "RentalConfig",
    "SalaryConfig",
    "SocialLevyConfig",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "ensure_contiguous_brackets",
]
