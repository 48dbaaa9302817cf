"""Utilities for validating fiscal year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Iterable, Sequence

from .year_config import (
    ConfigurationError,
    DecoteConfig,
    FiscalYearConfig,
    TaxBracket,
    TaxYearManifestEntry,
    available_years,
    ensure_contiguous_brackets,
    load_year_configuration,
    manifest_entries,
)

_VALID_STATUSES = {"active", "draft", "archived"}


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rate(scope: str, label: str, value: float) -> list[str]:
    if value < 0 or value > 1:
        return [_format_scope(scope, f"{label} {value} must be between 0 and 1")]
    return []


def _validate_brackets(brackets: Sequence[TaxBracket]) -> list[str]:
    errors: list[str] = []
    scope = "income_tax.tax_brackets"

    try:
        ensure_contiguous_brackets(brackets)
    except ConfigurationError as error:
        errors.append(_format_scope(scope, str(error)))

    for index, bracket in enumerate(brackets):
        errors.extend(_validate_rate(scope, f"bracket {index} rate", bracket.rate))

    rates = [bracket.rate for bracket in brackets]
    if rates != sorted(rates):
        errors.append(_format_scope(scope, "marginal rates should not decrease"))

    if brackets and brackets[0].rate != 0:
        errors.append(
            _format_scope(scope, "the first bracket is expected to be taxed at 0%")
        )

    return errors


def _validate_decote(decote: DecoteConfig | None) -> list[str]:
    if decote is None:
        return []

    scope = "income_tax.decote"
    errors = _validate_rate(scope, "rate", decote.rate)

    for label, band in (("single", decote.single), ("couple", decote.couple)):
        if band.flat_amount > band.threshold:
            errors.append(
                _format_scope(
                    f"{scope}.{label}",
                    "flat amount cannot exceed the threshold",
                )
            )

    if decote.couple.threshold < decote.single.threshold:
        errors.append(
            _format_scope(scope, "couple threshold should not be below the single threshold")
        )

    return errors


def _validate_manifest(entries: Iterable[TaxYearManifestEntry]) -> list[str]:
    errors: list[str] = []
    for entry in entries:
        scope = f"manifest.{entry.year}"
        if entry.status not in _VALID_STATUSES:
            errors.append(
                _format_scope(scope, f"status '{entry.status}' is not recognised")
            )
        if entry.notes_url and not entry.notes_url.startswith(("http://", "https://")):
            errors.append(_format_scope(scope, "notes URL must be absolute"))
    return errors


def validate_year_configuration(config: FiscalYearConfig) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_brackets(config.income_tax.brackets))
    errors.extend(_validate_decote(config.income_tax.decote))
    errors.extend(
        _validate_rate("salary", "abattement rate", config.salary.abattement_rate)
    )
    errors.extend(
        _validate_rate(
            "rental",
            "micro-foncier abattement rate",
            config.rental.micro_foncier_abattement_rate,
        )
    )
    errors.extend(_validate_rate("social_levies", "rate", config.social_levies.rate))
    errors.extend(
        _validate_rate(
            "projection",
            "default flat tax rate",
            config.projection.default_flat_tax_rate,
        )
    )

    if not config.meta.get("label"):
        errors.append(_format_scope("meta", "a display label should be provided"))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured fiscal years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    manifest_issues = _validate_manifest(manifest_entries())
    if manifest_issues:
        exit_code = 1
        print(f"[manifest] {len(manifest_issues)} issue(s) detected:")
        for issue in manifest_issues:
            print(f"  - {issue}")

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
