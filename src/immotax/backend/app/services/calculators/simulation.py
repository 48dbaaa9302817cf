"""Single-year comparison of household tax with and without rental income."""

from __future__ import annotations

from immotax.backend.app.models import (
    TaxCalculationResult,
    TaxParameters,
    TaxSimulationInput,
)
from immotax.backend.config.year_config import DecoteConfig, FiscalYearConfig

from .income_tax import calculate_income_tax
from .rental import (
    calculate_management_fees,
    calculate_social_levy,
    resolve_net_rental_income,
)


def _effective_rate(tax: float, income: float) -> float:
    return tax / income * 100 if income > 0 else 0.0


def _tax_parameters(decote: DecoteConfig | None) -> TaxParameters | None:
    if decote is None:
        return None
    return TaxParameters(
        single_threshold=decote.single.threshold,
        couple_threshold=decote.couple.threshold,
        single_flat_amount=decote.single.flat_amount,
        couple_flat_amount=decote.couple.flat_amount,
        rate=decote.rate,
    )


def calculate_tax_simulation(
    inputs: TaxSimulationInput, config: FiscalYearConfig
) -> TaxCalculationResult:
    """Compute the tax cost attributable to the rental activity.

    The household income is taxed twice on the progressive scale, once with
    the net rental income folded in and once without; social levies are only
    due in the first scenario. The difference is the tax cost of renting.
    """

    abattement = inputs.gross_salary * config.salary.abattement_rate
    taxable_salary = max(
        inputs.gross_salary - abattement - inputs.retirement_contribution, 0.0
    )

    management_fees = (
        calculate_management_fees(inputs.gross_rent, inputs.management_fee_percentage)
        if inputs.include_management_fees
        else 0.0
    )
    charges = inputs.deductible_charges + management_fees

    net_rental_income = resolve_net_rental_income(
        inputs.gross_rent,
        charges,
        inputs.works,
        inputs.regime,
        config.rental.micro_foncier_abattement_rate,
    )

    income_without_rental = taxable_salary + inputs.other_income
    income_with_rental = income_without_rental + net_rental_income

    decote = config.income_tax.decote
    quotient_cap = config.income_tax.quotient_cap_per_half_share
    without_rental = calculate_income_tax(
        income_without_rental,
        inputs.shares,
        inputs.household,
        config.brackets,
        decote,
        quotient_cap,
    )
    with_rental = calculate_income_tax(
        income_with_rental,
        inputs.shares,
        inputs.household,
        config.brackets,
        decote,
        quotient_cap,
    )

    social_levy = calculate_social_levy(net_rental_income, config.social_levies.rate)

    total_without_rental = without_rental.net_tax
    total_with_rental = with_rental.net_tax + social_levy
    tax_delta = total_with_rental - total_without_rental

    total_charges = charges + inputs.works
    gross_profit = inputs.gross_rent - total_charges

    return TaxCalculationResult(
        year=config.year,
        gross_salary=inputs.gross_salary,
        taxable_salary=taxable_salary,
        net_rental_income=net_rental_income,
        gross_rent=inputs.gross_rent,
        deductible_charges=inputs.deductible_charges,
        management_fees=management_fees,
        works=inputs.works,
        retirement_contribution=inputs.retirement_contribution,
        management_fee_percentage=inputs.management_fee_percentage,
        regime=inputs.regime,
        autofilled=inputs.autofilled,
        include_management_fees=inputs.include_management_fees,
        gross_tax_without_rental=without_rental.gross_tax,
        gross_tax_with_rental=with_rental.gross_tax,
        decote_without_rental=without_rental.decote,
        decote_with_rental=with_rental.decote,
        tax_without_rental=without_rental.net_tax,
        tax_with_rental=with_rental.net_tax,
        social_levy=social_levy,
        total_without_rental=total_without_rental,
        total_with_rental=total_with_rental,
        tax_delta=tax_delta,
        net_profit=gross_profit - tax_delta,
        gross_profit=gross_profit,
        total_charges=total_charges,
        effective_rate_without_rental=_effective_rate(
            without_rental.net_tax, income_without_rental
        ),
        effective_rate_with_rental=_effective_rate(
            with_rental.net_tax, income_with_rental
        ),
        tax_params=_tax_parameters(decote),
    )


__all__ = ["calculate_tax_simulation"]
