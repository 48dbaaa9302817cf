"""Unit coverage for the progressive scale, the quotient cap and the décote."""

from __future__ import annotations

import pytest

from immotax.backend.app.models import Household
from immotax.backend.app.services.calculators import (
    calculate_decote,
    calculate_income_tax,
    calculate_progressive_tax,
    cap_quotient_benefit,
)
from immotax.backend.config.year_config import load_year_configuration


@pytest.fixture()
def config_2024():
    return load_year_configuration(2024)


def test_progressive_tax_on_single_share(config_2024) -> None:
    tax = calculate_progressive_tax(36000, 1, config_2024.brackets)

    assert tax == pytest.approx(4086.23)


@pytest.mark.parametrize("income", [0, -1500])
def test_non_positive_income_is_not_taxed(config_2024, income: float) -> None:
    assert calculate_progressive_tax(income, 1, config_2024.brackets) == 0


def test_income_within_zero_rate_bracket_is_not_taxed(config_2024) -> None:
    assert calculate_progressive_tax(11294, 1, config_2024.brackets) == 0


def test_tax_never_decreases_with_income(config_2024) -> None:
    incomes = range(0, 250_001, 2_500)
    taxes = [calculate_progressive_tax(income, 1.5, config_2024.brackets) for income in incomes]

    assert taxes == sorted(taxes)


def test_family_quotient_scales_per_share_tax(config_2024) -> None:
    """Doubling income and shares together doubles the tax."""

    single = calculate_progressive_tax(27000, 1, config_2024.brackets)
    couple = calculate_progressive_tax(54000, 2, config_2024.brackets)

    assert couple == pytest.approx(2 * single)
    assert couple == pytest.approx(3455.32)


def test_top_bracket_is_open_ended(config_2024) -> None:
    below = calculate_progressive_tax(200_000, 1, config_2024.brackets)
    above = calculate_progressive_tax(201_000, 1, config_2024.brackets)

    assert above - below == pytest.approx(450)


def test_calculation_is_repeatable(config_2024) -> None:
    first = calculate_progressive_tax(52_345.67, 2.5, config_2024.brackets)
    second = calculate_progressive_tax(52_345.67, 2.5, config_2024.brackets)

    assert first == second


@pytest.mark.parametrize("shares", [0, 0.5])
def test_shares_below_one_are_rejected(config_2024, shares: float) -> None:
    with pytest.raises(ValueError, match="at least 1"):
        calculate_progressive_tax(30000, shares, config_2024.brackets)


def test_decote_reduces_small_tax(config_2024) -> None:
    decote = calculate_decote(737.66, Household.SINGLE, config_2024.income_tax.decote)

    assert decote == pytest.approx(889 - 0.4525 * 737.66)


def test_decote_never_exceeds_gross_tax(config_2024) -> None:
    decote = calculate_decote(300, Household.SINGLE, config_2024.income_tax.decote)

    assert decote == pytest.approx(300)


def test_decote_uses_couple_threshold(config_2024) -> None:
    decote_config = config_2024.income_tax.decote

    assert calculate_decote(2500, Household.SINGLE, decote_config) == 0
    assert calculate_decote(2500, Household.COUPLE, decote_config) == pytest.approx(
        1470 - 0.4525 * 2500
    )


def test_decote_is_skipped_without_configuration() -> None:
    assert calculate_decote(500, Household.SINGLE, None) == 0


def test_income_tax_breakdown_combines_scale_and_decote(config_2024) -> None:
    breakdown = calculate_income_tax(
        18000,
        1,
        Household.SINGLE,
        config_2024.brackets,
        config_2024.income_tax.decote,
    )

    assert breakdown.gross_tax == pytest.approx(737.66)
    assert breakdown.decote == pytest.approx(555.2089)
    assert breakdown.net_tax == pytest.approx(182.4511)


@pytest.mark.parametrize("shares", [1.5, 2, 2.5, 3, 4])
@pytest.mark.parametrize("income", range(0, 300_001, 7_500))
def test_more_shares_never_increase_tax(config_2024, income: int, shares: float) -> None:
    """For a fixed income, adding quotient shares cannot raise the tax."""

    single_share = calculate_progressive_tax(income, 1, config_2024.brackets)
    with_shares = calculate_progressive_tax(income, shares, config_2024.brackets)
    fewer_shares = calculate_progressive_tax(income, shares - 0.5, config_2024.brackets)

    assert with_shares <= single_share + 1e-9
    assert with_shares <= fewer_shares + 1e-9


def test_quotient_benefit_is_capped_for_large_households(config_2024) -> None:
    cap = config_2024.income_tax.quotient_cap_per_half_share
    uncapped = calculate_progressive_tax(150_000, 3, config_2024.brackets)

    breakdown = calculate_income_tax(
        150_000,
        3,
        Household.COUPLE,
        config_2024.brackets,
        config_2024.income_tax.decote,
        cap,
    )

    # Two shares: 31 572.46; the third share may save at most 2 × 1 759.
    assert uncapped == pytest.approx(24_858.69)
    assert breakdown.gross_tax == pytest.approx(31_572.46 - 2 * 1_759)
    assert breakdown.decote == 0


def test_quotient_cap_counts_half_shares_above_single_base(config_2024) -> None:
    capped = cap_quotient_benefit(
        calculate_progressive_tax(150_000, 3, config_2024.brackets),
        150_000,
        3,
        Household.SINGLE,
        config_2024.brackets,
        1_759,
    )

    reference = calculate_progressive_tax(150_000, 1, config_2024.brackets)
    assert reference == pytest.approx(45_728.72)
    assert capped == pytest.approx(45_728.72 - 4 * 1_759)


def test_quotient_cap_leaves_modest_benefit_untouched(config_2024) -> None:
    breakdown = calculate_income_tax(
        54_000,
        3,
        Household.COUPLE,
        config_2024.brackets,
        None,
        config_2024.income_tax.quotient_cap_per_half_share,
    )

    assert breakdown.gross_tax == pytest.approx(2_212.98)


@pytest.mark.parametrize(
    ("household", "shares"),
    [(Household.SINGLE, 1), (Household.COUPLE, 2), (Household.COUPLE, 1.5)],
)
def test_quotient_cap_ignores_base_shares(
    config_2024, household: Household, shares: float
) -> None:
    tax = calculate_progressive_tax(150_000, shares, config_2024.brackets)

    assert cap_quotient_benefit(
        tax, 150_000, shares, household, config_2024.brackets, 1_759
    ) == tax


def test_quotient_cap_is_optional(config_2024) -> None:
    tax = calculate_progressive_tax(150_000, 3, config_2024.brackets)

    assert cap_quotient_benefit(
        tax, 150_000, 3, Household.COUPLE, config_2024.brackets, None
    ) == tax
