"""Unit coverage for ledger-based auto-fill of rental figures."""

from __future__ import annotations

import pytest

from immotax.backend.app.services.autofill import (
    DEFAULT_MANAGEMENT_FEE_PERCENTAGE,
    EmptyLedger,
    LedgerTransaction,
    TransactionLedger,
    is_deductible_charge,
    is_rent,
)


def test_ledger_totals_for_year(ledger: TransactionLedger) -> None:
    data = ledger.fiscal_data_for_year("alice", 2024)

    assert data.rent_collected == pytest.approx(12_000)
    assert data.deductible_charges == pytest.approx(2_000)
    assert data.management_fee_percentage == pytest.approx(8.0)
    assert len(data.transactions) == 4


def test_ledger_ignores_other_years_and_users(ledger: TransactionLedger) -> None:
    assert ledger.fiscal_data_for_year("alice", 2023).rent_collected == pytest.approx(9_000)
    assert ledger.fiscal_data_for_year("bob", 2024).rent_collected == 0


def test_management_fee_is_weighted_by_rent() -> None:
    ledger = TransactionLedger(
        {
            "carol": [
                LedgerTransaction(amount=9000, year=2024, property_id="a", category="loyer"),
                LedgerTransaction(amount=3000, year=2024, property_id="b", category="loyer"),
            ]
        },
        management_fees={"a": 10.0},
    )

    data = ledger.fiscal_data_for_year("carol", 2024)

    expected = (9000 * 10.0 + 3000 * DEFAULT_MANAGEMENT_FEE_PERCENTAGE) / 12000
    assert data.management_fee_percentage == pytest.approx(expected)


def test_default_fee_without_rent() -> None:
    data = TransactionLedger({}).fiscal_data_for_year("dave", 2024)

    assert data.management_fee_percentage == DEFAULT_MANAGEMENT_FEE_PERCENTAGE


def test_empty_ledger_returns_no_figures() -> None:
    data = EmptyLedger().fiscal_data_for_year("anyone", 2024)

    assert data.rent_collected == 0
    assert data.deductible_charges == 0
    assert data.management_fee_percentage is None


@pytest.mark.parametrize(
    ("transaction", "rent", "charge"),
    [
        (LedgerTransaction(amount=800, year=2024, type_name="Loyer mensuel"), True, False),
        (LedgerTransaction(amount=-800, year=2024, category="Loyer"), False, False),
        (LedgerTransaction(amount=350, year=2024, description="Réparation chaudière"), False, True),
        (LedgerTransaction(amount=120, year=2024, category="Assurance", deductible=True), False, True),
        (LedgerTransaction(amount=60, year=2024, category="Divers"), False, False),
    ],
)
def test_transaction_classification(
    transaction: LedgerTransaction, rent: bool, charge: bool
) -> None:
    assert is_rent(transaction) is rent
    assert is_deductible_charge(transaction) is charge
