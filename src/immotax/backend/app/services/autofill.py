"""Resolve rental figures from recorded transactions before simulating.

Auto-fill is a pre-processing step: the ledger is consulted to build the
simulation input, and the pure calculators never see the data source.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

_LOGGER = logging.getLogger(__name__)

DEFAULT_MANAGEMENT_FEE_PERCENTAGE = 6.0

_RENT_KEYWORDS = ("loyer", "revenu", "mensuel")
_CHARGE_KEYWORDS = ("charge", "travaux", "entretien", "réparation", "reparation", "frais")


@dataclass(frozen=True)
class LedgerTransaction:
    """A recorded property transaction as stored by the portfolio manager."""

    amount: float
    year: int
    property_id: str | None = None
    description: str = ""
    category: str = ""
    type_name: str = ""
    deductible: bool = False


@dataclass(frozen=True)
class FiscalData:
    """Rental totals recorded for one user and fiscal year."""

    rent_collected: float = 0.0
    deductible_charges: float = 0.0
    management_fee_percentage: float | None = None
    transactions: tuple[LedgerTransaction, ...] = field(default_factory=tuple)


class RentalLedger(Protocol):
    """Data-access collaborator supplying recorded rental totals."""

    def fiscal_data_for_year(self, user_id: str, year: int) -> FiscalData:
        ...


class EmptyLedger:
    """Ledger used when no transaction store is configured."""

    def fiscal_data_for_year(self, user_id: str, year: int) -> FiscalData:
        return FiscalData()


def _mentions(transaction: LedgerTransaction, keywords: Iterable[str]) -> bool:
    haystacks = (
        transaction.category.lower(),
        transaction.type_name.lower(),
        transaction.description.lower(),
    )
    return any(keyword in text for text in haystacks for keyword in keywords)


def is_rent(transaction: LedgerTransaction) -> bool:
    return transaction.amount > 0 and _mentions(transaction, _RENT_KEYWORDS)


def is_deductible_charge(transaction: LedgerTransaction) -> bool:
    if transaction.amount <= 0 or is_rent(transaction):
        return False
    return transaction.deductible or _mentions(transaction, _CHARGE_KEYWORDS)


class TransactionLedger:
    """In-memory ledger classifying stored transactions into rent and charges.

    ``management_fees`` maps a property identifier to the percentage of rent
    its agency charges; properties without an entry use the 6% default.
    """

    def __init__(
        self,
        transactions: Mapping[str, Iterable[LedgerTransaction]],
        management_fees: Mapping[str, float] | None = None,
    ) -> None:
        self._transactions = {
            user_id: tuple(entries) for user_id, entries in transactions.items()
        }
        self._management_fees = dict(management_fees or {})

    def _fee_for(self, property_id: str | None) -> float:
        return self._management_fees.get(property_id, DEFAULT_MANAGEMENT_FEE_PERCENTAGE)

    def fiscal_data_for_year(self, user_id: str, year: int) -> FiscalData:
        entries = [
            entry for entry in self._transactions.get(user_id, ()) if entry.year == year
        ]

        rent_by_property: dict[str | None, float] = defaultdict(float)
        charges = 0.0
        retained: list[LedgerTransaction] = []

        for entry in entries:
            if is_rent(entry):
                rent_by_property[entry.property_id] += entry.amount
                retained.append(entry)
            elif is_deductible_charge(entry):
                charges += entry.amount
                retained.append(entry)

        rent = sum(rent_by_property.values())
        if rent > 0:
            weighted = sum(
                amount * self._fee_for(property_id)
                for property_id, amount in rent_by_property.items()
            )
            percentage = weighted / rent
        else:
            percentage = DEFAULT_MANAGEMENT_FEE_PERCENTAGE

        _LOGGER.debug(
            "Ledger totals for %s/%s: rent=%.2f charges=%.2f fees=%.2f%%",
            user_id,
            year,
            rent,
            charges,
            percentage,
        )

        return FiscalData(
            rent_collected=rent,
            deductible_charges=charges,
            management_fee_percentage=percentage,
            transactions=tuple(retained),
        )


__all__ = [
    "DEFAULT_MANAGEMENT_FEE_PERCENTAGE",
    "EmptyLedger",
    "FiscalData",
    "LedgerTransaction",
    "RentalLedger",
    "TransactionLedger",
    "is_deductible_charge",
    "is_rent",
]
