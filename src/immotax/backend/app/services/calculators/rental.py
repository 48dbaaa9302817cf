"""Rental income: regime resolution, management fees and social levies."""

from __future__ import annotations

from immotax.backend.app.models import RentalRegime


def resolve_net_rental_income(
    gross_rent: float,
    charges: float,
    works: float,
    regime: RentalRegime | str,
    flat_deduction_rate: float,
) -> float:
    """Return the taxable rental income under ``regime``.

    The micro-foncier regime replaces every expense with a flat deduction on
    the rent collected, so ``charges`` and ``works`` are ignored there. Under
    the régime réel, expenses are itemized and a deficit is floored at zero.
    Unknown regimes raise :class:`InvalidRegimeError`.
    """

    resolved = RentalRegime.parse(regime)

    if gross_rent <= 0:
        return 0.0

    if resolved is RentalRegime.FLAT:
        return gross_rent * (1 - flat_deduction_rate)

    return max(gross_rent - (charges + works), 0.0)


def calculate_management_fees(gross_rent: float, percentage: float | None) -> float:
    """Return agency management fees charged as a percentage of rent."""

    if not percentage or gross_rent <= 0:
        return 0.0
    return gross_rent * percentage / 100


def calculate_social_levy(net_rental_income: float, rate: float) -> float:
    """Return the prélèvements sociaux due on ``net_rental_income``."""

    return max(net_rental_income, 0.0) * rate


__all__ = [
    "calculate_management_fees",
    "calculate_social_levy",
    "resolve_net_rental_income",
]
