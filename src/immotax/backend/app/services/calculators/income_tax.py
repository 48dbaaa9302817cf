"""Progressive income tax with the family quotient, its cap and the décote."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from immotax.backend.app.models import Household
from immotax.backend.config.year_config import DecoteConfig, TaxBracket


@dataclass(frozen=True)
class IncomeTaxBreakdown:
    """Gross tax from the scale, the décote granted and the tax due."""

    taxable_income: float
    gross_tax: float
    decote: float

    @property
    def net_tax(self) -> float:
        return self.gross_tax - self.decote


def calculate_progressive_tax(
    net_income: float, shares: float, brackets: Sequence[TaxBracket]
) -> float:
    """Calculate the tax due on ``net_income`` split over ``shares`` parts.

    The income is divided by the family quotient, each bracket taxes the
    portion of the per-share income that falls inside it, and the per-share
    tax is multiplied back by ``shares``. ``brackets`` must be contiguous and
    ascending; no rounding is applied.
    """

    if shares < 1:
        raise ValueError("Family quotient shares must be at least 1")

    if net_income <= 0:
        return 0.0

    quotient_income = net_income / shares
    per_share_tax = 0.0

    for bracket in brackets:
        upper = bracket.upper_bound if bracket.upper_bound is not None else math.inf
        taxable_slice = max(0.0, min(quotient_income, upper) - bracket.lower_bound)
        per_share_tax += taxable_slice * bracket.rate

    return per_share_tax * shares


def calculate_decote(
    gross_tax: float, household: Household, decote: DecoteConfig | None
) -> float:
    """Return the décote granted on ``gross_tax``.

    The reduction only applies below the household threshold and can never
    exceed the gross tax itself.
    """

    if decote is None or gross_tax <= 0:
        return 0.0

    band = decote.band_for(household.value)
    if gross_tax >= band.threshold:
        return 0.0

    reduction = band.flat_amount - decote.rate * gross_tax
    return min(max(reduction, 0.0), gross_tax)


HOUSEHOLD_BASE_SHARES = {Household.SINGLE: 1.0, Household.COUPLE: 2.0}


def cap_quotient_benefit(
    tax: float,
    net_income: float,
    shares: float,
    household: Household,
    brackets: Sequence[TaxBracket],
    cap_per_half_share: float | None,
) -> float:
    """Limit the advantage granted by shares above the household base.

    The tax is recomputed with the base shares only; the saving obtained from
    the extra shares may not exceed ``cap_per_half_share`` per half share.
    """

    base_shares = HOUSEHOLD_BASE_SHARES[household]
    if cap_per_half_share is None or shares <= base_shares:
        return tax

    reference_tax = calculate_progressive_tax(net_income, base_shares, brackets)
    max_benefit = cap_per_half_share * (shares - base_shares) * 2
    return max(tax, reference_tax - max_benefit)


def calculate_income_tax(
    net_income: float,
    shares: float,
    household: Household,
    brackets: Sequence[TaxBracket],
    decote: DecoteConfig | None = None,
    quotient_cap_per_half_share: float | None = None,
) -> IncomeTaxBreakdown:
    """Apply the progressive scale, the quotient cap, then the décote."""

    gross_tax = cap_quotient_benefit(
        calculate_progressive_tax(net_income, shares, brackets),
        net_income,
        shares,
        household,
        brackets,
        quotient_cap_per_half_share,
    )
    return IncomeTaxBreakdown(
        taxable_income=net_income,
        gross_tax=gross_tax,
        decote=calculate_decote(gross_tax, household, decote),
    )


__all__ = [
    "HOUSEHOLD_BASE_SHARES",
    "IncomeTaxBreakdown",
    "calculate_decote",
    "calculate_income_tax",
    "calculate_progressive_tax",
    "cap_quotient_benefit",
]
