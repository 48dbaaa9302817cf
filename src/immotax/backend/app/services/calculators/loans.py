"""Yearly loan interest derived from month-by-month repayment schedules."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator, Sequence

from immotax.backend.app.models import LoanInterestDetail, LoanTerms, YearlyInterest


def annuity_payment(amount: float, monthly_rate: float, months: int) -> float:
    """Return the constant monthly instalment repaying ``amount``."""

    if months <= 0:
        return 0.0
    if monthly_rate == 0:
        return amount / months
    growth = (1 + monthly_rate) ** months
    return amount * monthly_rate * growth / (growth - 1)


def _monthly_interest(loan: LoanTerms) -> Iterator[tuple[int, float]]:
    """Yield ``(calendar year, interest)`` for every instalment of ``loan``."""

    months = loan.total_months
    monthly_rate = loan.annual_rate / 12
    first_month = loan.start_date.year * 12 + loan.start_date.month - 1

    in_fine = loan.repayment_type == "in_fine"
    constant_principal = loan.amortization_profile == "constant_principal"
    principal_share = loan.amount / months
    payment = loan.monthly_payment or annuity_payment(loan.amount, monthly_rate, months)

    balance = loan.amount
    for offset in range(months):
        interest = balance * monthly_rate
        yield (first_month + offset) // 12, interest

        if in_fine:
            continue
        repaid = principal_share if constant_principal else payment - interest
        balance = max(0.0, balance - repaid)


def interest_by_year(loan: LoanTerms) -> dict[int, float]:
    """Return the interest paid on ``loan`` for each calendar year it runs."""

    totals: dict[int, float] = defaultdict(float)
    for year, interest in _monthly_interest(loan):
        totals[year] += interest
    return dict(totals)


def compute_yearly_interests(
    loans: Sequence[LoanTerms], start_year: int, end_year: int
) -> list[YearlyInterest]:
    """Return one interest row per year in ``[start_year, end_year]``."""

    schedules = [(loan, interest_by_year(loan)) for loan in loans]
    rows: list[YearlyInterest] = []

    for year in range(start_year, end_year + 1):
        details = tuple(
            LoanInterestDetail(
                loan_id=loan.id,
                loan_name=loan.name,
                repayment_type=loan.repayment_type,
                interest=schedule[year],
                amount=loan.amount,
            )
            for loan, schedule in schedules
            if year in schedule
        )
        rows.append(
            YearlyInterest(
                year=year,
                total_interest=sum(detail.interest for detail in details),
                details=details,
            )
        )

    return rows


def interest_schedule(
    loans: Sequence[LoanTerms], start_year: int, horizon_years: int
) -> tuple[float, ...]:
    """Return total interest per year for a projection horizon."""

    if horizon_years <= 0:
        return ()
    rows = compute_yearly_interests(loans, start_year, start_year + horizon_years - 1)
    return tuple(row.total_interest for row in rows)


__all__ = [
    "annuity_payment",
    "compute_yearly_interests",
    "interest_by_year",
    "interest_schedule",
]
