"""Multi-year profitability projection with break-even detection."""

from __future__ import annotations

from datetime import date

from immotax.backend.app.models import (
    ProjectionInput,
    ProjectionResult,
    YearlyProjectionRow,
)


def project_profitability(
    inputs: ProjectionInput, *, today: date | None = None
) -> ProjectionResult:
    """Simulate yearly cashflow over the projection horizon.

    Each year is taxed at the flat effective rate carried by ``inputs``; the
    progressive scale is deliberately not consulted because the marginal rate
    is assumed constant over the horizon. The running total starts at minus
    the cash put in at purchase (down payment plus acquisition costs) and the
    first year where it turns strictly positive is reported as break-even.
    """

    start_year = inputs.resolve_start_year(today)
    down_payment = inputs.down_payment
    initial_outlay = down_payment + inputs.acquisition_costs
    interest_schedule = inputs.interest_per_year

    cumulative_cashflow = -initial_outlay
    break_even_year: int | None = None
    rows: list[YearlyProjectionRow] = []

    for index in range(max(inputs.horizon_years, 0)):
        year = start_year + index
        interest = interest_schedule[index] if index < len(interest_schedule) else 0.0
        net_result = inputs.annual_rent - inputs.annual_charges - interest
        tax = max(0.0, net_result * inputs.flat_tax_rate)
        cashflow = net_result - tax
        cumulative_cashflow += cashflow

        rows.append(
            YearlyProjectionRow(
                year=year,
                annual_rent=inputs.annual_rent,
                annual_charges=inputs.annual_charges,
                interest=interest,
                net_result=net_result,
                tax=tax,
                cashflow=cashflow,
                cumulative_cashflow=cumulative_cashflow,
            )
        )

        if break_even_year is None and cumulative_cashflow > 0:
            break_even_year = year

    return ProjectionResult(
        rows=tuple(rows),
        break_even_year=break_even_year,
        down_payment=down_payment,
        initial_outlay=initial_outlay,
    )


__all__ = ["project_profitability"]
