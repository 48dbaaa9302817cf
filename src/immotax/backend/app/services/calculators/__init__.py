"""Domain-specific calculation helpers."""

from .income_tax import (
    IncomeTaxBreakdown,
    calculate_decote,
    calculate_income_tax,
    calculate_progressive_tax,
    cap_quotient_benefit,
)
from .loans import compute_yearly_interests, interest_schedule
from .projection import project_profitability
from .rental import (
    calculate_management_fees,
    calculate_social_levy,
    resolve_net_rental_income,
)
from .simulation import calculate_tax_simulation
from .utils import round_currency

__all__ = [
    "IncomeTaxBreakdown",
    "calculate_decote",
    "calculate_income_tax",
    "calculate_management_fees",
    "calculate_progressive_tax",
    "calculate_social_levy",
    "calculate_tax_simulation",
    "cap_quotient_benefit",
    "compute_yearly_interests",
    "interest_schedule",
    "project_profitability",
    "resolve_net_rental_income",
    "round_currency",
]
