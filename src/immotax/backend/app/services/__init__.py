"""Application services sitting between the HTTP layer and the calculators."""

from .autofill import EmptyLedger, LedgerTransaction, RentalLedger, TransactionLedger
from .projection_service import build_interest_schedule, run_projection
from .simulation_service import simulate_tax

__all__ = [
    "EmptyLedger",
    "LedgerTransaction",
    "RentalLedger",
    "TransactionLedger",
    "build_interest_schedule",
    "run_projection",
    "simulate_tax",
]
