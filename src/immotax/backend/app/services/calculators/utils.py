"""Utility helpers for calculator modules."""

from __future__ import annotations


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)
