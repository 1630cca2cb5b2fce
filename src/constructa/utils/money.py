"""Numeric helpers shared by the reconciliation engine."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convert a possibly missing number to Decimal, treating None as zero.

    Floats go through ``str`` so 0.1 stays 0.1 instead of its binary
    expansion.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def percent_of(total: Decimal, percentage: Optional[Number]) -> Decimal:
    """Return ``percentage`` percent of ``total``; a missing percentage is 0%."""
    return total * (to_decimal(percentage) / HUNDRED)


def total_amount(entries: Iterable) -> Decimal:
    """Sum the ``amount`` of ledger entries, counting absent amounts as zero."""
    return sum((to_decimal(getattr(e, "amount", None)) for e in entries), ZERO)


def floor_zero(value: Decimal) -> Decimal:
    return max(ZERO, value)


def quantize_cents(value: Decimal) -> Decimal:
    """Round to currency precision for display."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
