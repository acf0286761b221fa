"""
Amounts -- Decimal helpers for ledger arithmetic.

All ledger amounts are ``Decimal``; floats never enter the engines.  The
engines keep full precision internally and round only for display.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

ZERO = Decimal("0")

DISPLAY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP


def quantize_string(decimal_places: int) -> str:
    """String for Decimal.quantize() to round to ``decimal_places``."""
    if decimal_places <= 0:
        return "1"
    return "0." + "0" * decimal_places


def round_display(
    amount: Decimal,
    decimal_places: int = DISPLAY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round an amount for display.

    Preconditions: amount is a Decimal.
    Postconditions: Returns a new Decimal quantized to ``decimal_places``.
    """
    return amount.quantize(Decimal(quantize_string(decimal_places)), rounding=rounding)


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum Decimals starting from an exact zero (``sum()`` starts at int 0)."""
    total = ZERO
    for amount in amounts:
        total += amount
    return total


def non_negative(amount: Decimal) -> Decimal:
    """Clamp an amount at zero."""
    return amount if amount > ZERO else ZERO
