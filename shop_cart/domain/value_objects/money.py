"""
Money helpers

Cart amounts are Decimal values in major currency units. Rounding always goes
through round_currency so repeated computation never drifts by a penny.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0")

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    """Convert a price-like value to Decimal without float artefacts"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Amount cannot be a boolean")
    try:
        # str() first so 0.1 becomes Decimal("0.1"), not its binary expansion
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


def round_currency(amount: Amount) -> Decimal:
    """Round half-up to 2 decimal places"""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
