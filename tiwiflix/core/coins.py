"""
TiwiFlix Coin Amounts v1.0

Conversions between decimal TON and integer nanoton, on top of
tonsdk's currency helpers. Amounts are validated here first: tonsdk
truncates extra decimals silently.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation
from typing import Union

from tonsdk.utils import from_nano as ton_from_nano
from tonsdk.utils import to_nano as ton_to_nano

from tiwiflix.core.errors import InvariantViolation

TON = "ton"
MAX_DECIMALS = 9


def to_nano(amount: Union[int, float, str, Decimal]) -> int:
    """
    Convert TON to nanoton.

    Floats go through their shortest repr, so to_nano(0.05) == 50_000_000.
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise InvariantViolation(f"Invalid TON amount {amount!r}") from e
    if not value.is_finite():
        raise InvariantViolation(f"Invalid TON amount {amount!r}")
    if value < 0:
        raise InvariantViolation(f"Negative TON amount {amount!r}")
    if value.normalize().as_tuple().exponent < -MAX_DECIMALS:
        raise InvariantViolation(f"TON amount {amount!r} has more than {MAX_DECIMALS} decimals")
    if value == 0:
        return 0
    return int(ton_to_nano(format(value.normalize(), "f"), TON))


def from_nano(amount: int) -> str:
    """Convert nanoton to a decimal TON string without trailing zeros."""
    if amount == 0:
        return "0"
    sign = "-" if amount < 0 else ""
    text = format(Decimal(ton_from_nano(abs(amount), TON)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return sign + text
