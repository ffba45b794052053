"""TON <-> nanoton conversion."""

from decimal import Decimal

import pytest

from tiwiflix.core.coins import from_nano, to_nano
from tiwiflix.core.errors import InvariantViolation


@pytest.mark.parametrize("amount,nano", [
    ("0.05", 50_000_000),
    (0.05, 50_000_000),
    (0.08, 80_000_000),
    (1, 1_000_000_000),
    (Decimal("100"), 100_000_000_000),
    ("0.000000001", 1),
    ("2.50000000000", 2_500_000_000),
    ("0", 0),
])
def test_to_nano(amount, nano):
    assert to_nano(amount) == nano


@pytest.mark.parametrize("amount", ["1.0000000001", "abc", "inf", "nan", "-1"])
def test_to_nano_rejects(amount):
    with pytest.raises(InvariantViolation):
        to_nano(amount)


def test_from_nano():
    assert from_nano(50_000_000) == "0.05"
    assert from_nano(1_000_000_000) == "1"
    assert from_nano(1) == "0.000000001"
    assert from_nano(-1_500_000_000) == "-1.5"
    assert from_nano(0) == "0"
