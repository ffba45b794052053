"""
TiwiFlix Marketplace Types v1.0

Value records shared by message builders, getter decoders and the CLI.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple, Union

from tiwiflix.constants import ROYALTY_FIELD_BITS, ROYALTY_PERCENT_BASE
from tiwiflix.core.cells import Address, Cell, begin_cell, building, load_std_address, parsing, store_ref
from tiwiflix.core.errors import CapacityError, InvariantViolation, LayoutMismatch


# ==============================================================================
# ROYALTIES
# ==============================================================================
@dataclass(frozen=True, slots=True)
class RoyaltyParams:
    """
    Royalty share paid to `address` on secondary sales.

    royalty = price * factor // base

    CELL: factor(16) · base(16) · address
    """
    factor: int
    base: int
    address: Address

    def __post_init__(self):
        limit = 1 << ROYALTY_FIELD_BITS
        if not 0 <= self.factor < limit or not 0 <= self.base < limit:
            raise CapacityError(
                f"Royalty factor/base must fit uint{ROYALTY_FIELD_BITS}, "
                f"got {self.factor}/{self.base}"
            )
        if self.base == 0:
            raise InvariantViolation("Royalty base must be positive")
        if self.factor > self.base:
            raise InvariantViolation(
                f"Royalty factor {self.factor} exceeds base {self.base}"
            )

    @classmethod
    def from_percentage(
        cls,
        percent: Union[int, float, str, Decimal],
        address: Address,
        base: int = ROYALTY_PERCENT_BASE,
    ) -> RoyaltyParams:
        """RoyaltyParams.from_percentage(5, addr) -> factor 50, base 1000."""
        try:
            factor = Decimal(str(percent)) * base / 100
        except InvalidOperation as e:
            raise InvariantViolation(f"Invalid royalty percentage {percent!r}") from e
        if not factor.is_finite() or factor != factor.to_integral_value():
            raise InvariantViolation(
                f"Royalty {percent}% is not representable with base {base}"
            )
        return cls(int(factor), base, address)

    @property
    def percentage(self) -> float:
        return self.factor * 100 / self.base

    def royalty_for(self, price: int) -> int:
        """Royalty owed on a sale price, floored to whole nanoton."""
        if price < 0:
            raise InvariantViolation(f"Negative price {price}")
        return price * self.factor // self.base

    def to_cell(self) -> Cell:
        return (
            begin_cell()
            .store_uint(self.factor, ROYALTY_FIELD_BITS)
            .store_uint(self.base, ROYALTY_FIELD_BITS)
            .store_address(self.address)
            .end_cell()
        )

    @classmethod
    def from_cell(cls, cell: Cell) -> RoyaltyParams:
        s = cell.begin_parse()
        with parsing("royalty params"):
            factor = s.load_uint(ROYALTY_FIELD_BITS)
            base = s.load_uint(ROYALTY_FIELD_BITS)
            address = load_std_address(s)
        if address is None:
            raise LayoutMismatch("Royalty cell has no address")
        return cls(factor, base, address)


# ==============================================================================
# BATCH ENTRY
# ==============================================================================
@dataclass(frozen=True, slots=True)
class BatchEntry:
    """
    One item of a batch mint.

    CELL (dictionary value): amount(coins) · ^content
    """
    index: int
    amount: int
    content: Cell

    def __post_init__(self):
        if not 0 <= self.index < 1 << 64:
            raise CapacityError(f"Item index {self.index} does not fit uint64")
        if self.amount < 0:
            raise InvariantViolation(f"Negative amount {self.amount}")

    def value_cell(self) -> Cell:
        with building("batch entry"):
            b = begin_cell().store_coins(self.amount)
        return store_ref(b, self.content).end_cell()

    @classmethod
    def from_value_cell(cls, index: int, cell: Cell) -> BatchEntry:
        s = cell.begin_parse()
        with parsing("batch entry"):
            amount = s.load_coins()
            content = s.load_ref()
        return cls(index, amount, content)


def item_init_cell(owner: Address, content: Cell) -> Cell:
    """Per-item init payload: owner · ^content."""
    return store_ref(begin_cell().store_address(owner), content).end_cell()


def parse_item_init_cell(cell: Cell) -> Tuple[Optional[Address], Cell]:
    s = cell.begin_parse()
    with parsing("item init"):
        owner = load_std_address(s)
        return owner, s.load_ref()
