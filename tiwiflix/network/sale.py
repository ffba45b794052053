"""
TiwiFlix Fixed-Price Sale v1.0

Sale contract data:

  is_complete(1) · created_at(32) · marketplace · nft · owner
  · full_price(coins)
  · ^[ fee_address · fee(coins) · royalty_address · royalty_amount(coins) ]

The owner cancels a listing with a bare op = 1 body (no query id).
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from tiwiflix.constants import BASECHAIN, OPCODE_BITS, OP_SALE_CANCEL, SALE_CREATED_AT_BITS
from tiwiflix.core.cells import Address, Cell, begin_cell, building, end_parse, load_std_address, parsing
from tiwiflix.core.errors import CapacityError, InvariantViolation, LayoutMismatch
from tiwiflix.core.state_init import StateInit
from tiwiflix.core.types import RoyaltyParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleConfig:
    marketplace: Address
    nft: Address
    owner: Address
    full_price: int
    fee_address: Address
    royalty_address: Address
    royalty_amount: int = 0
    fee: int = 0
    is_complete: bool = False
    created_at: int = field(default_factory=lambda: int(time.time()))

    def __post_init__(self):
        if not 0 <= self.created_at < 1 << SALE_CREATED_AT_BITS:
            raise CapacityError(f"Timestamp {self.created_at} does not fit uint32")
        for name in ("full_price", "fee", "royalty_amount"):
            if getattr(self, name) < 0:
                raise InvariantViolation(f"Negative {name}: {getattr(self, name)}")
        if self.fee + self.royalty_amount > self.full_price:
            raise InvariantViolation(
                f"Fee {self.fee} + royalty {self.royalty_amount} exceed price {self.full_price}"
            )

    @classmethod
    def with_royalty(
        cls,
        marketplace: Address,
        nft: Address,
        owner: Address,
        full_price: int,
        royalty: RoyaltyParams,
        fee: int = 0,
        created_at: Optional[int] = None,
    ) -> SaleConfig:
        """Listing whose royalty amount follows the collection royalty params."""
        return cls(
            marketplace=marketplace,
            nft=nft,
            owner=owner,
            full_price=full_price,
            fee_address=marketplace,
            royalty_address=royalty.address,
            royalty_amount=royalty.royalty_for(full_price),
            fee=fee,
            created_at=int(time.time()) if created_at is None else created_at,
        )

    @property
    def seller_proceeds(self) -> int:
        return self.full_price - self.fee - self.royalty_amount

    @building("sale fees")
    def fees_cell(self) -> Cell:
        return (
            begin_cell()
            .store_address(self.fee_address)
            .store_coins(self.fee)
            .store_address(self.royalty_address)
            .store_coins(self.royalty_amount)
            .end_cell()
        )

    @building("sale config")
    def to_cell(self) -> Cell:
        return (
            begin_cell()
            .store_bit(self.is_complete)
            .store_uint(self.created_at, SALE_CREATED_AT_BITS)
            .store_address(self.marketplace)
            .store_address(self.nft)
            .store_address(self.owner)
            .store_coins(self.full_price)
            .store_ref(self.fees_cell())
            .end_cell()
        )

    @classmethod
    @parsing("sale config")
    def from_cell(cls, cell: Cell) -> SaleConfig:
        s = cell.begin_parse()
        is_complete = s.load_bool()
        created_at = s.load_uint(SALE_CREATED_AT_BITS)
        marketplace, nft, owner = load_std_address(s), load_std_address(s), load_std_address(s)
        full_price = s.load_coins()
        fees = s.load_ref().begin_parse()
        end_parse(s, "sale config")
        fee_address = load_std_address(fees)
        fee = fees.load_coins()
        royalty_address = load_std_address(fees)
        royalty_amount = fees.load_coins()
        end_parse(fees, "sale fees")

        addresses = (marketplace, nft, owner, fee_address, royalty_address)
        if any(a is None for a in addresses):
            raise LayoutMismatch("Sale data holds an empty address")
        return cls(
            marketplace=marketplace,
            nft=nft,
            owner=owner,
            full_price=full_price,
            fee_address=fee_address,
            royalty_address=royalty_address,
            royalty_amount=royalty_amount,
            fee=fee,
            is_complete=is_complete,
            created_at=created_at,
        )

    def deployment(self, code: Cell, workchain: int = BASECHAIN) -> Tuple[StateInit, Address]:
        state_init = StateInit(code, self.to_cell())
        address = state_init.address(workchain)
        logger.info(f"Sale for {self.nft.to_str(False)} deploys at {address.to_str(False)}")
        return state_init, address


def cancel_body() -> Cell:
    return begin_cell().store_uint(OP_SALE_CANCEL, OPCODE_BITS).end_cell()


def is_cancel_body(cell: Cell) -> bool:
    s = cell.begin_parse()
    return (
        s.remaining_bits == OPCODE_BITS
        and s.remaining_refs == 0
        and s.load_uint(OPCODE_BITS) == OP_SALE_CANCEL
    )
