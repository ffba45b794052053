"""
TiwiFlix Contract Addresses v1.0

A contract address is the representation hash of its initial state:

  StateInit: split_depth:(Maybe ##5)=0 · special:(Maybe TickTock)=0
             · code:(Maybe ^Cell) · data:(Maybe ^Cell) · library:(HashmapE)=0
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from tiwiflix.constants import BASECHAIN, ITEM_INDEX_BITS
from tiwiflix.core.cells import Address, Cell, begin_cell, building, end_parse, parsing
from tiwiflix.core.errors import LayoutMismatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StateInit:
    """Initial code and data of a contract."""
    code: Optional[Cell]
    data: Optional[Cell]

    def to_cell(self) -> Cell:
        return (
            begin_cell()
            .store_uint(0, 2)                   # no split_depth, no special
            .store_maybe_ref(self.code)
            .store_maybe_ref(self.data)
            .store_bit(0)                       # empty library
            .end_cell()
        )

    @classmethod
    def from_cell(cls, cell: Cell) -> StateInit:
        s = cell.begin_parse()
        with parsing("state init"):
            if s.load_uint(2):
                raise LayoutMismatch("split_depth and special are not supported")
            code = s.load_maybe_ref()
            data = s.load_maybe_ref()
            if s.load_bit():
                raise LayoutMismatch("Libraries are not supported")
        end_parse(s, "state init")
        return cls(code, data)

    def address(self, workchain: int = BASECHAIN) -> Address:
        return Address((workchain, self.to_cell().hash))


class AddressDeriver:
    """Deterministic contract addresses."""

    @staticmethod
    def derive(code: Cell, data: Cell, workchain: int = BASECHAIN) -> Address:
        address = StateInit(code, data).address(workchain)
        logger.debug(f"Derived contract address {address.to_str(False)}")
        return address

    @staticmethod
    def item_data(collection: Address, index: int) -> Cell:
        """Initial data of an NFT item before the collection initializes it."""
        with building("item data"):
            return (
                begin_cell()
                .store_uint(index, ITEM_INDEX_BITS)
                .store_address(collection)
                .end_cell()
            )

    @classmethod
    def item_address(
        cls,
        item_code: Cell,
        collection: Address,
        index: int,
        workchain: int = BASECHAIN,
    ) -> Address:
        """Predict the address of item #index deployed by a collection."""
        return cls.derive(item_code, cls.item_data(collection, index), workchain)


def contract_address(code: Cell, data: Cell, workchain: int = BASECHAIN) -> Address:
    return AddressDeriver.derive(code, data, workchain)
