"""
TiwiFlix Core Module v1.0

Cell helpers over pytoniq-core, coins, contract addresses and shared types.
"""

from tiwiflix.core.errors import (
    TiwiFlixError,
    CapacityError,
    InvariantViolation,
    LayoutMismatch,
    CellUnderflow,
    BocError,
    GetterError,
)

from tiwiflix.core.cells import (
    Address,
    Builder,
    Cell,
    HashMap,
    Slice,
    begin_cell,
    building,
    parsing,
    store_ref,
    end_parse,
    load_std_address,
    parse_address,
    load_boc,
    to_base64,
    from_base64,
)
from tiwiflix.core.coins import to_nano, from_nano
from tiwiflix.core.state_init import StateInit, AddressDeriver, contract_address
from tiwiflix.core.types import RoyaltyParams, BatchEntry, item_init_cell, parse_item_init_cell

__all__ = [
    # Errors
    "TiwiFlixError",
    "CapacityError",
    "InvariantViolation",
    "LayoutMismatch",
    "CellUnderflow",
    "BocError",
    "GetterError",
    # Cells
    "Cell",
    "Builder",
    "Slice",
    "HashMap",
    "begin_cell",
    "building",
    "parsing",
    "store_ref",
    "end_parse",
    "load_boc",
    "to_base64",
    "from_base64",
    # Addresses
    "Address",
    "load_std_address",
    "parse_address",
    "StateInit",
    "AddressDeriver",
    "contract_address",
    # Values
    "to_nano",
    "from_nano",
    "RoyaltyParams",
    "BatchEntry",
    "item_init_cell",
    "parse_item_init_cell",
]
