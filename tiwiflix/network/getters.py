"""
TiwiFlix Getter Decoders v1.0

Getter methods return an untyped stack. Each decoder reads a fixed number
of values in the exact order the contract pushes them.

Stack values as produced by the transport:
  int   TVM integer
  Cell  cell or slice (a slice is carried as the cell it reads from)
  None  null
  list  tuple or list
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from tiwiflix.constants import SALE_DATA_MAGIC
from tiwiflix.content.offchain import decode as decode_content
from tiwiflix.core.cells import Address, Cell, load_std_address, parsing
from tiwiflix.core.errors import LayoutMismatch
from tiwiflix.core.types import RoyaltyParams
from tiwiflix.network.protocol import GetterMethod


class StackCursor:
    """Consumes a getter result stack front to back."""

    def __init__(self, stack: Sequence[Any], method: str = "getter"):
        self._stack = list(stack)
        self._pos = 0
        self.method = method

    @property
    def remaining(self) -> int:
        return len(self._stack) - self._pos

    def _next(self, expected: str) -> Any:
        if not self.remaining:
            raise LayoutMismatch(
                f"{self.method}: stack exhausted reading {expected} at position {self._pos}"
            )
        value = self._stack[self._pos]
        self._pos += 1
        return value

    def _mismatch(self, expected: str, value: Any) -> LayoutMismatch:
        return LayoutMismatch(
            f"{self.method}: expected {expected} at position {self._pos - 1}, "
            f"got {type(value).__name__}"
        )

    def read_int(self) -> int:
        value = self._next("int")
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._mismatch("int", value)
        return value

    def read_bool(self) -> bool:
        return self.read_int() != 0

    def read_cell(self) -> Cell:
        value = self._next("cell")
        if not isinstance(value, Cell):
            raise self._mismatch("cell", value)
        return value

    def read_address(self) -> Optional[Address]:
        """Read a slice holding addr_std or addr_none."""
        value = self._next("address slice")
        if value is None:
            return None
        if not isinstance(value, Cell):
            raise self._mismatch("address slice", value)
        with parsing(f"{self.method} address"):
            return load_std_address(value.begin_parse())

    def read_tuple(self) -> List[Any]:
        value = self._next("tuple")
        if not isinstance(value, list):
            raise self._mismatch("tuple", value)
        return value

    def end(self):
        if self.remaining:
            raise LayoutMismatch(
                f"{self.method}: {self.remaining} unexpected values left on the stack"
            )


# ==============================================================================
# RECORDS
# ==============================================================================
@dataclass(frozen=True)
class CollectionData:
    next_item_index: int
    content: Cell
    owner: Optional[Address]

    @property
    def content_url(self) -> str:
        return decode_content(self.content)


@dataclass(frozen=True)
class NftData:
    initialized: bool
    index: int
    collection: Optional[Address]
    owner: Optional[Address]
    content: Cell

    @property
    def content_url(self) -> str:
        return decode_content(self.content)


@dataclass(frozen=True)
class SaleData:
    """Fixed-price sale state."""
    is_complete: bool
    created_at: int
    marketplace: Optional[Address]
    nft: Optional[Address]
    owner: Optional[Address]
    full_price: int
    fee_address: Optional[Address]
    fee: int
    royalty_address: Optional[Address]
    royalty_amount: int


@dataclass(frozen=True)
class ItemRecord:
    """An item found while scanning a collection."""
    index: int
    address: Address
    data: NftData


@dataclass(frozen=True)
class SaleListing:
    """An item held by an open fixed-price sale."""
    index: int
    nft: Address
    sale: Address
    data: SaleData

    @property
    def price(self) -> int:
        return self.data.full_price

    @property
    def seller(self) -> Optional[Address]:
        return self.data.owner


# ==============================================================================
# DECODERS
# ==============================================================================
def decode_collection_data(stack: Sequence[Any]) -> CollectionData:
    c = StackCursor(stack, GetterMethod.COLLECTION_DATA)
    data = CollectionData(
        next_item_index=c.read_int(),
        content=c.read_cell(),
        owner=c.read_address(),
    )
    c.end()
    return data


def decode_royalty_params(stack: Sequence[Any]) -> RoyaltyParams:
    c = StackCursor(stack, GetterMethod.ROYALTY_PARAMS)
    factor = c.read_int()
    base = c.read_int()
    address = c.read_address()
    c.end()
    if address is None:
        raise LayoutMismatch(f"{GetterMethod.ROYALTY_PARAMS}: royalty address is missing")
    return RoyaltyParams(factor, base, address)


def decode_sale_data(stack: Sequence[Any]) -> SaleData:
    c = StackCursor(stack, GetterMethod.SALE_DATA)
    magic = c.read_int()
    if magic != SALE_DATA_MAGIC:
        raise LayoutMismatch(f"{GetterMethod.SALE_DATA}: unknown sale magic {magic:#x}")
    data = SaleData(
        is_complete=c.read_bool(),
        created_at=c.read_int(),
        marketplace=c.read_address(),
        nft=c.read_address(),
        owner=c.read_address(),
        full_price=c.read_int(),
        fee_address=c.read_address(),
        fee=c.read_int(),
        royalty_address=c.read_address(),
        royalty_amount=c.read_int(),
    )
    c.end()
    return data


def decode_nft_data(stack: Sequence[Any]) -> NftData:
    c = StackCursor(stack, GetterMethod.NFT_DATA)
    data = NftData(
        initialized=c.read_bool(),
        index=c.read_int(),
        collection=c.read_address(),
        owner=c.read_address(),
        content=c.read_cell(),
    )
    c.end()
    return data


def decode_nft_address(stack: Sequence[Any]) -> Address:
    c = StackCursor(stack, GetterMethod.NFT_ADDRESS_BY_INDEX)
    address = c.read_address()
    c.end()
    if address is None:
        raise LayoutMismatch(f"{GetterMethod.NFT_ADDRESS_BY_INDEX}: empty address")
    return address


def decode_nft_content(stack: Sequence[Any]) -> Cell:
    c = StackCursor(stack, GetterMethod.NFT_CONTENT)
    content = c.read_cell()
    c.end()
    return content


def _scalar(method: str) -> Callable[[Sequence[Any]], int]:
    def decode(stack: Sequence[Any]) -> int:
        c = StackCursor(stack, method)
        value = c.read_int()
        c.end()
        return value
    decode.__name__ = f"decode_{method}"
    return decode


decode_minting_price = _scalar(GetterMethod.MINTING_PRICE)
decode_nft_item_amount = _scalar(GetterMethod.NFT_ITEM_AMOUNT)
decode_max_supply = _scalar(GetterMethod.MAX_SUPPLY)
decode_collection_balance = _scalar(GetterMethod.COLLECTION_BALANCE)


def decode_is_verified(stack: Sequence[Any]) -> bool:
    c = StackCursor(stack, GetterMethod.IS_VERIFIED)
    value = c.read_bool()
    c.end()
    return value


GETTER_DECODERS: Dict[str, Callable[[Sequence[Any]], Any]] = {
    GetterMethod.COLLECTION_DATA: decode_collection_data,
    GetterMethod.ROYALTY_PARAMS: decode_royalty_params,
    GetterMethod.SALE_DATA: decode_sale_data,
    GetterMethod.NFT_DATA: decode_nft_data,
    GetterMethod.NFT_ADDRESS_BY_INDEX: decode_nft_address,
    GetterMethod.NFT_CONTENT: decode_nft_content,
    GetterMethod.MINTING_PRICE: decode_minting_price,
    GetterMethod.NFT_ITEM_AMOUNT: decode_nft_item_amount,
    GetterMethod.MAX_SUPPLY: decode_max_supply,
    GetterMethod.COLLECTION_BALANCE: decode_collection_balance,
    GetterMethod.IS_VERIFIED: decode_is_verified,
}


def decode(method: str, stack: Sequence[Any]) -> Any:
    """Decode the result stack of a known getter."""
    try:
        decoder = GETTER_DECODERS[method]
    except KeyError as e:
        raise LayoutMismatch(f"No decoder for getter {method!r}") from e
    return decoder(stack)
