"""
TiwiFlix Message Bodies v1.0

Internal message bodies for the collection and item contracts.

Every body starts with op(32) · query_id(64):

  MINT                 index(64) · amount(coins) · ^[owner · ^content]
  BATCH_MINT           dict(index(64) -> ^[amount(coins) · ^[owner · ^content]])
  CHANGE_OWNER         new_owner
  CHANGE_CONTENT       ^collection_config
  CHANGE_MINT_PRICE    price(coins)
  CHANGE_NFT_ITEM_AMOUNT amount(coins)
  CHANGE_ROYALTIES     ^[factor(16) · base(16) · address]
  CHANGE_MAX_SUPPLY    max_supply(64)
  EMERGENCY_WITHDRAW   -
  TRANSFER             new_owner · response · 0 · forward(coins) · 0
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type

from tiwiflix.constants import (
    OPCODE_BITS,
    QUERY_ID_BITS,
    ITEM_INDEX_BITS,
    MAX_SUPPLY_BITS,
    DEFAULT_ITEM_CONTENT,
    DEFAULT_ITEM_STORAGE_AMOUNT,
    TRANSFER_FORWARD_AMOUNT,
)
from tiwiflix.content.offchain import encode_raw
from tiwiflix.core.cells import (
    Address,
    Builder,
    Cell,
    Slice,
    begin_cell,
    building,
    end_parse,
    load_std_address,
    parsing,
    store_ref,
)
from tiwiflix.core.errors import CapacityError, CellUnderflow, InvariantViolation, LayoutMismatch
from tiwiflix.core.types import BatchEntry, RoyaltyParams, item_init_cell, parse_item_init_cell
from tiwiflix.network.batch import BatchDictionary
from tiwiflix.network.protocol import Opcode


def _header(op: Opcode, query_id: int) -> Builder:
    return begin_cell().store_uint(int(op), OPCODE_BITS).store_uint(query_id, QUERY_ID_BITS)


def _open(cell: Cell, op: Opcode) -> Slice:
    """Check the opcode and return a slice positioned after the query id."""
    s = cell.begin_parse()
    found = s.load_uint(OPCODE_BITS)
    if found != op:
        raise LayoutMismatch(f"Expected opcode {op.name} ({int(op)}), got {found:#x}")
    return s


def _require(address: Optional[Address], name: str) -> Address:
    if address is None:
        raise LayoutMismatch(f"{name} address is missing")
    return address


# ==============================================================================
# COLLECTION MESSAGES
# ==============================================================================
@dataclass
class MintMessage:
    """Mint a single item to `owner`."""
    item_index: int
    owner: Address
    content: Cell = field(default_factory=lambda: encode_raw(DEFAULT_ITEM_CONTENT))
    amount: int = DEFAULT_ITEM_STORAGE_AMOUNT     # Forwarded to the item for storage
    query_id: int = 0

    op = Opcode.MINT

    @building("MintMessage")
    def to_cell(self) -> Cell:
        if not 0 <= self.item_index < 1 << ITEM_INDEX_BITS:
            raise CapacityError(f"Item index {self.item_index} does not fit uint64")
        return (
            _header(self.op, self.query_id)
            .store_uint(self.item_index, ITEM_INDEX_BITS)
            .store_coins(self.amount)
            .store_ref(item_init_cell(self.owner, self.content))
            .end_cell()
        )

    @classmethod
    @parsing("MintMessage")
    def from_cell(cls, cell: Cell) -> MintMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        item_index = s.load_uint(ITEM_INDEX_BITS)
        amount = s.load_coins()
        owner, content = parse_item_init_cell(s.load_ref())
        end_parse(s, cls.__name__)
        return cls(item_index, _require(owner, "Owner"), content, amount, query_id)


@dataclass
class BatchMintMessage:
    """Mint up to 80 items in one message."""
    entries: List[BatchEntry]
    query_id: int = 0

    op = Opcode.BATCH_MINT

    @building("BatchMintMessage")
    def to_cell(self) -> Cell:
        return (
            _header(self.op, self.query_id)
            .store_dict(BatchDictionary.build(self.entries))
            .end_cell()
        )

    @classmethod
    @parsing("BatchMintMessage")
    def from_cell(cls, cell: Cell) -> BatchMintMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        entries = BatchDictionary.parse(s.load_maybe_ref())
        end_parse(s, cls.__name__)
        return cls(entries, query_id)


@dataclass
class ChangeOwnerMessage:
    new_owner: Address
    query_id: int = 0

    op = Opcode.CHANGE_OWNER

    @building("ChangeOwnerMessage")
    def to_cell(self) -> Cell:
        return _header(self.op, self.query_id).store_address(self.new_owner).end_cell()

    @classmethod
    @parsing("ChangeOwnerMessage")
    def from_cell(cls, cell: Cell) -> ChangeOwnerMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        new_owner = _require(load_std_address(s), "New owner")
        end_parse(s, cls.__name__)
        return cls(new_owner, query_id)


@dataclass
class ChangeContentMessage:
    """Replace the whole collection configuration (see CollectionConfig)."""
    config: Cell
    query_id: int = 0

    op = Opcode.CHANGE_CONTENT

    @building("ChangeContentMessage")
    def to_cell(self) -> Cell:
        return store_ref(_header(self.op, self.query_id), self.config).end_cell()

    @classmethod
    @parsing("ChangeContentMessage")
    def from_cell(cls, cell: Cell) -> ChangeContentMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        config = s.load_ref()
        end_parse(s, cls.__name__)
        return cls(config, query_id)


@dataclass
class ChangeMintPriceMessage:
    price: int
    query_id: int = 0

    op = Opcode.CHANGE_MINT_PRICE

    @building("ChangeMintPriceMessage")
    def to_cell(self) -> Cell:
        return _header(self.op, self.query_id).store_coins(self.price).end_cell()

    @classmethod
    @parsing("ChangeMintPriceMessage")
    def from_cell(cls, cell: Cell) -> ChangeMintPriceMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        price = s.load_coins()
        end_parse(s, cls.__name__)
        return cls(price, query_id)


@dataclass
class ChangeNftItemAmountMessage:
    """Coins forwarded to each newly minted item."""
    amount: int
    query_id: int = 0

    op = Opcode.CHANGE_NFT_ITEM_AMOUNT

    @building("ChangeNftItemAmountMessage")
    def to_cell(self) -> Cell:
        return _header(self.op, self.query_id).store_coins(self.amount).end_cell()

    @classmethod
    @parsing("ChangeNftItemAmountMessage")
    def from_cell(cls, cell: Cell) -> ChangeNftItemAmountMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        amount = s.load_coins()
        end_parse(s, cls.__name__)
        return cls(amount, query_id)


@dataclass
class ChangeRoyaltiesMessage:
    royalty: RoyaltyParams
    query_id: int = 0

    op = Opcode.CHANGE_ROYALTIES

    @building("ChangeRoyaltiesMessage")
    def to_cell(self) -> Cell:
        return _header(self.op, self.query_id).store_ref(self.royalty.to_cell()).end_cell()

    @classmethod
    @parsing("ChangeRoyaltiesMessage")
    def from_cell(cls, cell: Cell) -> ChangeRoyaltiesMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        royalty = RoyaltyParams.from_cell(s.load_ref())
        end_parse(s, cls.__name__)
        return cls(royalty, query_id)


@dataclass
class ChangeMaxSupplyMessage:
    max_supply: int
    query_id: int = 0

    op = Opcode.CHANGE_MAX_SUPPLY

    @building("ChangeMaxSupplyMessage")
    def to_cell(self) -> Cell:
        if self.max_supply < 0:
            raise InvariantViolation(f"Negative max supply {self.max_supply}")
        return (
            _header(self.op, self.query_id)
            .store_uint(self.max_supply, MAX_SUPPLY_BITS)
            .end_cell()
        )

    @classmethod
    @parsing("ChangeMaxSupplyMessage")
    def from_cell(cls, cell: Cell) -> ChangeMaxSupplyMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        max_supply = s.load_uint(MAX_SUPPLY_BITS)
        end_parse(s, cls.__name__)
        return cls(max_supply, query_id)


@dataclass
class EmergencyWithdrawMessage:
    query_id: int = 0

    op = Opcode.EMERGENCY_WITHDRAW

    @building("EmergencyWithdrawMessage")
    def to_cell(self) -> Cell:
        return _header(self.op, self.query_id).end_cell()

    @classmethod
    @parsing("EmergencyWithdrawMessage")
    def from_cell(cls, cell: Cell) -> EmergencyWithdrawMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        end_parse(s, cls.__name__)
        return cls(query_id)


# ==============================================================================
# ITEM MESSAGES
# ==============================================================================
@dataclass
class TransferMessage:
    """
    TEP-62 transfer without custom or forward payload.

    Excess coins go back to `response_destination`.
    """
    new_owner: Address
    response_destination: Optional[Address]
    forward_amount: int = TRANSFER_FORWARD_AMOUNT
    query_id: int = 0

    op = Opcode.TRANSFER

    @building("TransferMessage")
    def to_cell(self) -> Cell:
        return (
            _header(self.op, self.query_id)
            .store_address(self.new_owner)
            .store_address(self.response_destination)
            .store_bit(False)                   # no custom_payload
            .store_coins(self.forward_amount)
            .store_bit(False)                   # forward_payload inline, empty
            .end_cell()
        )

    @classmethod
    @parsing("TransferMessage")
    def from_cell(cls, cell: Cell) -> TransferMessage:
        s = _open(cell, cls.op)
        query_id = s.load_uint(QUERY_ID_BITS)
        new_owner = _require(load_std_address(s), "New owner")
        response = load_std_address(s)
        if s.load_bit():
            raise LayoutMismatch("Custom payload is not supported")
        forward_amount = s.load_coins()
        if s.load_bit():
            raise LayoutMismatch("Forward payload by reference is not supported")
        end_parse(s, cls.__name__)
        return cls(new_owner, response, forward_amount, query_id)


# ==============================================================================
# DISPATCH
# ==============================================================================
MESSAGE_TYPES: Dict[Opcode, Type] = {
    Opcode.MINT: MintMessage,
    Opcode.BATCH_MINT: BatchMintMessage,
    Opcode.CHANGE_OWNER: ChangeOwnerMessage,
    Opcode.CHANGE_CONTENT: ChangeContentMessage,
    Opcode.CHANGE_MINT_PRICE: ChangeMintPriceMessage,
    Opcode.CHANGE_NFT_ITEM_AMOUNT: ChangeNftItemAmountMessage,
    Opcode.CHANGE_ROYALTIES: ChangeRoyaltiesMessage,
    Opcode.CHANGE_MAX_SUPPLY: ChangeMaxSupplyMessage,
    Opcode.EMERGENCY_WITHDRAW: EmergencyWithdrawMessage,
    Opcode.TRANSFER: TransferMessage,
}


def decode_body(cell: Cell):
    """Decode any collection or item body by its opcode."""
    s = cell.begin_parse()
    if s.remaining_bits < OPCODE_BITS:
        raise CellUnderflow(f"Body of {s.remaining_bits} bits has no opcode")
    op = s.preload_uint(OPCODE_BITS)
    try:
        message_type = MESSAGE_TYPES[Opcode(op)]
    except ValueError as e:
        raise LayoutMismatch(f"Unknown opcode {op:#x}") from e
    return message_type.from_cell(cell)
