"""
TiwiFlix Message Protocol v1.0

Opcodes understood by the collection, item and sale contracts, getter
method names and contract exit codes.
"""

from __future__ import annotations
from enum import IntEnum

from tiwiflix.constants import (
    OP_MINT,
    OP_BATCH_MINT,
    OP_CHANGE_OWNER,
    OP_CHANGE_CONTENT,
    OP_CHANGE_MINT_PRICE,
    OP_CHANGE_NFT_ITEM_AMOUNT,
    OP_CHANGE_ROYALTIES,
    OP_CHANGE_MAX_SUPPLY,
    OP_EMERGENCY_WITHDRAW,
    OP_TRANSFER,
    EXIT_BATCH_TOO_LARGE,
    EXIT_MAX_SUPPLY_EXCEEDED,
    GET_COLLECTION_DATA,
    GET_ROYALTY_PARAMS,
    GET_NFT_ADDRESS_BY_INDEX,
    GET_NFT_CONTENT,
    GET_MINTING_PRICE,
    GET_NFT_ITEM_AMOUNT,
    GET_MAX_SUPPLY,
    GET_IS_VERIFIED,
    GET_COLLECTION_BALANCE,
    GET_NFT_DATA,
    GET_SALE_DATA,
)


class Opcode(IntEnum):
    """
    32-bit message tags.

    Collection (owner only unless noted):
    - MINT: single item, anyone paying the mint price
    - BATCH_MINT: up to 80 items
    - CHANGE_*: configuration updates
    - EMERGENCY_WITHDRAW: drain the collection balance

    Item:
    - TRANSFER: TEP-62 ownership transfer
    """
    # Collection
    MINT = OP_MINT
    BATCH_MINT = OP_BATCH_MINT
    CHANGE_OWNER = OP_CHANGE_OWNER
    CHANGE_CONTENT = OP_CHANGE_CONTENT
    CHANGE_MINT_PRICE = OP_CHANGE_MINT_PRICE
    CHANGE_NFT_ITEM_AMOUNT = OP_CHANGE_NFT_ITEM_AMOUNT
    CHANGE_ROYALTIES = OP_CHANGE_ROYALTIES
    CHANGE_MAX_SUPPLY = OP_CHANGE_MAX_SUPPLY
    EMERGENCY_WITHDRAW = OP_EMERGENCY_WITHDRAW

    # Item
    TRANSFER = OP_TRANSFER


class ExitCode(IntEnum):
    """Collection contract exit codes checked locally before sending."""
    BATCH_TOO_LARGE = EXIT_BATCH_TOO_LARGE
    MAX_SUPPLY_EXCEEDED = EXIT_MAX_SUPPLY_EXCEEDED


class GetterMethod:
    """Getter method names."""
    # Collection
    COLLECTION_DATA = GET_COLLECTION_DATA
    ROYALTY_PARAMS = GET_ROYALTY_PARAMS
    NFT_ADDRESS_BY_INDEX = GET_NFT_ADDRESS_BY_INDEX
    NFT_CONTENT = GET_NFT_CONTENT
    MINTING_PRICE = GET_MINTING_PRICE
    NFT_ITEM_AMOUNT = GET_NFT_ITEM_AMOUNT
    MAX_SUPPLY = GET_MAX_SUPPLY
    IS_VERIFIED = GET_IS_VERIFIED
    COLLECTION_BALANCE = GET_COLLECTION_BALANCE

    # Item
    NFT_DATA = GET_NFT_DATA

    # Sale
    SALE_DATA = GET_SALE_DATA
