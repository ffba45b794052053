"""
TiwiFlix Transaction Requests v1.0

Unsigned outbound messages handed to a wallet (TonConnect shape):

  {
    "validUntil": <unix seconds>,
    "messages": [
      {"address": ..., "amount": "<nanoton>", "payload": <base64 BOC>,
       "stateInit": <base64 BOC>}
    ]
  }

Nothing here signs or sends; the wallet does.
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from tiwiflix.constants import (
    ADMIN_MESSAGE_AMOUNT,
    BASECHAIN,
    BATCH_MINT_AMOUNT_PER_ITEM,
    COLLECTION_DEPLOY_AMOUNT,
    DEFAULT_ITEM_STORAGE_AMOUNT,
    DEFAULT_MINT_PRICE,
    REQUEST_TTL_SEC,
    SALE_DEPLOY_AMOUNT,
    TRANSFER_AMOUNT,
    TRANSFER_FORWARD_AMOUNT,
)
from tiwiflix.core.cells import Address, Cell, to_base64
from tiwiflix.core.errors import CapacityError, InvariantViolation
from tiwiflix.core.state_init import StateInit
from tiwiflix.core.types import RoyaltyParams
from tiwiflix.network.batch import BatchDictionary
from tiwiflix.network.collection import CollectionConfig
from tiwiflix.network.messages import (
    BatchMintMessage,
    ChangeContentMessage,
    ChangeMaxSupplyMessage,
    ChangeMintPriceMessage,
    ChangeNftItemAmountMessage,
    ChangeOwnerMessage,
    ChangeRoyaltiesMessage,
    EmergencyWithdrawMessage,
    MintMessage,
    TransferMessage,
)
from tiwiflix.network.protocol import ExitCode
from tiwiflix.network.sale import SaleConfig, cancel_body

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutboundMessage:
    """One internal message the wallet should send."""
    destination: Address
    amount: int
    body: Optional[Cell] = None
    state_init: Optional[StateInit] = None
    bounceable: bool = True

    def __post_init__(self):
        if self.amount < 0:
            raise InvariantViolation(f"Negative amount {self.amount}")

    def to_tonconnect(self, testnet: bool = False) -> Dict[str, str]:
        message = {
            "address": self.destination.to_str(is_bounceable=self.bounceable, is_test_only=testnet),
            "amount": str(self.amount),
        }
        if self.body is not None:
            message["payload"] = to_base64(self.body)
        if self.state_init is not None:
            message["stateInit"] = to_base64(self.state_init.to_cell())
        return message


@dataclass(frozen=True)
class TransactionRequest:
    messages: Tuple[OutboundMessage, ...]
    valid_until: int

    @classmethod
    def create(
        cls,
        messages: Sequence[OutboundMessage],
        ttl: int = REQUEST_TTL_SEC,
        now: Optional[int] = None,
    ) -> TransactionRequest:
        now = int(time.time()) if now is None else now
        return cls(tuple(messages), now + ttl)

    @property
    def total_amount(self) -> int:
        return sum(m.amount for m in self.messages)

    def to_dict(self, testnet: bool = False) -> Dict[str, Any]:
        return {
            "validUntil": self.valid_until,
            "messages": [m.to_tonconnect(testnet) for m in self.messages],
        }


def _single(
    destination: Address,
    amount: int,
    body: Optional[Cell],
    ttl: int,
    state_init: Optional[StateInit] = None,
) -> TransactionRequest:
    request = TransactionRequest.create(
        [OutboundMessage(destination, amount, body, state_init)], ttl=ttl
    )
    logger.info(f"Prepared request to {destination.to_str(False)} for {amount} nanoton")
    return request


def _check_supply(last_index: int, max_supply: Optional[int]):
    if max_supply is not None and last_index >= max_supply:
        raise CapacityError(
            f"Item index {last_index} exceeds max supply {max_supply}",
            exit_code=ExitCode.MAX_SUPPLY_EXCEEDED,
        )


# ==============================================================================
# COLLECTION
# ==============================================================================
def mint_request(
    collection: Address,
    owner: Address,
    item_index: int,
    mint_price: int = DEFAULT_MINT_PRICE,
    content: Optional[Cell] = None,
    max_supply: Optional[int] = None,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    """Mint one item; pays mint price plus the item storage amount."""
    _check_supply(item_index, max_supply)
    if content is None:
        message = MintMessage(item_index, owner)
    else:
        message = MintMessage(item_index, owner, content)
    amount = mint_price + DEFAULT_ITEM_STORAGE_AMOUNT
    return _single(collection, amount, message.to_cell(), ttl)


def batch_mint_request(
    collection: Address,
    recipients: Sequence[Address],
    start_index: int,
    content: Optional[Cell] = None,
    max_supply: Optional[int] = None,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    """Mint consecutive items starting at start_index, one per recipient."""
    if recipients:
        _check_supply(start_index + len(recipients) - 1, max_supply)
    entries = BatchDictionary.for_recipients(recipients, start_index, content=content)
    body = BatchMintMessage(entries).to_cell()
    return _single(collection, BATCH_MINT_AMOUNT_PER_ITEM * len(recipients), body, ttl)


def withdraw_request(collection: Address, ttl: int = REQUEST_TTL_SEC) -> TransactionRequest:
    return _single(collection, ADMIN_MESSAGE_AMOUNT, EmergencyWithdrawMessage().to_cell(), ttl)


def royalties_request(
    collection: Address,
    royalty: RoyaltyParams,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    body = ChangeRoyaltiesMessage(royalty).to_cell()
    return _single(collection, ADMIN_MESSAGE_AMOUNT, body, ttl)


def change_owner_request(
    collection: Address,
    new_owner: Address,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    body = ChangeOwnerMessage(new_owner).to_cell()
    return _single(collection, ADMIN_MESSAGE_AMOUNT, body, ttl)


def change_content_request(
    collection: Address,
    config: CollectionConfig,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    body = ChangeContentMessage(config.to_cell()).to_cell()
    return _single(collection, ADMIN_MESSAGE_AMOUNT, body, ttl)


def change_mint_price_request(
    collection: Address,
    price: int,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    body = ChangeMintPriceMessage(price).to_cell()
    return _single(collection, ADMIN_MESSAGE_AMOUNT, body, ttl)


def change_item_amount_request(
    collection: Address,
    amount: int,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    body = ChangeNftItemAmountMessage(amount).to_cell()
    return _single(collection, ADMIN_MESSAGE_AMOUNT, body, ttl)


def change_max_supply_request(
    collection: Address,
    max_supply: int,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    body = ChangeMaxSupplyMessage(max_supply).to_cell()
    return _single(collection, ADMIN_MESSAGE_AMOUNT, body, ttl)


def deploy_collection_request(
    collection_code: Cell,
    config: CollectionConfig,
    workchain: int = BASECHAIN,
    ttl: int = REQUEST_TTL_SEC,
) -> Tuple[TransactionRequest, Address]:
    """Deploy a collection; returns the request and the collection address."""
    state_init, address = config.deployment(collection_code, workchain)
    return _single(address, COLLECTION_DEPLOY_AMOUNT, None, ttl, state_init), address


# ==============================================================================
# ITEM AND SALE
# ==============================================================================
def transfer_request(
    nft: Address,
    new_owner: Address,
    response_destination: Address,
    forward_amount: int = TRANSFER_FORWARD_AMOUNT,
    ttl: int = REQUEST_TTL_SEC,
) -> TransactionRequest:
    body = TransferMessage(new_owner, response_destination, forward_amount).to_cell()
    return _single(nft, TRANSFER_AMOUNT, body, ttl)


def deploy_sale_request(
    sale_code: Cell,
    config: SaleConfig,
    ttl: int = REQUEST_TTL_SEC,
) -> Tuple[TransactionRequest, Address]:
    """
    Deploy a sale contract.

    Returns the request and the sale address; the seller then transfers
    the NFT to that address with transfer_request.
    """
    state_init, address = config.deployment(sale_code)
    return _single(address, SALE_DEPLOY_AMOUNT, None, ttl, state_init), address


def cancel_sale_request(sale: Address, ttl: int = REQUEST_TTL_SEC) -> TransactionRequest:
    return _single(sale, ADMIN_MESSAGE_AMOUNT, cancel_body(), ttl)
