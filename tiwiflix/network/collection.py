"""
TiwiFlix NFT Collection v1.0

Collection contract data, also sent whole with CHANGE_CONTENT:

  owner
  · next_item_index(64)
  · ^[ ^offchain(collection_url) · ^raw(common_content_url) ]
  · ^nft_item_code
  · ^[ factor(16) · base(16) · royalty_address ]
  · mint_price(coins)
  · verified(1)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Tuple

from tiwiflix.constants import BASECHAIN, DEFAULT_MINT_PRICE, ITEM_INDEX_BITS
from tiwiflix.content.offchain import decode as decode_content, encode_offchain, encode_raw
from tiwiflix.core.cells import Address, Cell, begin_cell, building, end_parse, load_std_address, parsing
from tiwiflix.core.errors import CapacityError, LayoutMismatch
from tiwiflix.core.state_init import AddressDeriver, StateInit
from tiwiflix.core.types import RoyaltyParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionConfig:
    owner: Address
    collection_content_url: str
    common_content_url: str
    nft_item_code: Cell
    royalty: RoyaltyParams
    next_item_index: int = 0
    mint_price: int = DEFAULT_MINT_PRICE
    verified: bool = False

    def __post_init__(self):
        if not 0 <= self.next_item_index < 1 << ITEM_INDEX_BITS:
            raise CapacityError(f"Next item index {self.next_item_index} does not fit uint64")

    def content_cell(self) -> Cell:
        return (
            begin_cell()
            .store_ref(encode_offchain(self.collection_content_url))
            .store_ref(encode_raw(self.common_content_url))
            .end_cell()
        )

    @building("collection config")
    def to_cell(self) -> Cell:
        return (
            begin_cell()
            .store_address(self.owner)
            .store_uint(self.next_item_index, ITEM_INDEX_BITS)
            .store_ref(self.content_cell())
            .store_ref(self.nft_item_code)
            .store_ref(self.royalty.to_cell())
            .store_coins(self.mint_price)
            .store_bit(self.verified)
            .end_cell()
        )

    @classmethod
    @parsing("collection config")
    def from_cell(cls, cell: Cell) -> CollectionConfig:
        s = cell.begin_parse()
        owner = load_std_address(s)
        if owner is None:
            raise LayoutMismatch("Collection owner is missing")
        next_item_index = s.load_uint(ITEM_INDEX_BITS)
        content = s.load_ref().begin_parse()
        collection_url = decode_content(content.load_ref())
        common_url = decode_content(content.load_ref())
        end_parse(content, "collection content")
        item_code = s.load_ref()
        royalty = RoyaltyParams.from_cell(s.load_ref())
        mint_price = s.load_coins()
        verified = s.load_bool()
        end_parse(s, "collection config")
        return cls(
            owner=owner,
            collection_content_url=collection_url,
            common_content_url=common_url,
            nft_item_code=item_code,
            royalty=royalty,
            next_item_index=next_item_index,
            mint_price=mint_price,
            verified=verified,
        )

    def deployment(self, code: Cell, workchain: int = BASECHAIN) -> Tuple[StateInit, Address]:
        """State init and address of a collection deployed with this data."""
        state_init = StateInit(code, self.to_cell())
        address = state_init.address(workchain)
        logger.info(f"Collection deploys at {address.to_str(False)}")
        return state_init, address

    def item_address(self, collection: Address, index: int) -> Address:
        return AddressDeriver.item_address(
            self.nft_item_code, collection, index, collection.wc
        )

    def item_content_url(self, individual: str) -> str:
        """Full metadata URL of an item: common prefix + individual suffix."""
        return self.common_content_url + individual
