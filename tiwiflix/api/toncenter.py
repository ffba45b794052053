"""
TiwiFlix Toncenter Client v1.0

Runs contract getters through the toncenter v2 HTTP API.

  POST {endpoint}/runGetMethod
  {"address": ..., "method": ..., "stack": [["num", "5"], ["tvm.Cell", <b64>]]}

  -> {"ok": true, "result": {"exit_code": 0, "stack": [["num", "0x5"], ...]}}

Result entries are converted to the plain values read by the getter
decoders: int, Cell, None and list.
"""

from __future__ import annotations
import asyncio
import base64
import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import aiohttp

from tiwiflix.constants import TONCENTER_MAINNET, TONCENTER_TIMEOUT_SEC
from tiwiflix.core.cells import Address, Cell, begin_cell, load_boc, to_base64
from tiwiflix.core.errors import GetterError, LayoutMismatch
from tiwiflix.core.types import RoyaltyParams
from tiwiflix.network import getters
from tiwiflix.network.getters import CollectionData, ItemRecord, NftData, SaleData, SaleListing
from tiwiflix.network.protocol import GetterMethod

logger = logging.getLogger(__name__)


# ==============================================================================
# STACK CONVERSION
# ==============================================================================
def serialize_stack_args(args: Sequence[Any]) -> List[List[str]]:
    """Getter arguments in toncenter form."""
    stack = []
    for arg in args:
        if isinstance(arg, bool) or not isinstance(arg, (int, Cell, Address)):
            raise TypeError(f"Unsupported getter argument {type(arg).__name__}")
        if isinstance(arg, int):
            stack.append(["num", str(arg)])
        elif isinstance(arg, Cell):
            stack.append(["tvm.Cell", to_base64(arg)])
        else:
            cell = begin_cell().store_address(arg).end_cell()
            stack.append(["tvm.Slice", to_base64(cell)])
    return stack


def _parse_number(text: str) -> int:
    negative = text.startswith("-")
    digits = text[1:] if negative else text
    value = int(digits, 16) if digits.lower().startswith("0x") else int(digits)
    return -value if negative else value


def _parse_boc(data: Any) -> Cell:
    b64 = data["bytes"] if isinstance(data, dict) else data
    return load_boc(base64.b64decode(b64))


def _parse_typed_entry(entry: Dict[str, Any]) -> Any:
    """Entries nested inside tuples and lists use the tvm.stackEntry* form."""
    kind = entry.get("@type")
    if kind == "tvm.stackEntryNumber":
        return int(entry["number"]["number"])
    if kind == "tvm.stackEntryCell":
        return _parse_boc(entry["cell"])
    if kind == "tvm.stackEntrySlice":
        return _parse_boc(entry["slice"])
    if kind == "tvm.stackEntryTuple":
        return [_parse_typed_entry(e) for e in entry["tuple"]["elements"]]
    if kind == "tvm.stackEntryList":
        return [_parse_typed_entry(e) for e in entry["list"]["elements"]]
    raise LayoutMismatch(f"Unsupported stack entry {kind!r}")


def parse_stack(raw: Sequence[Any]) -> List[Any]:
    """Convert a toncenter result stack to plain values."""
    stack = []
    for entry in raw:
        kind = entry[0]
        if kind == "num":
            stack.append(_parse_number(entry[1]))
        elif kind == "null":
            stack.append(None)
        elif kind in ("cell", "slice", "builder"):
            stack.append(_parse_boc(entry[1]))
        elif kind in ("tuple", "list"):
            stack.append([_parse_typed_entry(e) for e in entry[1].get("elements", [])])
        else:
            raise LayoutMismatch(f"Unsupported stack entry type {kind!r}")
    return stack


# ==============================================================================
# CLIENT
# ==============================================================================
class ToncenterClient:
    """
    Asynchronous getter client.

    Use as an async context manager so the HTTP session is closed:

        async with ToncenterClient(api_key=key) as client:
            price = await client.get_minting_price(collection)
    """

    def __init__(
        self,
        endpoint: str = TONCENTER_MAINNET,
        api_key: Optional[str] = None,
        timeout: float = TONCENTER_TIMEOUT_SEC,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> ToncenterClient:
        await self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def start(self):
        if self._session is not None:
            return
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        self._session = aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )

    async def close(self):
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def run_get_method(
        self,
        address: Address,
        method: str,
        args: Sequence[Any] = (),
    ) -> List[Any]:
        """Run a getter and return its parsed result stack."""
        if self._session is None:
            await self.start()

        payload = {
            "address": address.to_str(),
            "method": method,
            "stack": serialize_stack_args(args),
        }
        logger.debug(f"runGetMethod {method} on {address.to_str(False)}")

        try:
            async with self._session.post(f"{self.endpoint}/runGetMethod", json=payload) as resp:
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise GetterError(f"{method}: request failed: {e}") from e
        except ValueError as e:
            raise GetterError(f"{method}: invalid JSON response") from e

        if not isinstance(data, dict) or not data.get("ok"):
            error = data.get("error") if isinstance(data, dict) else data
            raise GetterError(f"{method}: {error}")

        result = data["result"]
        exit_code = result.get("exit_code", 0)
        if exit_code != 0:
            raise GetterError(f"{method} exited with code {exit_code}", exit_code=exit_code)

        try:
            return parse_stack(result.get("stack", []))
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LayoutMismatch(f"{method}: malformed result stack: {e}") from e

    async def call(self, address: Address, method: str, args: Sequence[Any] = ()) -> Any:
        """Run a known getter and decode its result."""
        stack = await self.run_get_method(address, method, args)
        return getters.decode(method, stack)

    # Collection
    async def get_collection_data(self, collection: Address) -> CollectionData:
        return await self.call(collection, GetterMethod.COLLECTION_DATA)

    async def get_royalty_params(self, collection: Address) -> RoyaltyParams:
        return await self.call(collection, GetterMethod.ROYALTY_PARAMS)

    async def get_nft_address_by_index(self, collection: Address, index: int) -> Address:
        return await self.call(collection, GetterMethod.NFT_ADDRESS_BY_INDEX, [index])

    async def get_nft_content(self, collection: Address, index: int, individual: Cell) -> Cell:
        return await self.call(collection, GetterMethod.NFT_CONTENT, [index, individual])

    async def get_minting_price(self, collection: Address) -> int:
        return await self.call(collection, GetterMethod.MINTING_PRICE)

    async def get_nft_item_amount(self, collection: Address) -> int:
        return await self.call(collection, GetterMethod.NFT_ITEM_AMOUNT)

    async def get_max_supply(self, collection: Address) -> int:
        return await self.call(collection, GetterMethod.MAX_SUPPLY)

    async def get_is_verified(self, collection: Address) -> bool:
        return await self.call(collection, GetterMethod.IS_VERIFIED)

    async def get_collection_balance(self, collection: Address) -> int:
        return await self.call(collection, GetterMethod.COLLECTION_BALANCE)

    # Item
    async def get_nft_data(self, nft: Address) -> NftData:
        return await self.call(nft, GetterMethod.NFT_DATA)

    # Sale
    async def get_sale_data(self, sale: Address) -> SaleData:
        return await self.call(sale, GetterMethod.SALE_DATA)

    # Collection scans
    async def iter_items(self, collection: Address) -> AsyncIterator[ItemRecord]:
        """
        Walk items 0 .. next_item_index - 1 of a collection.

        One getter pair per item, so this is slow for large collections.
        Items whose getters fail are logged and skipped.
        """
        data = await self.get_collection_data(collection)
        logger.info(f"Scanning {data.next_item_index} items of {collection.to_str(False)}")
        for index in range(data.next_item_index):
            try:
                address = await self.get_nft_address_by_index(collection, index)
                nft = await self.get_nft_data(address)
            except GetterError as e:
                logger.warning(f"Skipping item #{index}: {e}")
                continue
            yield ItemRecord(index, address, nft)

    async def find_items_by_owner(self, collection: Address, owner: Address) -> List[ItemRecord]:
        return [item async for item in self.iter_items(collection) if item.data.owner == owner]

    async def find_items_for_sale(self, collection: Address) -> List[SaleListing]:
        """Items held by a sale contract whose sale is still open."""
        listings = []
        async for item in self.iter_items(collection):
            holder = item.data.owner
            if holder is None:
                continue
            try:
                sale = await self.get_sale_data(holder)
            except (GetterError, LayoutMismatch) as e:
                logger.debug(f"Item #{item.index} holder is not a sale contract: {e}")
                continue
            if not sale.is_complete:
                listings.append(SaleListing(item.index, item.address, holder, sale))
        return listings
