"""
TiwiFlix CLI v1.0

Builds wallet requests for the NFT collection, decodes cells and reads
on-chain state. Requests are printed as TonConnect JSON; nothing is signed
or sent.

Usage:
    python -m tiwiflix.cli.main mint --collection EQ... --owner EQ... --index 0
    python -m tiwiflix.cli.main info --collection EQ...
"""

from __future__ import annotations
import argparse
import asyncio
import base64
import binascii
import dataclasses
import json
import logging
import os
import sys
from typing import Any, List, Optional

from tiwiflix.api.toncenter import ToncenterClient
from tiwiflix.config import Config, load_config
from tiwiflix.constants import (
    DEFAULT_ITEM_CONTENT,
    MAX_BATCH_SIZE,
    PROJECT,
    ROYALTY_PERCENT_BASE,
    VERSION,
)
from tiwiflix.content.offchain import decode as decode_content, encode_raw
from tiwiflix.core.cells import Address, Cell, load_boc, parse_address, to_base64
from tiwiflix.core.coins import from_nano, to_nano
from tiwiflix.core.errors import BocError, TiwiFlixError
from tiwiflix.core.state_init import AddressDeriver
from tiwiflix.core.types import RoyaltyParams
from tiwiflix.network import requests
from tiwiflix.network.messages import decode_body

logger = logging.getLogger("tiwiflix.cli")


# Configure logging
def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tiwiflix",
        description=f"{PROJECT} NFT toolkit v{VERSION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Mint item #5 for a user at the current mint price
  tiwiflix mint --collection EQ... --owner EQ... --index 5 --price 0.1

  # Batch mint to three owners starting at index 10
  tiwiflix batch-mint --collection EQ... --start-index 10 EQ... EQ... EQ...

  # Decode a message body
  tiwiflix decode-body te6cckEB...

  # Read collection state
  tiwiflix info --collection EQ...

  # Items on open sales
  tiwiflix for-sale --collection EQ...
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument("--version", action="version", version=f"{PROJECT} v{VERSION}")

    sub = parser.add_subparsers(dest="command", required=True)

    # Collection requests
    p = sub.add_parser("mint", help="Mint one item")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--owner", type=parse_address, required=True)
    p.add_argument("--index", type=int, required=True)
    p.add_argument("--price", default="0.1", help="Mint price in TON (default: 0.1)")
    p.add_argument("--content", default=DEFAULT_ITEM_CONTENT,
                   help=f"Item content suffix (default: {DEFAULT_ITEM_CONTENT})")
    p.add_argument("--max-supply", type=int, default=None)

    p = sub.add_parser("batch-mint", help=f"Mint up to {MAX_BATCH_SIZE} items")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--start-index", type=int, required=True)
    p.add_argument("--content", default=DEFAULT_ITEM_CONTENT)
    p.add_argument("--max-supply", type=int, default=None)
    p.add_argument("recipients", nargs="+", type=parse_address)

    p = sub.add_parser("royalties", help="Update collection royalties")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--address", type=parse_address, required=True)
    p.add_argument("--percent", default=None, help="Royalty percentage, e.g. 5 or 2.5")
    p.add_argument("--factor", type=int, default=None)
    p.add_argument("--base", type=int, default=ROYALTY_PERCENT_BASE)

    p = sub.add_parser("withdraw", help="Withdraw collection balance")
    p.add_argument("--collection", type=parse_address, required=True)

    p = sub.add_parser("change-owner", help="Transfer collection ownership")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--new-owner", type=parse_address, required=True)

    p = sub.add_parser("change-price", help="Set mint price")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--price", required=True, help="New mint price in TON")

    p = sub.add_parser("change-item-amount", help="Set coins forwarded to new items")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--amount", required=True, help="Amount in TON")

    p = sub.add_parser("change-max-supply", help="Set max supply")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--max-supply", type=int, required=True)

    # Item requests
    p = sub.add_parser("transfer", help="Transfer an NFT")
    p.add_argument("--nft", type=parse_address, required=True)
    p.add_argument("--new-owner", type=parse_address, required=True)
    p.add_argument("--response", type=parse_address, required=True)
    p.add_argument("--forward", default="0.01", help="Forward amount in TON (default: 0.01)")

    # Offline tools
    p = sub.add_parser("address", help="Derive a contract or item address")
    p.add_argument("--code", required=True, help="Code BOC (file path or base64)")
    p.add_argument("--data", default=None, help="Data BOC (file path or base64)")
    p.add_argument("--collection", type=parse_address, default=None,
                   help="Collection address, with --index, to derive an item address")
    p.add_argument("--index", type=int, default=None)

    p = sub.add_parser("decode-body", help="Decode a message body BOC")
    p.add_argument("boc", help="File path or base64")

    p = sub.add_parser("decode-content", help="Decode a content cell BOC")
    p.add_argument("boc", help="File path or base64")

    # Getters
    p = sub.add_parser("info", help="Read collection state through toncenter")
    p.add_argument("--collection", type=parse_address, required=True)

    p = sub.add_parser("owned", help="List items of a collection held by an owner")
    p.add_argument("--collection", type=parse_address, required=True)
    p.add_argument("--owner", type=parse_address, required=True)

    p = sub.add_parser("for-sale", help="List items of a collection on open sales")
    p.add_argument("--collection", type=parse_address, required=True)

    return parser


def load_cell(source: str) -> Cell:
    """Read a BOC from a file or a base64 string."""
    if os.path.isfile(source):
        with open(source, "rb") as f:
            return load_boc(f.read())
    try:
        data = base64.b64decode(source, validate=True)
    except binascii.Error as e:
        raise BocError(f"Not a file or base64 BOC: {source[:32]!r}") from e
    return load_boc(data)


def to_jsonable(value: Any) -> Any:
    if isinstance(value, Address):
        return value.to_str()
    if isinstance(value, Cell):
        return to_base64(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {"type": type(value).__name__}
        for f in dataclasses.fields(value):
            result[f.name] = to_jsonable(getattr(value, f.name))
        return result
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, int):
        return int(value)
    return str(value)


def _royalty(args: argparse.Namespace) -> RoyaltyParams:
    if args.percent is not None:
        return RoyaltyParams.from_percentage(args.percent, args.address, args.base)
    if args.factor is None:
        raise TiwiFlixError("Either --percent or --factor is required")
    return RoyaltyParams(args.factor, args.base, args.address)


def build_request(args: argparse.Namespace, config: Config) -> requests.TransactionRequest:
    ttl = config.request_ttl
    cmd = args.command

    if cmd == "mint":
        return requests.mint_request(
            args.collection, args.owner, args.index,
            mint_price=to_nano(args.price),
            content=encode_raw(args.content),
            max_supply=args.max_supply,
            ttl=ttl,
        )
    if cmd == "batch-mint":
        return requests.batch_mint_request(
            args.collection, args.recipients, args.start_index,
            content=encode_raw(args.content),
            max_supply=args.max_supply,
            ttl=ttl,
        )
    if cmd == "royalties":
        return requests.royalties_request(args.collection, _royalty(args), ttl=ttl)
    if cmd == "withdraw":
        return requests.withdraw_request(args.collection, ttl=ttl)
    if cmd == "change-owner":
        return requests.change_owner_request(args.collection, args.new_owner, ttl=ttl)
    if cmd == "change-price":
        return requests.change_mint_price_request(args.collection, to_nano(args.price), ttl=ttl)
    if cmd == "change-item-amount":
        return requests.change_item_amount_request(args.collection, to_nano(args.amount), ttl=ttl)
    if cmd == "change-max-supply":
        return requests.change_max_supply_request(args.collection, args.max_supply, ttl=ttl)
    if cmd == "transfer":
        return requests.transfer_request(
            args.nft, args.new_owner, args.response,
            forward_amount=to_nano(args.forward),
            ttl=ttl,
        )
    raise TiwiFlixError(f"{cmd} does not build a request")


def derive_address(args: argparse.Namespace, config: Config) -> Address:
    code = load_cell(args.code)
    if args.collection is not None:
        if args.index is None:
            raise TiwiFlixError("--index is required with --collection")
        return AddressDeriver.item_address(code, args.collection, args.index, config.workchain)
    if args.data is None:
        raise TiwiFlixError("Either --data or --collection/--index is required")
    return AddressDeriver.derive(code, load_cell(args.data), config.workchain)


def _client(config: Config) -> ToncenterClient:
    return ToncenterClient(
        config.toncenter_endpoint,
        api_key=config.toncenter_api_key,
        timeout=config.toncenter_timeout,
    )


async def collection_info(collection: Address, config: Config) -> dict:
    async with _client(config) as client:
        data = await client.get_collection_data(collection)
        royalty = await client.get_royalty_params(collection)
        mint_price = await client.get_minting_price(collection)
        max_supply = await client.get_max_supply(collection)

    return {
        "collection": collection.to_str(is_test_only=config.testnet),
        "next_item_index": data.next_item_index,
        "content_url": data.content_url,
        "owner": data.owner.to_str(is_test_only=config.testnet) if data.owner else None,
        "royalty_percent": royalty.percentage,
        "royalty_address": royalty.address.to_str(is_test_only=config.testnet),
        "mint_price": from_nano(mint_price),
        "max_supply": max_supply,
    }


async def owned_items(collection: Address, owner: Address, config: Config) -> List[dict]:
    async with _client(config) as client:
        items = await client.find_items_by_owner(collection, owner)
    return [
        {
            "index": item.index,
            "address": item.address.to_str(is_test_only=config.testnet),
            "content": item.data.content_url,
        }
        for item in items
    ]


async def items_for_sale(collection: Address, config: Config) -> List[dict]:
    async with _client(config) as client:
        listings = await client.find_items_for_sale(collection)
    return [
        {
            "index": listing.index,
            "nft": listing.nft.to_str(is_test_only=config.testnet),
            "sale": listing.sale.to_str(is_test_only=config.testnet),
            "seller": to_jsonable(listing.seller),
            "price": from_nano(listing.price),
        }
        for listing in listings
    ]


def run(args: argparse.Namespace, config: Config) -> Any:
    if args.command == "address":
        address = derive_address(args, config)
        return {"raw": address.to_str(False), "friendly": address.to_str(is_test_only=config.testnet)}
    if args.command == "decode-body":
        return to_jsonable(decode_body(load_cell(args.boc)))
    if args.command == "decode-content":
        return {"content": decode_content(load_cell(args.boc))}
    if args.command == "info":
        return asyncio.run(collection_info(args.collection, config))
    if args.command == "owned":
        return asyncio.run(owned_items(args.collection, args.owner, config))
    if args.command == "for-sale":
        return asyncio.run(items_for_sale(args.collection, config))
    return build_request(args, config).to_dict(testnet=config.testnet)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(args.env_file)
        result = run(args, config)
    except TiwiFlixError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
