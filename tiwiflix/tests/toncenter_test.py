"""Toncenter stack conversion and getter client."""

import pytest

from tiwiflix.api.toncenter import ToncenterClient, parse_stack, serialize_stack_args
from tiwiflix.cli.main import collection_info, items_for_sale, owned_items
from tiwiflix.config import Config
from tiwiflix.content.offchain import encode_offchain
from tiwiflix.constants import SALE_DATA_MAGIC
from tiwiflix.core.cells import Address, begin_cell, from_base64, load_std_address, to_base64
from tiwiflix.core.errors import GetterError, LayoutMismatch


def slice_entry(address):
    cell = begin_cell().store_address(address).end_cell()
    return ["cell", {"bytes": to_base64(cell), "object": {}}]


def num(value):
    return ["num", hex(value) if value >= 0 else "-" + hex(-value)]


# ==============================================================================
# STACK CONVERSION
# ==============================================================================
def test_serialize_args(owner):
    cell = begin_cell().store_uint(1, 8).end_cell()
    stack = serialize_stack_args([5, -1, cell, owner])
    assert stack[0] == ["num", "5"]
    assert stack[1] == ["num", "-1"]
    assert stack[2] == ["tvm.Cell", to_base64(cell)]
    assert stack[3][0] == "tvm.Slice"
    assert load_std_address(from_base64(stack[3][1]).begin_parse()) == owner


def test_serialize_rejects_other_types():
    with pytest.raises(TypeError):
        serialize_stack_args([True])
    with pytest.raises(TypeError):
        serialize_stack_args(["5"])


def test_parse_stack(owner):
    cell = begin_cell().store_uint(7, 8).end_cell()
    stack = parse_stack([
        ["num", "0x1a"],
        ["num", "-0x1"],
        ["num", "12"],
        ["null"],
        ["cell", {"bytes": to_base64(cell)}],
        slice_entry(owner),
        ["tuple", {"elements": [
            {"@type": "tvm.stackEntryNumber", "number": {"number": "3"}},
            {"@type": "tvm.stackEntryCell", "cell": to_base64(cell)},
        ]}],
    ])
    assert stack[:4] == [26, -1, 12, None]
    assert stack[4] == cell
    assert load_std_address(stack[5].begin_parse()) == owner
    assert stack[6] == [3, cell]


def test_parse_unknown_entry():
    with pytest.raises(LayoutMismatch):
        parse_stack([["continuation", {}]])


# ==============================================================================
# CLIENT
# ==============================================================================
async def test_getter_roundtrip(toncenter, collection):
    fake, endpoint = toncenter
    fake.reply("get_minting_price", [num(100_000_000)])

    async with ToncenterClient(endpoint, api_key="secret") as client:
        assert await client.get_minting_price(collection) == 100_000_000

    headers, body = fake.requests[0]
    assert headers["X-API-Key"] == "secret"
    assert body["method"] == "get_minting_price"
    assert body["address"] == collection.to_str()
    assert body["stack"] == []


async def test_getter_arguments(toncenter, collection, owner):
    fake, endpoint = toncenter
    fake.reply("get_nft_address_by_index", [slice_entry(owner)])

    async with ToncenterClient(endpoint) as client:
        assert await client.get_nft_address_by_index(collection, 4) == owner

    headers, body = fake.requests[0]
    assert "X-API-Key" not in headers
    assert body["stack"] == [["num", "4"]]


async def test_exit_code(toncenter, collection):
    fake, endpoint = toncenter
    fake.reply("get_max_supply", [], exit_code=11)

    async with ToncenterClient(endpoint) as client:
        with pytest.raises(GetterError) as exc:
            await client.get_max_supply(collection)
    assert exc.value.exit_code == 11


async def test_api_error(toncenter, collection):
    fake, endpoint = toncenter
    fake.fail("get_collection_data", 416, "account is not initialized")

    async with ToncenterClient(endpoint) as client:
        with pytest.raises(GetterError):
            await client.get_collection_data(collection)


async def test_unreachable_endpoint(collection):
    async with ToncenterClient("http://127.0.0.1:9/api/v2", timeout=2) as client:
        with pytest.raises(GetterError):
            await client.get_minting_price(collection)


async def test_malformed_stack(toncenter, collection):
    fake, endpoint = toncenter
    fake.reply("get_minting_price", [["num", "zz"]])

    async with ToncenterClient(endpoint) as client:
        with pytest.raises(LayoutMismatch):
            await client.get_minting_price(collection)


async def test_collection_info(toncenter, collection, owner):
    fake, endpoint = toncenter
    content = encode_offchain("https://tiwiflix.io/collection.json")
    fake.reply("get_collection_data", [
        num(3), ["cell", {"bytes": to_base64(content)}], slice_entry(owner),
    ])
    fake.reply("royalty_params", [num(50), num(1000), slice_entry(owner)])
    fake.reply("get_minting_price", [num(100_000_000)])
    fake.reply("get_max_supply", [num(10_000)])

    info = await collection_info(collection, Config(toncenter_endpoint=endpoint))
    assert info["next_item_index"] == 3
    assert info["content_url"] == "https://tiwiflix.io/collection.json"
    assert info["owner"] == owner.to_str()
    assert info["royalty_percent"] == 5.0
    assert info["max_supply"] == 10_000
    assert len(fake.requests) == 4


# ==============================================================================
# COLLECTION SCANS
# ==============================================================================
def account(n):
    return Address((0, n.to_bytes(32, "big")))


def cell_entry(cell):
    return ["cell", {"bytes": to_base64(cell)}]


def nft_stack(index, collection, holder):
    content = begin_cell().store_bytes(f"/{index}.json".encode()).end_cell()
    return [num(1), num(index), slice_entry(collection), slice_entry(holder), cell_entry(content)]


def sale_stack(nft, seller, complete, price=2_000_000_000):
    marketplace = account(0xBEEF)
    return [
        num(SALE_DATA_MAGIC), num(-1 if complete else 0), num(1_700_000_000),
        slice_entry(marketplace), slice_entry(nft), slice_entry(seller),
        num(price),
        slice_entry(marketplace), num(40_000_000),
        slice_entry(seller), num(100_000_000),
    ]


@pytest.fixture
def listed(toncenter, collection, owner, other):
    """
    Three items: #0 held by `owner`, #1 by an open sale of `other`,
    #2 by a finished sale.
    """
    fake, endpoint = toncenter
    items = [account(100), account(101), account(102)]
    open_sale, closed_sale = account(201), account(202)
    holders = [owner, open_sale, closed_sale]

    fake.reply("get_collection_data", [num(3), cell_entry(begin_cell().end_cell()), slice_entry(owner)])
    fake.reply_each("get_nft_address_by_index", [[slice_entry(item)] for item in items])
    for index, (item, holder) in enumerate(zip(items, holders)):
        fake.reply("get_nft_data", nft_stack(index, collection, holder), address=item)
    fake.reply("get_sale_data", [], exit_code=11, address=owner)
    fake.reply("get_sale_data", sale_stack(items[1], other, complete=False), address=open_sale)
    fake.reply("get_sale_data", sale_stack(items[2], other, complete=True), address=closed_sale)
    return fake, endpoint, items, open_sale


async def test_iter_items(listed, collection, owner):
    fake, endpoint, items, open_sale = listed
    async with ToncenterClient(endpoint) as client:
        found = [item async for item in client.iter_items(collection)]

    assert [item.index for item in found] == [0, 1, 2]
    assert [item.address for item in found] == items
    assert found[0].data.owner == owner
    assert found[1].data.content_url == "/1.json"
    index_args = [body["stack"] for _, body in fake.requests if body["method"] == "get_nft_address_by_index"]
    assert index_args == [[["num", "0"]], [["num", "1"]], [["num", "2"]]]


async def test_iter_items_skips_failing_item(toncenter, collection, owner):
    fake, endpoint = toncenter
    first, second = account(100), account(101)
    fake.reply("get_collection_data", [num(2), cell_entry(begin_cell().end_cell()), slice_entry(owner)])
    fake.reply_each("get_nft_address_by_index", [[slice_entry(first)], [slice_entry(second)]])
    fake.fail("get_nft_data", 416, "account is not initialized", address=first)
    fake.reply("get_nft_data", nft_stack(1, collection, owner), address=second)

    async with ToncenterClient(endpoint) as client:
        found = [item async for item in client.iter_items(collection)]
    assert [item.index for item in found] == [1]


async def test_find_items_by_owner(listed, collection, owner, other):
    fake, endpoint, items, open_sale = listed
    async with ToncenterClient(endpoint) as client:
        mine = await client.find_items_by_owner(collection, owner)
        selling = await client.find_items_by_owner(collection, open_sale)
        none = await client.find_items_by_owner(collection, other)

    assert [(item.index, item.address) for item in mine] == [(0, items[0])]
    assert [item.index for item in selling] == [1]
    assert none == []


async def test_find_items_for_sale(listed, collection, other):
    fake, endpoint, items, open_sale = listed
    async with ToncenterClient(endpoint) as client:
        listings = await client.find_items_for_sale(collection)

    assert len(listings) == 1
    listing = listings[0]
    assert (listing.index, listing.nft, listing.sale) == (1, items[1], open_sale)
    assert listing.seller == other
    assert listing.price == 2_000_000_000


async def test_owned_items_command(listed, collection, owner):
    fake, endpoint, items, open_sale = listed
    result = await owned_items(collection, owner, Config(toncenter_endpoint=endpoint))
    assert result == [{"index": 0, "address": items[0].to_str(), "content": "/0.json"}]


async def test_items_for_sale_command(listed, collection, other):
    fake, endpoint, items, open_sale = listed
    result = await items_for_sale(collection, Config(toncenter_endpoint=endpoint))
    assert result == [{
        "index": 1,
        "nft": items[1].to_str(),
        "sale": open_sale.to_str(),
        "seller": other.to_str(),
        "price": "2",
    }]
