"""Command line interface."""

import json

import pytest

from tiwiflix.cli.main import build_parser, load_cell, main, to_jsonable
from tiwiflix.content.offchain import encode_offchain
from tiwiflix.core.cells import begin_cell, from_base64, parse_address, to_base64
from tiwiflix.core.errors import BocError
from tiwiflix.core.state_init import AddressDeriver
from tiwiflix.network.messages import EmergencyWithdrawMessage, MintMessage, decode_body

ENV_VARS = (
    "TIWIFLIX_NETWORK",
    "TIWIFLIX_TONCENTER_ENDPOINT",
    "TIWIFLIX_TONCENTER_API_KEY",
    "TIWIFLIX_REQUEST_TTL",
    "TIWIFLIX_WORKCHAIN",
)


@pytest.fixture
def cli(monkeypatch, tmp_path, capsys):
    """Run the CLI with a clean environment; returns (exit code, parsed stdout)."""
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env_file = str(tmp_path / "missing.env")

    def invoke(*argv):
        code = main(["--env-file", env_file, *argv])
        out = capsys.readouterr().out
        return code, json.loads(out) if out else None

    return invoke


def test_mint(cli, collection, owner):
    code, result = cli(
        "mint", "--collection", collection.to_str(), "--owner", owner.to_str(False),
        "--index", "5", "--price", "0.1",
    )
    assert code == 0
    message = result["messages"][0]
    assert message["amount"] == "150000000"
    assert parse_address(message["address"]) == collection

    body = decode_body(from_base64(message["payload"]))
    assert isinstance(body, MintMessage)
    assert body.item_index == 5
    assert body.owner == owner


def test_batch_mint_too_large(cli, collection, owner):
    code, result = cli(
        "batch-mint", "--collection", collection.to_str(), "--start-index", "0",
        *[owner.to_str()] * 81,
    )
    assert code == 1
    assert result is None


def test_royalties_requires_share(cli, collection, owner):
    code, _ = cli("royalties", "--collection", collection.to_str(), "--address", owner.to_str())
    assert code == 1
    code, result = cli(
        "royalties", "--collection", collection.to_str(), "--address", owner.to_str(), "--percent", "5",
    )
    assert code == 0
    body = decode_body(from_base64(result["messages"][0]["payload"]))
    assert body.royalty.factor == 50


def test_invalid_address_exits():
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["withdraw", "--collection", "EQnotanaddress"])
    assert exc.value.code == 2


def test_decode_body(cli):
    boc = to_base64(EmergencyWithdrawMessage(query_id=7).to_cell())
    code, result = cli("decode-body", boc)
    assert code == 0
    assert result == {"type": "EmergencyWithdrawMessage", "query_id": 7}


def test_decode_content_from_file(cli, tmp_path):
    path = tmp_path / "content.boc"
    path.write_bytes(encode_offchain("https://tiwiflix.io/collection.json").to_boc())
    code, result = cli("decode-content", str(path))
    assert code == 0
    assert result == {"content": "https://tiwiflix.io/collection.json"}


def test_item_address(cli, collection, item_code):
    code, result = cli(
        "address", "--code", to_base64(item_code),
        "--collection", collection.to_str(), "--index", "2",
    )
    assert code == 0
    expected = AddressDeriver.item_address(item_code, collection, 2)
    assert result["raw"] == expected.to_str(False)


def test_address_needs_data(cli, item_code):
    code, _ = cli("address", "--code", to_base64(item_code))
    assert code == 1


def test_load_cell_rejects_garbage():
    with pytest.raises(BocError):
        load_cell("not base64 !!")


def test_to_jsonable(owner):
    cell = begin_cell().end_cell()
    assert to_jsonable(owner) == owner.to_str()
    assert to_jsonable(cell) == to_base64(cell)
    assert to_jsonable([1, None, True]) == [1, None, True]


def test_scan_commands_parse_addresses(collection, owner):
    args = build_parser().parse_args(
        ["owned", "--collection", collection.to_str(), "--owner", owner.to_str(False)]
    )
    assert (args.command, args.collection, args.owner) == ("owned", collection, owner)

    args = build_parser().parse_args(["for-sale", "--collection", collection.to_str()])
    assert (args.command, args.collection) == ("for-sale", collection)

    with pytest.raises(SystemExit):
        build_parser().parse_args(["owned", "--collection", collection.to_str()])
