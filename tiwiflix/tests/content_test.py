"""Off-chain and raw content cells."""

import pytest

from tiwiflix.content import decode, encode_offchain, encode_raw, is_offchain, snake
from tiwiflix.core.cells import begin_cell


@pytest.mark.parametrize("uri", [
    "https://tiwiflix.io/collection.json",
    "ipfs://bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi/",
    "https://tiwiflix.io/фильмы/🎬.json",
    "",
    "https://tiwiflix.io/" + "x" * 500,
])
def test_offchain_round_trip(uri):
    cell = encode_offchain(uri)
    assert snake.decode(cell)[0] == 0x01
    assert is_offchain(cell)
    assert decode(cell) == uri


def test_raw_content():
    cell = encode_raw("/nft.json")
    assert snake.decode(cell) == b"/nft.json"
    assert not is_offchain(cell)
    assert decode(cell) == "/nft.json"


def test_plain_bytes_cell_decodes_unchanged():
    cell = begin_cell().store_bytes(b"/nft.json").end_cell()
    assert decode(cell) == "/nft.json"


def test_invalid_utf8_is_replaced():
    assert decode(snake.encode(b"\x01ok\xff")) == "ok�"
