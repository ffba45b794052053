"""
TiwiFlix Content Codec v1.0

TEP-64 content cells.

  off-chain:  0x01 · utf8(uri)     collection metadata URL
  raw:        utf8(text)           item suffix appended to the common prefix

Item content is stored without the marker because the collection carries
the common URL prefix, so decoding accepts both forms.
"""

from __future__ import annotations

from tiwiflix.constants import OFFCHAIN_CONTENT_PREFIX
from tiwiflix.content import snake
from tiwiflix.core.cells import Cell


def encode_offchain(uri: str) -> Cell:
    return snake.encode(bytes([OFFCHAIN_CONTENT_PREFIX]) + uri.encode("utf-8"))


def encode_raw(text: str) -> Cell:
    return snake.encode(text.encode("utf-8"))


def is_offchain(cell: Cell) -> bool:
    data = snake.decode(cell)
    return bool(data) and data[0] == OFFCHAIN_CONTENT_PREFIX


def decode(cell: Cell) -> str:
    data = snake.decode(cell)
    if data and data[0] == OFFCHAIN_CONTENT_PREFIX:
        data = data[1:]
    return data.decode("utf-8", errors="replace")
