"""
TiwiFlix Snake Encoding v1.0

Byte strings longer than one cell are stored as a chain:

  head [chunk 0] ─ref→ [chunk 1] ─ref→ ... ─ref→ [chunk N]

Each chunk holds at most 127 bytes (1016 bits). The chain is built from the
tail so every cell is sealed before its parent references it.
"""

from __future__ import annotations

from bitarray import bitarray

from tiwiflix.constants import SNAKE_CHUNK_SIZE
from tiwiflix.core.cells import Cell, begin_cell


def encode(data: bytes) -> Cell:
    """Build a snake chain holding `data`."""
    if not data:
        return Cell.empty()

    chunks = [data[i:i + SNAKE_CHUNK_SIZE] for i in range(0, len(data), SNAKE_CHUNK_SIZE)]
    tail = None
    for chunk in reversed(chunks):
        b = begin_cell().store_bytes(chunk)
        if tail is not None:
            b.store_ref(tail)
        tail = b.end_cell()
    return tail


def decode(cell: Cell) -> bytes:
    """Flatten a snake chain back into bytes."""
    bits = bitarray()
    current = cell
    while current is not None:
        if not len(current.bits):
            break
        bits.extend(current.bits)
        current = current.refs[0] if current.refs else None

    # A trailing partial byte cannot be represented; drop it.
    return bits[:len(bits) - len(bits) % 8].tobytes()
