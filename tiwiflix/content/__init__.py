"""
TiwiFlix Content Module v1.0

Snake chains and TEP-64 content cells.
"""

from tiwiflix.content import snake
from tiwiflix.content.offchain import encode_offchain, encode_raw, decode, is_offchain

__all__ = [
    "snake",
    "encode_offchain",
    "encode_raw",
    "decode",
    "is_offchain",
]
