"""
TiwiFlix Cell Layer v1.0

Cells, builders, slices, addresses and dictionaries come from pytoniq-core.
This module translates its exceptions into the package error types and
adds the checks the library leaves to callers:

  building()      bit/ref/field overflow   -> CapacityError
  parsing()       read past the end        -> CellUnderflow
                  unknown address tag      -> LayoutMismatch
  load_boc()      malformed wire bytes     -> BocError
  parse_address() malformed address text   -> BocError
"""

from __future__ import annotations
import base64
import binascii
from contextlib import contextmanager
from typing import Iterator, Optional

from pytoniq_core import (
    Address,
    AddressError,
    Builder,
    Cell,
    CellError,
    ExternalAddress,
    HashMap,
    Slice,
    begin_cell,
)
from pytoniq_core.boc.deserialize import BocError as RawBocError
from pytoniq_core.boc.hashmap import DictError
from pytoniq_core.boc.slice import SliceError
from pytoniq_core.boc.tvm_bitarray import (
    TvmBitarrayOverflowException,
    TvmBitarrayUnderflowException,
)

from tiwiflix.constants import ADDRESS_HASH_SIZE, MAX_CELL_REFS
from tiwiflix.core.errors import (
    BocError,
    CapacityError,
    CellUnderflow,
    LayoutMismatch,
    TiwiFlixError,
)

__all__ = [
    "Address",
    "Builder",
    "Cell",
    "HashMap",
    "Slice",
    "begin_cell",
    "building",
    "parsing",
    "store_ref",
    "end_parse",
    "load_std_address",
    "parse_address",
    "load_boc",
    "to_base64",
    "from_base64",
]


# ==============================================================================
# ERROR TRANSLATION
# ==============================================================================
@contextmanager
def building(what: str = "cell") -> Iterator[None]:
    """Run builder calls; overflow of any kind becomes CapacityError."""
    try:
        yield
    except TiwiFlixError:
        raise
    except (TvmBitarrayOverflowException, OverflowError, CellError, DictError) as e:
        raise CapacityError(f"{what}: {e}") from e
    except ValueError as e:
        # bitarray.int2ba rejects negative values for unsigned fields
        raise CapacityError(f"{what}: {e}") from e


@contextmanager
def parsing(what: str = "cell") -> Iterator[None]:
    """Run slice reads; underflow becomes CellUnderflow."""
    try:
        yield
    except TiwiFlixError:
        raise
    except (TvmBitarrayUnderflowException, IndexError, ValueError) as e:
        raise CellUnderflow(f"{what}: read past the end of the cell") from e
    except SliceError as e:
        raise LayoutMismatch(f"{what}: {e}") from e


def store_ref(b: Builder, cell: Cell) -> Builder:
    """store_ref with the ref budget checked up front."""
    if not isinstance(cell, Cell):
        raise TypeError(f"Expected Cell, got {type(cell).__name__}")
    if b.available_refs < 1:
        raise CapacityError(f"Cell overflow: more than {MAX_CELL_REFS} refs")
    return b.store_ref(cell)


def end_parse(s: Slice, what: str = "cell"):
    """Fail unless every bit and ref has been consumed."""
    if s.remaining_bits or s.remaining_refs:
        raise LayoutMismatch(
            f"{what}: unread data, {s.remaining_bits} bits and {s.remaining_refs} refs"
        )


# ==============================================================================
# ADDRESSES
# ==============================================================================
def load_std_address(s: Slice) -> Optional[Address]:
    """Load addr_std, or None for addr_none."""
    address = s.load_address()
    if isinstance(address, ExternalAddress):
        raise LayoutMismatch("External addresses are not supported")
    if address is not None and address.anycast is not None:
        raise LayoutMismatch("Anycast addresses are not supported")
    return address


def parse_address(text: str) -> Address:
    """
    Parse a raw (wc:hex) or user-friendly address.

    BocError is a ValueError, so argparse reports it as a usage error.
    """
    try:
        address = Address(text.strip())
    except (AddressError, ValueError, IndexError) as e:
        raise BocError(f"Invalid address {text!r}") from e
    if len(address.hash_part) != ADDRESS_HASH_SIZE or not -128 <= address.wc <= 127:
        raise BocError(f"Invalid address {text!r}")
    return address


# ==============================================================================
# BAG OF CELLS
# ==============================================================================
def load_boc(data: bytes) -> Cell:
    """Single-root bag of cells; CRC32C is checked when present."""
    try:
        return Cell.one_from_boc(bytes(data))
    except RawBocError as e:
        raise BocError(f"Malformed bag of cells: {e}") from e
    except Exception as e:
        # Truncated cells surface as IndexError/ValueError, a broken
        # topological order as a bare Exception
        raise BocError(f"Malformed bag of cells: {e}") from e


def to_base64(cell: Cell) -> str:
    """BOC with CRC32C, base64, as wallets expect it."""
    return base64.b64encode(cell.to_boc(hash_crc32=True)).decode("ascii")


def from_base64(text: str) -> Cell:
    try:
        data = base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise BocError(f"Not a base64 BOC: {text[:32]!r}") from e
    return load_boc(data)
