"""
TiwiFlix Batch Minting v1.0

The batch mint dictionary maps item index (uint64) to a reference to

  amount(coins) · ^[owner · ^content]

The collection rejects batches over 80 entries with exit code 399; the
same limit is enforced here before anything is sent.
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence

from tiwiflix.constants import (
    BATCH_KEY_BITS,
    DEFAULT_ITEM_CONTENT,
    DEFAULT_ITEM_STORAGE_AMOUNT,
    MAX_BATCH_SIZE,
)
from tiwiflix.content.offchain import encode_raw
from tiwiflix.core.cells import (
    Address,
    Builder,
    Cell,
    HashMap,
    Slice,
    building,
    end_parse,
    parsing,
)
from tiwiflix.core.errors import CapacityError, InvariantViolation
from tiwiflix.core.types import BatchEntry, item_init_cell
from tiwiflix.network.protocol import ExitCode

logger = logging.getLogger(__name__)


def _write_entry(entry: BatchEntry, b: Builder) -> None:
    b.store_ref(entry.value_cell())


def _read_entry(s: Slice) -> Cell:
    value = s.load_ref()
    end_parse(s, "batch entry")
    return value


class BatchDictionary:
    """Builder and parser for batch mint dictionaries."""

    @staticmethod
    def build(entries: Iterable[BatchEntry]) -> Optional[Cell]:
        """
        Dictionary root for `entries`, or None for an empty batch.

        Raises InvariantViolation on a repeated index and CapacityError
        (exit_code 399) when more than 80 entries are given.
        """
        by_index = {}
        for entry in entries:
            if entry.index in by_index:
                raise InvariantViolation(f"Duplicate item index {entry.index} in batch")
            by_index[entry.index] = entry

        if len(by_index) > MAX_BATCH_SIZE:
            raise CapacityError(
                f"Batch of {len(by_index)} items exceeds limit of {MAX_BATCH_SIZE}",
                exit_code=ExitCode.BATCH_TOO_LARGE,
            )

        logger.debug(f"Building batch dictionary with {len(by_index)} entries")
        items = HashMap(BATCH_KEY_BITS, value_serializer=_write_entry)
        with building("batch dictionary"):
            for index, entry in by_index.items():
                items.set_int_key(index, entry)
            return items.serialize()

    @staticmethod
    def parse(root: Optional[Cell]) -> List[BatchEntry]:
        """Entries of a batch dictionary, ordered by index."""
        if root is None:
            return []
        with parsing("batch dictionary"):
            values = HashMap.parse(root.begin_parse(), BATCH_KEY_BITS, value_deserializer=_read_entry)
        return [BatchEntry.from_value_cell(index, values[index]) for index in sorted(values)]

    @staticmethod
    def for_recipients(
        recipients: Sequence[Address],
        start_index: int,
        amount: int = DEFAULT_ITEM_STORAGE_AMOUNT,
        content: Optional[Cell] = None,
    ) -> List[BatchEntry]:
        """One entry per recipient with consecutive indices from start_index."""
        if content is None:
            content = encode_raw(DEFAULT_ITEM_CONTENT)
        return [
            BatchEntry(start_index + i, amount, item_init_cell(owner, content))
            for i, owner in enumerate(recipients)
        ]
