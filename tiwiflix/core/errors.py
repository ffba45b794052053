"""
TiwiFlix Error Types v1.0

All errors derive from ValueError so callers that already guard
malformed input keep working.
"""

from __future__ import annotations
from typing import Optional


class TiwiFlixError(ValueError):
    """Base class for every error raised by this package."""


class CapacityError(TiwiFlixError):
    """
    Input exceeds a budget.

    Raised when a cell would hold more than 1023 bits or 4 refs, a value
    is wider than its field, or a batch holds more than 80 entries.
    """

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class InvariantViolation(TiwiFlixError):
    """Input breaks a local invariant (duplicate index, factor > base, ...)."""


class LayoutMismatch(TiwiFlixError):
    """A getter stack or message body does not follow its fixed layout."""


class CellUnderflow(LayoutMismatch):
    """Attempt to read past the end of a slice."""


class BocError(TiwiFlixError):
    """Malformed bag-of-cells bytes or address text."""


class GetterError(TiwiFlixError):
    """A remote getter call failed."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code
