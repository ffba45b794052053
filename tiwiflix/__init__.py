"""
TiwiFlix v1.0

Cell encoding, message bodies and wallet requests for the TiwiFlix TON NFT
marketplace.
"""

from tiwiflix.constants import PROJECT, VERSION

__version__ = VERSION

__all__ = [
    "PROJECT",
    "VERSION",
    "__version__",
]
