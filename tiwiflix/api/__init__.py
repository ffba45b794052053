"""
TiwiFlix API Module v1.0

Getter transport over the toncenter HTTP API.
"""

from tiwiflix.api.toncenter import ToncenterClient, parse_stack, serialize_stack_args

__all__ = [
    "ToncenterClient",
    "parse_stack",
    "serialize_stack_args",
]
