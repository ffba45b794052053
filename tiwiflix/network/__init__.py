"""
TiwiFlix Network Module v1.0

Message bodies, getter decoders and wallet requests for the collection,
item and sale contracts.
"""

from tiwiflix.network.protocol import Opcode, ExitCode, GetterMethod

from tiwiflix.network.messages import (
    MintMessage,
    BatchMintMessage,
    ChangeOwnerMessage,
    ChangeContentMessage,
    ChangeMintPriceMessage,
    ChangeNftItemAmountMessage,
    ChangeRoyaltiesMessage,
    ChangeMaxSupplyMessage,
    EmergencyWithdrawMessage,
    TransferMessage,
    decode_body,
)

from tiwiflix.network.batch import BatchDictionary
from tiwiflix.network.getters import (
    StackCursor,
    CollectionData,
    NftData,
    SaleData,
    ItemRecord,
    SaleListing,
    GETTER_DECODERS,
)
from tiwiflix.network.collection import CollectionConfig
from tiwiflix.network.sale import SaleConfig, cancel_body
from tiwiflix.network.requests import OutboundMessage, TransactionRequest

__all__ = [
    # Protocol
    "Opcode",
    "ExitCode",
    "GetterMethod",
    # Messages
    "MintMessage",
    "BatchMintMessage",
    "ChangeOwnerMessage",
    "ChangeContentMessage",
    "ChangeMintPriceMessage",
    "ChangeNftItemAmountMessage",
    "ChangeRoyaltiesMessage",
    "ChangeMaxSupplyMessage",
    "EmergencyWithdrawMessage",
    "TransferMessage",
    "decode_body",
    "BatchDictionary",
    # Getters
    "StackCursor",
    "CollectionData",
    "NftData",
    "SaleData",
    "ItemRecord",
    "SaleListing",
    "GETTER_DECODERS",
    # Records
    "CollectionConfig",
    "SaleConfig",
    "cancel_body",
    # Requests
    "OutboundMessage",
    "TransactionRequest",
]
