"""
TiwiFlix Protocol Constants v1.0

Cell limits, opcodes, getter names and default amounts shared by the
collection, item and sale contracts.
"""

from typing import Dict

# ==============================================================================
# TIWIFLIX: TON NFT MARKETPLACE TOOLKIT
# ==============================================================================
PROJECT: str = "TiwiFlix"
VERSION: str = "1.0.0"
TICKER: str = "TON"

# ==============================================================================
# CELL LIMITS
# ==============================================================================
MAX_CELL_REFS: int = 4                      # Child references per cell

# ==============================================================================
# ADDRESSES
# ==============================================================================
ADDRESS_HASH_SIZE: int = 32
BASECHAIN: int = 0

# ==============================================================================
# CONTENT (TEP-64)
# ==============================================================================
SNAKE_CHUNK_SIZE: int = 127                 # Bytes per snake cell
OFFCHAIN_CONTENT_PREFIX: int = 0x01
ONCHAIN_CONTENT_PREFIX: int = 0x00
DEFAULT_ITEM_CONTENT: str = "/nft.json"

# ==============================================================================
# MESSAGE LAYOUT
# ==============================================================================
OPCODE_BITS: int = 32
QUERY_ID_BITS: int = 64
ITEM_INDEX_BITS: int = 64
MAX_SUPPLY_BITS: int = 64
ROYALTY_FIELD_BITS: int = 16
SALE_CREATED_AT_BITS: int = 32
BATCH_KEY_BITS: int = 64

# Collection opcodes
OP_MINT: int = 1
OP_BATCH_MINT: int = 2
OP_CHANGE_OWNER: int = 3
OP_CHANGE_CONTENT: int = 4
OP_CHANGE_MINT_PRICE: int = 5
OP_CHANGE_NFT_ITEM_AMOUNT: int = 6
OP_CHANGE_ROYALTIES: int = 7
OP_CHANGE_MAX_SUPPLY: int = 8
OP_EMERGENCY_WITHDRAW: int = 10

# Item opcodes (TEP-62)
OP_TRANSFER: int = 0x5FCC3D14

# Sale opcodes
OP_SALE_CANCEL: int = 1

# ==============================================================================
# BATCH MINTING
# ==============================================================================
MAX_BATCH_SIZE: int = 80

# ==============================================================================
# CONTRACT EXIT CODES
# ==============================================================================
EXIT_BATCH_TOO_LARGE: int = 399
EXIT_MAX_SUPPLY_EXCEEDED: int = 407

EXIT_CODE_NAMES: Dict[int, str] = {
    EXIT_BATCH_TOO_LARGE: "batch too large",
    EXIT_MAX_SUPPLY_EXCEEDED: "max supply exceeded",
}

# ==============================================================================
# GETTERS
# ==============================================================================
GET_COLLECTION_DATA: str = "get_collection_data"
GET_ROYALTY_PARAMS: str = "royalty_params"
GET_NFT_ADDRESS_BY_INDEX: str = "get_nft_address_by_index"
GET_NFT_CONTENT: str = "get_nft_content"
GET_MINTING_PRICE: str = "get_minting_price"
GET_NFT_ITEM_AMOUNT: str = "get_nft_item_amount"
GET_MAX_SUPPLY: str = "get_max_supply"
GET_IS_VERIFIED: str = "get_is_verified"
GET_COLLECTION_BALANCE: str = "get_collection_balance"
GET_NFT_DATA: str = "get_nft_data"
GET_SALE_DATA: str = "get_sale_data"

SALE_DATA_MAGIC: int = 0x46495850           # "FIXP"

# ==============================================================================
# WALLET HAND-OFF
# ==============================================================================
REQUEST_TTL_SEC: int = 600

# Attached values in nanoton
DEFAULT_ITEM_STORAGE_AMOUNT: int = 50_000_000       # 0.05 TON per item
DEFAULT_MINT_PRICE: int = 100_000_000               # 0.1 TON
BATCH_MINT_AMOUNT_PER_ITEM: int = 80_000_000        # 0.08 TON
ADMIN_MESSAGE_AMOUNT: int = 50_000_000              # 0.05 TON
TRANSFER_AMOUNT: int = 100_000_000                  # 0.1 TON
TRANSFER_FORWARD_AMOUNT: int = 10_000_000           # 0.01 TON
COLLECTION_DEPLOY_AMOUNT: int = 50_000_000          # 0.05 TON
SALE_DEPLOY_AMOUNT: int = 50_000_000                # 0.05 TON

# ==============================================================================
# TONCENTER
# ==============================================================================
TONCENTER_MAINNET: str = "https://toncenter.com/api/v2"
TONCENTER_TESTNET: str = "https://testnet.toncenter.com/api/v2"
TONCENTER_TIMEOUT_SEC: float = 15.0

# ==============================================================================
# ROYALTIES
# ==============================================================================
ROYALTY_PERCENT_BASE: int = 1000            # One decimal digit of precision
