"""
TiwiFlix Configuration v1.0

Runtime settings read from the environment (and a .env file if present):

  TIWIFLIX_NETWORK              mainnet | testnet       (default mainnet)
  TIWIFLIX_TONCENTER_ENDPOINT   toncenter v2 base URL   (default per network)
  TIWIFLIX_TONCENTER_API_KEY    X-API-Key header        (optional)
  TIWIFLIX_REQUEST_TTL          request validity, sec   (default 600)
  TIWIFLIX_WORKCHAIN            contract workchain      (default 0)
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from tiwiflix.constants import (
    BASECHAIN,
    REQUEST_TTL_SEC,
    TONCENTER_MAINNET,
    TONCENTER_TESTNET,
    TONCENTER_TIMEOUT_SEC,
)
from tiwiflix.core.errors import InvariantViolation

NETWORKS = ("mainnet", "testnet")


@dataclass(frozen=True)
class Config:
    network: str = "mainnet"
    toncenter_endpoint: str = TONCENTER_MAINNET
    toncenter_api_key: Optional[str] = None
    toncenter_timeout: float = TONCENTER_TIMEOUT_SEC
    request_ttl: int = REQUEST_TTL_SEC
    workchain: int = BASECHAIN

    def __post_init__(self):
        if self.network not in NETWORKS:
            raise InvariantViolation(f"Unknown network {self.network!r}")
        if self.request_ttl <= 0:
            raise InvariantViolation(f"Request TTL must be positive, got {self.request_ttl}")

    @property
    def testnet(self) -> bool:
        return self.network == "testnet"


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise InvariantViolation(f"{name} must be an integer, got {value!r}") from e


def load_config(dotenv_path: Optional[str] = None) -> Config:
    """Load settings; existing environment variables win over the .env file."""
    load_dotenv(dotenv_path)

    network = os.getenv("TIWIFLIX_NETWORK", "mainnet").strip().lower()
    default_endpoint = TONCENTER_TESTNET if network == "testnet" else TONCENTER_MAINNET
    return Config(
        network=network,
        toncenter_endpoint=os.getenv("TIWIFLIX_TONCENTER_ENDPOINT") or default_endpoint,
        toncenter_api_key=os.getenv("TIWIFLIX_TONCENTER_API_KEY") or None,
        request_ttl=_int_env("TIWIFLIX_REQUEST_TTL", REQUEST_TTL_SEC),
        workchain=_int_env("TIWIFLIX_WORKCHAIN", BASECHAIN),
    )
