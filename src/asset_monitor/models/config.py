"""Configuration models for the monitor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FeedMode(str, Enum):
    """How the monitor walks the ledger feed."""

    HISTORICAL = "historical"  # seq, seq+1, ... with per-ledger retry
    STREAMING = "streaming"  # Horizon SSE subscription from a cursor


class OutputFormat(str, Enum):
    """Console output format."""

    TEXT = "text"
    JSON = "json"  # one JSON record per line


NETWORK_PASSPHRASES = {
    "testnet": "Test SDF Network ; September 2015",
    "pubnet": "Public Global Stellar Network ; September 2015",
    "mainnet": "Public Global Stellar Network ; September 2015",
    "futurenet": "Test SDF Future Network ; October 2022",
}


@dataclass
class MonitorConfig:
    """Complete monitor configuration."""

    # Monitor
    mode: FeedMode = FeedMode.STREAMING
    ledger_delay: float = 0.2  # seconds between processed ledgers
    error_delay: float = 1.0  # seconds after a failed ledger
    output: OutputFormat = OutputFormat.TEXT
    log_level: str = "info"

    # Stellar
    network: str = "testnet"
    network_passphrase: str = ""  # derived from network when empty
    horizon_url: str = "https://horizon-testnet.stellar.org"
    request_timeout: int = 30  # seconds
    reconnect_stream: bool = False

    # Asset
    asset_code: str = ""
    asset_issuer: str = ""  # empty only for the native asset
    start_ledger: int | None = None

    def passphrase(self) -> str:
        return self.network_passphrase or NETWORK_PASSPHRASES.get(self.network.lower(), "")
