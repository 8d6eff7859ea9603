"""Stellar integration: XDR decoding, addresses, asset identity and the Horizon feed."""

from asset_monitor.stellar.asset import AssetIdentity
from asset_monitor.stellar.cursor import (
    HistoricalLedgerSource,
    StreamingLedgerSource,
    resolve_start_cursor,
)
from asset_monitor.stellar.feed import HorizonLedgerFeed
from asset_monitor.stellar.meta import TransactionMetaDecoder

__all__ = [
    "AssetIdentity",
    "HistoricalLedgerSource",
    "HorizonLedgerFeed",
    "StreamingLedgerSource",
    "TransactionMetaDecoder",
    "resolve_start_cursor",
]
