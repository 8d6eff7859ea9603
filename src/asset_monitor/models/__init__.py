"""Data models for the asset_monitor daemon."""

from asset_monitor.models.events import (
    ContractEvent,
    ExtractedEvent,
    LedgerRecord,
    TransactionRecord,
)
from asset_monitor.models.records import ApplyOutcome, ApplyResult
from asset_monitor.models.config import (
    FeedMode,
    MonitorConfig,
    NETWORK_PASSPHRASES,
    OutputFormat,
)
from asset_monitor.models.snapshots import AssetEventSnapshot, LedgerSnapshot
from asset_monitor.models.values import NativeValue, ValueKind

__all__ = [
    "ContractEvent", "ExtractedEvent", "LedgerRecord", "TransactionRecord",
    "ApplyOutcome", "ApplyResult",
    "FeedMode", "MonitorConfig", "NETWORK_PASSPHRASES", "OutputFormat",
    "AssetEventSnapshot", "LedgerSnapshot",
    "NativeValue", "ValueKind",
]
