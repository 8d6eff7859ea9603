"""JSON-serializable snapshot models for console / line-delimited output."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any


def _to_dict(obj: Any) -> dict:
    """Recursively convert a dataclass to a plain dict."""
    return asdict(obj)


@dataclass
class AssetEventSnapshot:
    """One asset event as folded into the supply ledger."""

    ledger_sequence: int
    tx_hash: str
    kind: str
    amount: str  # raw text from the event payload
    outcome: str  # "applied" | "untracked" | "malformed"
    supply_stroops: int
    supply: str  # formatted, e.g. "1.2345"
    topics: list[str] = field(default_factory=list)
    data: str = ""
    error: str | None = None
    type: str = "asset_event"

    def to_dict(self) -> dict:
        return _to_dict(self)


@dataclass
class LedgerSnapshot:
    """Progress record emitted after each processed ledger."""

    ledger_sequence: int
    transactions: int
    asset_events: int
    supply_stroops: int
    supply: str
    processed_at: str  # ISO 8601
    type: str = "ledger"

    def to_dict(self) -> dict:
        return _to_dict(self)
