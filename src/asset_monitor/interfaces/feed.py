"""LedgerFeed protocol - ledger and transaction retrieval from Horizon."""

from __future__ import annotations

from typing import AsyncIterator, Protocol

from asset_monitor.models.events import LedgerRecord, TransactionRecord


class LedgerFeed(Protocol):
    """Transport for closed ledgers and their transactions.

    Implementations raise FeedError on any transport failure; the main loop
    owns retry and back-off.
    """

    async def get_ledger(self, sequence: int) -> LedgerRecord:
        """Look up one ledger (sequence + paging token)."""
        ...

    async def latest_ledger(self) -> LedgerRecord:
        """Most recently closed ledger."""
        ...

    async def list_transactions(self, sequence: int) -> list[TransactionRecord]:
        """All successful transactions in a ledger, in application order."""
        ...

    def stream_ledgers(self, cursor: str) -> AsyncIterator[LedgerRecord]:
        """Subscribe to ledgers closing after ``cursor`` ("now" for live only)."""
        ...

    async def close(self) -> None:
        ...
