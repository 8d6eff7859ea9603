"""LedgerSource protocol - yields ledger sequences to the main loop."""

from __future__ import annotations

from typing import Protocol


class LedgerSource(Protocol):
    """Single-consumer supply of ledger sequence numbers.

    A sequence handed out by next_ledger() is handed out again until done()
    acknowledges it, which gives the main loop same-ledger retry for free.
    """

    async def next_ledger(self) -> int | None:
        """Block until a ledger is available. None once the source is exhausted."""
        ...

    def done(self, sequence: int) -> None:
        """Acknowledge that ``sequence`` was fully processed."""
        ...

    async def close(self) -> None:
        ...
