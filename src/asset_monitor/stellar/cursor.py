"""Ledger sources - historical sequence walking and live streaming behind one interface."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from asset_monitor.interfaces.feed import LedgerFeed
from asset_monitor.models.events import LedgerRecord

log = logging.getLogger(__name__)

# Horizon cursor meaning "only ledgers closed from now on"
NOW = "now"

STREAM_BUFFER = 100


async def resolve_start_cursor(feed: LedgerFeed, start_ledger: int | None) -> str:
    """Paging token for ``start_ledger``, or "now".

    Any lookup failure falls back to "now" with a warning.
    """
    if start_ledger is None:
        log.info("Starting from latest ledger")
        return NOW
    try:
        ledger = await feed.get_ledger(start_ledger)
    except Exception as exc:
        log.warning(
            "Could not get cursor for ledger %d, starting from latest: %s",
            start_ledger, exc,
        )
        return NOW
    log.info("Found ledger %d with paging token %s", ledger.sequence, ledger.paging_token)
    return ledger.paging_token


class HistoricalLedgerSource:
    """Walks ledger sequences upward from a starting point.

    The current sequence is returned until acknowledged, so a failed ledger is
    retried as-is. Once the walk reaches the network tip, fetches of the next
    ledger fail until it closes, which turns the walk into tail-following.
    """

    def __init__(self, start: int) -> None:
        self._next = start

    @property
    def position(self) -> int:
        return self._next

    async def next_ledger(self) -> int | None:
        return self._next

    def done(self, sequence: int) -> None:
        if sequence == self._next:
            self._next = sequence + 1

    async def close(self) -> None:
        pass


class StreamingLedgerSource:
    """Ledger sequences pushed by a Horizon ledger stream.

    A producer task feeds a bounded queue; the main loop is the only consumer.
    If the subscription fails without ``reconnect`` set, no further ledgers
    arrive and next_ledger() waits until the source is closed. With
    ``reconnect`` it resubscribes from the last delivered ledger's paging
    token after ``error_delay`` seconds.
    """

    def __init__(
        self,
        feed: LedgerFeed,
        cursor: str,
        reconnect: bool = False,
        error_delay: float = 1.0,
    ) -> None:
        self._feed = feed
        self._cursor = cursor
        self._reconnect = reconnect
        self._error_delay = error_delay
        self._queue: asyncio.Queue[LedgerRecord | None] = asyncio.Queue(maxsize=STREAM_BUFFER)
        self._task: asyncio.Task | None = None
        self._pending: int | None = None
        self._last_token: str | None = None
        self._closed = False

    @property
    def cursor(self) -> str:
        """Paging token of the last delivered ledger, or the starting cursor."""
        return self._last_token or self._cursor

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._produce())

    async def next_ledger(self) -> int | None:
        if self._pending is not None:
            return self._pending
        if self._closed:
            return None
        self.start()
        record = await self._queue.get()
        if record is None:
            self._closed = True
            return None
        self._pending = record.sequence
        return record.sequence

    def done(self, sequence: int) -> None:
        if self._pending == sequence:
            self._pending = None

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
        self._closed = True
        # wake a consumer blocked in next_ledger()
        with suppress(asyncio.QueueFull):
            self._queue.put_nowait(None)

    async def _produce(self) -> None:
        cursor = self._cursor
        while True:
            try:
                async for record in self._feed.stream_ledgers(cursor):
                    self._last_token = record.paging_token
                    await self._queue.put(record)
                log.warning("Ledger stream ended")
            except Exception as exc:
                log.error("Stream error: %s", exc)

            if not self._reconnect:
                log.error("Ledger stream stopped and reconnect_stream is off; no new ledgers until restart")
                return

            await asyncio.sleep(self._error_delay)
            cursor = self.cursor
            log.info("Resubscribing to ledger stream from cursor %s", cursor)
