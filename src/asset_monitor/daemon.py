"""Main daemon loop - walks ledgers and folds asset events into the supply ledger."""

from __future__ import annotations

import asyncio
import logging
import signal
from datetime import datetime, timezone

from asset_monitor.accounting.supply import SupplyLedger
from asset_monitor.errors import FeedError
from asset_monitor.interfaces.feed import LedgerFeed
from asset_monitor.interfaces.source import LedgerSource
from asset_monitor.models.config import FeedMode, MonitorConfig
from asset_monitor.models.snapshots import AssetEventSnapshot, LedgerSnapshot
from asset_monitor.output import ConsoleReporter
from asset_monitor.policy.filter import AssetEventFilter
from asset_monitor.stellar.asset import AssetIdentity
from asset_monitor.stellar.cursor import (
    HistoricalLedgerSource,
    StreamingLedgerSource,
    resolve_start_cursor,
)
from asset_monitor.stellar.feed import HorizonLedgerFeed
from asset_monitor.stellar.meta import TransactionMetaDecoder

log = logging.getLogger(__name__)


class AssetMonitorDaemon:
    """Single-asset supply monitor.

    Ledgers are processed strictly one at a time, and within a ledger in
    transaction, operation, event order; the supply ledger has exactly one
    writer. Duplicate deliveries of a ledger are processed again (no
    deduplication), so their deltas apply twice.
    """

    def __init__(
        self,
        cfg: MonitorConfig,
        identity: AssetIdentity | None = None,
        feed: LedgerFeed | None = None,
        reporter: ConsoleReporter | None = None,
    ) -> None:
        self._cfg = cfg
        self.identity = identity or AssetIdentity(
            cfg.asset_code, cfg.asset_issuer, cfg.passphrase(),
        )
        self.feed: LedgerFeed = feed or HorizonLedgerFeed(cfg.horizon_url, cfg.request_timeout)
        self.decoder = TransactionMetaDecoder()
        self.filter = AssetEventFilter(self.identity)
        self.supply = SupplyLedger()
        self.reporter = reporter or ConsoleReporter(cfg.output)
        self.source: LedgerSource | None = None

        self._running = False
        self._stop = asyncio.Event()
        self._loop_task: asyncio.Task | None = None

    async def start(self) -> None:
        """Open the ledger source and run the main loop until stopped."""
        log.info("Starting asset monitor")
        log.info("  Mode: %s", self._cfg.mode.value)
        log.info("  Asset: %s", self.identity.canonical_name)
        log.info("  Contract: %s", self.identity.contract_address)
        log.info("  Horizon: %s", self._cfg.horizon_url)

        self._running = True
        self._loop_task = asyncio.create_task(self._run())
        try:
            await self._loop_task
        except asyncio.CancelledError:
            log.info("Main loop cancelled")
        finally:
            if self.source is not None:
                await self.source.close()
            await self.feed.close()
            log.info("Monitor shut down cleanly (supply: %s)", self.supply.format())

    async def stop(self) -> None:
        """Signal the monitor to stop; interrupts pacing and network waits."""
        log.info("Stop requested")
        self._running = False
        self._stop.set()
        if self._loop_task is not None and not self._loop_task.done():
            self._loop_task.cancel()

    async def _run(self) -> None:
        self.source = await self._open_source()
        if self.source is not None:
            await self._main_loop(self.source)

    async def _open_source(self) -> LedgerSource | None:
        if self._cfg.mode is FeedMode.STREAMING:
            cursor = await resolve_start_cursor(self.feed, self._cfg.start_ledger)
            return StreamingLedgerSource(
                self.feed,
                cursor,
                reconnect=self._cfg.reconnect_stream,
                error_delay=self._cfg.error_delay,
            )

        start = self._cfg.start_ledger
        if start is not None:
            try:
                await self.feed.get_ledger(start)
            except FeedError as exc:
                log.warning("Could not get ledger %d, starting from latest: %s", start, exc)
                start = None

        while start is None and self._running:
            try:
                start = (await self.feed.latest_ledger()).sequence
                log.info("No start ledger, starting from latest ledger %d", start)
            except Exception as exc:
                log.error("Could not get latest ledger: %s", exc)
                await self._pause(self._cfg.error_delay)
        if start is None:
            return None
        return HistoricalLedgerSource(start)

    async def _main_loop(self, source: LedgerSource) -> None:
        """The core fetch, fold, pace loop."""
        while self._running:
            sequence = await source.next_ledger()
            if sequence is None:
                log.warning("Ledger source closed, stopping")
                break

            try:
                await self.process_ledger(sequence)
            except FeedError as exc:
                if exc.not_found:
                    log.debug("Ledger %d not available yet: %s", sequence, exc)
                else:
                    log.warning("Error fetching ledger %d: %s", sequence, exc)
                await self._pause(self._cfg.error_delay)
                continue
            except Exception as exc:
                log.error("Error processing ledger %d: %s", sequence, exc, exc_info=True)
                await self._pause(self._cfg.error_delay)
                continue

            source.done(sequence)
            await self._pause(self._cfg.ledger_delay)

    async def _pause(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, returning early on stop."""
        if delay <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    async def process_ledger(self, sequence: int) -> LedgerSnapshot:
        """Fetch one ledger's transactions and fold its asset events."""
        # All pages are fetched before anything is folded, so a transport
        # failure never leaves a ledger half-applied.
        transactions = await self.feed.list_transactions(sequence)

        asset_events = 0
        for tx in transactions:
            if not tx.result_meta_xdr:
                log.debug("Transaction %s has no result meta", tx.hash)
                continue
            for op_events in self.decoder.decode(tx.result_meta_xdr):
                for event in op_events:
                    extracted = self.filter.select(event)
                    if extracted is None:
                        continue
                    result = self.supply.apply(extracted.kind, extracted.amount)
                    asset_events += 1
                    self.reporter.asset_event(AssetEventSnapshot(
                        ledger_sequence=sequence,
                        tx_hash=tx.hash,
                        kind=extracted.kind,
                        amount=extracted.amount,
                        outcome=result.outcome.value,
                        supply_stroops=result.supply,
                        supply=self.supply.format(),
                        topics=list(extracted.topics),
                        data=extracted.data,
                        error=result.error,
                    ))

        snap = LedgerSnapshot(
            ledger_sequence=sequence,
            transactions=len(transactions),
            asset_events=asset_events,
            supply_stroops=self.supply.supply,
            supply=self.supply.format(),
            processed_at=datetime.now(timezone.utc).isoformat(),
        )
        self.reporter.ledger(snap)
        return snap


async def run_monitor(cfg: MonitorConfig, identity: AssetIdentity | None = None) -> None:
    """Entry point for running the monitor."""
    daemon = AssetMonitorDaemon(cfg, identity=identity)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(daemon.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await daemon.start()
