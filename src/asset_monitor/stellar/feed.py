"""Horizon ledger feed - ledger lookup, per-ledger transactions and ledger streaming."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

from stellar_sdk import ServerAsync
from stellar_sdk.client.aiohttp_client import AiohttpClient
from stellar_sdk.exceptions import BaseHorizonError, BaseRequestError, NotFoundError

from asset_monitor.errors import FeedError
from asset_monitor.models.events import LedgerRecord, TransactionRecord

log = logging.getLogger(__name__)

# Horizon's maximum page size
PAGE_LIMIT = 200

_REQUEST_ERRORS = (BaseRequestError, BaseHorizonError)


def _ledger(record: dict[str, Any]) -> LedgerRecord:
    return LedgerRecord(
        sequence=int(record["sequence"]),
        paging_token=str(record["paging_token"]),
    )


def _transaction(record: dict[str, Any]) -> TransactionRecord:
    return TransactionRecord(
        hash=record["hash"],
        result_meta_xdr=record.get("result_meta_xdr") or "",
        ledger=record.get("ledger"),
    )


def _records(page: dict[str, Any]) -> list[dict[str, Any]]:
    return page["_embedded"]["records"]


class HorizonLedgerFeed:
    """Reads ledgers and transactions from a Horizon server.

    Uses ServerAsync over aiohttp for both plain requests and the SSE ledger
    stream. Every SDK request error is re-raised as FeedError.
    """

    def __init__(self, horizon_url: str, request_timeout: int = 30) -> None:
        self._horizon_url = horizon_url
        self._server = ServerAsync(
            horizon_url=horizon_url,
            client=AiohttpClient(request_timeout=request_timeout),
        )

    @property
    def horizon_url(self) -> str:
        return self._horizon_url

    async def close(self) -> None:
        """Close the underlying aiohttp session."""
        await self._server.close()

    async def get_ledger(self, sequence: int) -> LedgerRecord:
        try:
            record = await self._server.ledgers().ledger(sequence).call()
            return _ledger(record)
        except NotFoundError as exc:
            raise FeedError(f"ledger {sequence} not found", sequence, not_found=True) from exc
        except _REQUEST_ERRORS as exc:
            raise FeedError(f"get_ledger({sequence}) failed: {exc}", sequence) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise FeedError(f"get_ledger({sequence}) returned a malformed record: {exc}", sequence) from exc

    async def latest_ledger(self) -> LedgerRecord:
        try:
            page = await self._server.ledgers().order(desc=True).limit(1).call()
            records = _records(page)
            if not records:
                raise FeedError("Horizon returned no ledgers")
            return _ledger(records[0])
        except _REQUEST_ERRORS as exc:
            raise FeedError(f"latest_ledger failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise FeedError(f"latest_ledger returned a malformed page: {exc}") from exc

    async def list_transactions(self, sequence: int) -> list[TransactionRecord]:
        """Fetch every transaction page for a ledger, in ascending order."""
        transactions: list[TransactionRecord] = []
        cursor: str | None = None
        try:
            while True:
                builder = (
                    self._server.transactions()
                    .for_ledger(sequence)
                    .order(desc=False)
                    .limit(PAGE_LIMIT)
                )
                if cursor:
                    builder = builder.cursor(cursor)
                batch = _records(await builder.call())
                transactions.extend(_transaction(r) for r in batch)
                if len(batch) < PAGE_LIMIT:
                    break
                cursor = batch[-1]["paging_token"]
        except NotFoundError as exc:
            raise FeedError(f"ledger {sequence} not found", sequence, not_found=True) from exc
        except _REQUEST_ERRORS as exc:
            raise FeedError(f"list_transactions({sequence}) failed: {exc}", sequence) from exc
        except (KeyError, TypeError) as exc:
            raise FeedError(f"list_transactions({sequence}) returned a malformed page: {exc}", sequence) from exc

        log.debug("Ledger %d: %d transactions", sequence, len(transactions))
        return transactions

    async def stream_ledgers(self, cursor: str) -> AsyncIterator[LedgerRecord]:
        """Yield ledgers closing after ``cursor`` until the stream fails."""
        log.info("Subscribing to ledgers from cursor %s", cursor)
        try:
            async for record in self._server.ledgers().cursor(cursor).stream():
                if not isinstance(record, dict) or "sequence" not in record:
                    continue
                yield _ledger(record)
        except _REQUEST_ERRORS as exc:
            raise FeedError(f"ledger stream failed: {exc}") from exc
