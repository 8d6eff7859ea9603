"""Tier 2 fixtures: HorizonLedgerFeed against a local Horizon stand-in and live testnet."""

from __future__ import annotations

import httpx
import pytest
from aiohttp import web

from asset_monitor.stellar.feed import HorizonLedgerFeed

TESTNET_HORIZON = "https://horizon-testnet.stellar.org"

LOCAL_PORT = 9198
LOCAL_HORIZON = f"http://127.0.0.1:{LOCAL_PORT}"

# Ledger served by the local stand-in, with enough transactions to need paging
PAGED_LEDGER = 100
PAGED_TX_COUNT = 250
LATEST_LEDGER = 101


@pytest.fixture(scope="session")
def horizon_available():
    """Check if testnet Horizon is reachable. Skip live tests if not."""
    try:
        r = httpx.get(TESTNET_HORIZON, timeout=5)
        if r.status_code == 200:
            return True
        pytest.skip(f"Testnet Horizon returned {r.status_code}")
    except (httpx.ConnectError, httpx.TimeoutException):
        pytest.skip("Testnet Horizon not reachable")


def _ledger_record(sequence: int) -> dict:
    return {
        "id": f"ledger-{sequence}",
        "paging_token": str(sequence << 32),
        "sequence": sequence,
    }


def _tx_record(index: int) -> dict:
    return {
        "id": f"tx-{index:04d}",
        "hash": f"tx-{index:04d}",
        "paging_token": str((PAGED_LEDGER << 32) + index),
        "ledger": PAGED_LEDGER,
        "result_meta_xdr": "AAAAAAAAAAA=",
    }


def _page(records: list[dict]) -> dict:
    return {"_links": {}, "_embedded": {"records": records}}


def _not_found() -> web.Response:
    return web.json_response(
        {"type": "https://stellar.org/horizon-errors/not_found", "title": "Resource Missing", "status": 404},
        status=404,
    )


@pytest.fixture
async def horizon_server():
    """Local HTTP server answering the Horizon endpoints the feed uses.

    Yields (base_url, requests) where requests collects the query string of
    every transactions page served.
    """
    requests: list[dict] = []
    transactions = [_tx_record(i) for i in range(PAGED_TX_COUNT)]

    async def handle_ledgers(request):
        if request.query.get("order") == "desc":
            return web.json_response(_page([_ledger_record(LATEST_LEDGER)]))
        return web.json_response(_page([]))

    async def handle_ledger(request):
        sequence = int(request.match_info["sequence"])
        if sequence > LATEST_LEDGER:
            return _not_found()
        if sequence == 13:
            return web.Response(status=500, text="boom")
        return web.json_response(_ledger_record(sequence))

    async def handle_transactions(request):
        sequence = int(request.match_info["sequence"])
        requests.append(dict(request.query))
        if sequence != PAGED_LEDGER:
            return web.json_response(_page([]))
        limit = int(request.query.get("limit", 10))
        cursor = request.query.get("cursor")
        start = 0
        if cursor:
            start = next(
                i + 1 for i, tx in enumerate(transactions) if tx["paging_token"] == cursor
            )
        return web.json_response(_page(transactions[start:start + limit]))

    app = web.Application()
    app.router.add_get("/ledgers", handle_ledgers)
    app.router.add_get("/ledgers/{sequence}", handle_ledger)
    app.router.add_get("/ledgers/{sequence}/transactions", handle_transactions)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", LOCAL_PORT)
    await site.start()
    yield LOCAL_HORIZON, requests
    await runner.cleanup()


@pytest.fixture
async def local_feed(horizon_server):
    url, _ = horizon_server
    feed = HorizonLedgerFeed(url, request_timeout=5)
    yield feed
    await feed.close()


@pytest.fixture
async def testnet_feed(horizon_available):
    feed = HorizonLedgerFeed(TESTNET_HORIZON, request_timeout=30)
    yield feed
    await feed.close()
