"""Shared fixtures for asset_monitor tests."""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest
from pytest_metadata.plugin import metadata_key

from asset_monitor.daemon import AssetMonitorDaemon
from asset_monitor.models.config import FeedMode, MonitorConfig, NETWORK_PASSPHRASES
from asset_monitor.stellar.asset import AssetIdentity

from tests.mocks import MockFeed, RecordingReporter

TESTNET = NETWORK_PASSPHRASES["testnet"]

ASSET_CODE = "USDC"
ASSET_ISSUER = "GC66GVXUBUONBFLHFA7QBB2RU7HK3XT5AYM5ZZSIIG2XCYDGHXRDKUKE"
HOLDER = "GDNAG4KFFVF5HCSGRWZIXZNL2SR2KBGJSHW2A6FI6DZI62XF6IBLO4GD"
OTHER_CONTRACT = "CCEDYFIHUCJFITWEOT7BWUO2HBQQ72L244ZXQ4YNOC6FYRDN3MKDQFK7"

EXPLORER_BASE = "https://stellar.expert/explorer/testnet"


# ── Report metadata ──────────────────────────────────────────────


def pytest_configure(config):
    """Add network info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "Stellar Testnet"
    meta["Asset"] = f"{ASSET_CODE}:{ASSET_ISSUER}"
    meta["Explorer"] = f"{EXPLORER_BASE}/asset/{ASSET_CODE}-{ASSET_ISSUER}"


def make_test_config(**overrides) -> MonitorConfig:
    """Build a MonitorConfig suitable for testing."""
    defaults = dict(
        mode=FeedMode.HISTORICAL,
        ledger_delay=0,
        error_delay=0,
        network="testnet",
        horizon_url="https://horizon-testnet.stellar.org",
        asset_code=ASSET_CODE,
        asset_issuer=ASSET_ISSUER,
        start_ledger=100,
    )
    defaults.update(overrides)
    return MonitorConfig(**defaults)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` on the event loop until it holds."""
    async def _wait():
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_wait(), timeout)


@pytest.fixture
def test_config():
    return make_test_config()


@pytest.fixture
def identity():
    return AssetIdentity(ASSET_CODE, ASSET_ISSUER, TESTNET)


@pytest.fixture
def mock_feed():
    return MockFeed()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
async def daemon(test_config, identity, mock_feed, reporter):
    """AssetMonitorDaemon wired to the mock feed."""
    return AssetMonitorDaemon(test_config, identity=identity, feed=mock_feed, reporter=reporter)
