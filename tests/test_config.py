"""Configuration loading and validation."""

from __future__ import annotations

import os

import pytest

from asset_monitor.config import load_config, parse_start_ledger, validate_config
from asset_monitor.errors import ConfigError
from asset_monitor.models.config import FeedMode, MonitorConfig, OutputFormat
from tests.conftest import ASSET_CODE, ASSET_ISSUER, make_test_config

PREFIX = "ASSET_MONITOR_"

TOML = f"""
[monitor]
mode = "historical"
ledger_delay = 0.5
output = "json"

[stellar]
network = "pubnet"
horizon_url = "https://horizon.stellar.org"
reconnect_stream = true

[asset]
code = "{ASSET_CODE}"
issuer = "{ASSET_ISSUER}"
start_ledger = 1000
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith(PREFIX):
            monkeypatch.delenv(key)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "monitor.toml"
    path.write_text(TOML)
    return path


def test_defaults():
    cfg = load_config()
    assert cfg == MonitorConfig()
    assert cfg.mode is FeedMode.STREAMING
    assert cfg.passphrase() == "Test SDF Network ; September 2015"


def test_toml_file(config_file):
    cfg = load_config(config_file)
    assert cfg.mode is FeedMode.HISTORICAL
    assert cfg.ledger_delay == 0.5
    assert cfg.error_delay == 1.0
    assert cfg.output is OutputFormat.JSON
    assert cfg.passphrase() == "Public Global Stellar Network ; September 2015"
    assert cfg.reconnect_stream is True
    assert cfg.asset_code == ASSET_CODE
    assert cfg.start_ledger == 1000


def test_env_overrides_toml(config_file, monkeypatch):
    monkeypatch.setenv(f"{PREFIX}MODE", "streaming")
    monkeypatch.setenv(f"{PREFIX}ASSET_CODE", "EURC")
    monkeypatch.setenv(f"{PREFIX}RECONNECT_STREAM", "no")
    monkeypatch.setenv(f"{PREFIX}START_LEDGER", "abc")

    cfg = load_config(config_file)

    assert cfg.mode is FeedMode.STREAMING
    assert cfg.asset_code == "EURC"
    assert cfg.reconnect_stream is False
    assert cfg.start_ledger is None  # invalid means latest
    assert cfg.horizon_url == "https://horizon.stellar.org"


def test_missing_file_uses_defaults(tmp_path):
    assert load_config(tmp_path / "nope.toml") == MonitorConfig()


def test_broken_toml(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[monitor\nmode =")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("key,value", [
    ("MODE", "sideways"),
    ("LEDGER_DELAY", "soon"),
    ("REQUEST_TIMEOUT", "1.5"),
    ("RECONNECT_STREAM", "maybe"),
    ("OUTPUT", "xml"),
])
def test_bad_env_values(monkeypatch, key, value):
    monkeypatch.setenv(f"{PREFIX}{key}", value)
    with pytest.raises(ConfigError):
        load_config()


@pytest.mark.parametrize("value,expected", [
    (None, None),
    ("", None),
    ("100", 100),
    (100, 100),
    ("0", None),
    ("-5", None),
    ("12abc", None),
])
def test_parse_start_ledger(value, expected):
    assert parse_start_ledger(value) == expected


def test_validate_returns_identity():
    identity = validate_config(make_test_config())
    assert identity.canonical_name == f"{ASSET_CODE}:{ASSET_ISSUER}"


@pytest.mark.parametrize("overrides", [
    dict(horizon_url=""),
    dict(network="moonnet"),
    dict(asset_code=""),
    dict(asset_code="US-DC"),
    dict(ledger_delay=-1),
    dict(request_timeout=0),
    dict(log_level="chatty"),
    dict(asset_issuer=""),
])
def test_validate_rejects(overrides):
    with pytest.raises(ConfigError):
        validate_config(make_test_config(**overrides))


def test_custom_passphrase_wins():
    cfg = make_test_config(network="moonnet", network_passphrase="Standalone Network ; February 2017")
    identity = validate_config(cfg)
    assert identity.network_passphrase == "Standalone Network ; February 2017"
