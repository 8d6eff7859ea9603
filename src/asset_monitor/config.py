"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Callable

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from asset_monitor.errors import ConfigError
from asset_monitor.models.config import FeedMode, MonitorConfig, OutputFormat
from asset_monitor.stellar.asset import AssetIdentity

log = logging.getLogger(__name__)

_ASSET_CODE_RE = re.compile(r"[A-Za-z0-9]{1,12}")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _convert(name: str, value: Any, conv: Callable[[Any], Any]) -> Any:
    try:
        return conv(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc


def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(value)


def parse_start_ledger(value: Any) -> int | None:
    """Lenient start-ledger parsing: anything unusable means "latest"."""
    if value is None or value == "":
        return None
    try:
        ledger = int(value)
    except (TypeError, ValueError):
        log.warning("Invalid ledger number %r, starting from latest", value)
        return None
    if ledger <= 0:
        log.warning("Ledger number must be positive (got %d), starting from latest", ledger)
        return None
    return ledger


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "ASSET_MONITOR_",
) -> MonitorConfig:
    """Load monitor configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (ASSET_MONITOR_ASSET_CODE, etc.)
        2. TOML config file
        3. Defaults from MonitorConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            try:
                with open(p, "rb") as f:
                    raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"Could not parse {p}: {exc}") from exc
        else:
            log.warning("Config file %s not found, using defaults", p)

    cfg = MonitorConfig()

    # ── Monitor section ────────────────────────────────────
    monitor = raw.get("monitor", {})
    if v := monitor.get("mode"):
        cfg.mode = _convert("monitor.mode", v, FeedMode)
    if (v := monitor.get("ledger_delay")) is not None:
        cfg.ledger_delay = _convert("monitor.ledger_delay", v, float)
    if (v := monitor.get("error_delay")) is not None:
        cfg.error_delay = _convert("monitor.error_delay", v, float)
    if v := monitor.get("output"):
        cfg.output = _convert("monitor.output", v, OutputFormat)
    if v := monitor.get("log_level"):
        cfg.log_level = str(v)

    # ── Stellar section ────────────────────────────────────
    stellar = raw.get("stellar", {})
    if v := stellar.get("network"):
        cfg.network = str(v)
    if v := stellar.get("network_passphrase"):
        cfg.network_passphrase = str(v)
    if v := stellar.get("horizon_url"):
        cfg.horizon_url = str(v)
    if (v := stellar.get("request_timeout")) is not None:
        cfg.request_timeout = _convert("stellar.request_timeout", v, int)
    if (v := stellar.get("reconnect_stream")) is not None:
        cfg.reconnect_stream = _convert("stellar.reconnect_stream", v, _bool)

    # ── Asset section ──────────────────────────────────────
    asset = raw.get("asset", {})
    if v := asset.get("code"):
        cfg.asset_code = str(v)
    if v := asset.get("issuer"):
        cfg.asset_issuer = str(v)
    if "start_ledger" in asset:
        cfg.start_ledger = parse_start_ledger(asset["start_ledger"])

    # ── Environment variable overrides (highest priority) ──
    env = os.environ
    if v := env.get(f"{env_prefix}MODE"):
        cfg.mode = _convert(f"{env_prefix}MODE", v, FeedMode)
    if v := env.get(f"{env_prefix}LEDGER_DELAY"):
        cfg.ledger_delay = _convert(f"{env_prefix}LEDGER_DELAY", v, float)
    if v := env.get(f"{env_prefix}ERROR_DELAY"):
        cfg.error_delay = _convert(f"{env_prefix}ERROR_DELAY", v, float)
    if v := env.get(f"{env_prefix}OUTPUT"):
        cfg.output = _convert(f"{env_prefix}OUTPUT", v, OutputFormat)
    if v := env.get(f"{env_prefix}LOG_LEVEL"):
        cfg.log_level = v
    if v := env.get(f"{env_prefix}NETWORK"):
        cfg.network = v
    if v := env.get(f"{env_prefix}NETWORK_PASSPHRASE"):
        cfg.network_passphrase = v
    if v := env.get(f"{env_prefix}HORIZON_URL"):
        cfg.horizon_url = v
    if v := env.get(f"{env_prefix}REQUEST_TIMEOUT"):
        cfg.request_timeout = _convert(f"{env_prefix}REQUEST_TIMEOUT", v, int)
    if v := env.get(f"{env_prefix}RECONNECT_STREAM"):
        cfg.reconnect_stream = _convert(f"{env_prefix}RECONNECT_STREAM", v, _bool)
    if v := env.get(f"{env_prefix}ASSET_CODE"):
        cfg.asset_code = v
    if v := env.get(f"{env_prefix}ASSET_ISSUER"):
        cfg.asset_issuer = v
    if f"{env_prefix}START_LEDGER" in env:
        cfg.start_ledger = parse_start_ledger(env[f"{env_prefix}START_LEDGER"])

    return cfg


def validate_config(cfg: MonitorConfig) -> AssetIdentity:
    """Check everything the run needs. Returns the derived asset identity.

    Raises a single ConfigError describing the first problem found.
    """
    if not cfg.horizon_url:
        raise ConfigError("No Horizon URL configured. Set ASSET_MONITOR_HORIZON_URL or [stellar] horizon_url.")
    if not cfg.passphrase():
        raise ConfigError(
            f"Unknown network {cfg.network!r}. Use testnet, pubnet or futurenet, "
            "or set a network_passphrase."
        )
    if not cfg.asset_code:
        raise ConfigError("No asset code configured. Set ASSET_MONITOR_ASSET_CODE or [asset] code.")
    if not _ASSET_CODE_RE.fullmatch(cfg.asset_code):
        raise ConfigError(f"Asset code {cfg.asset_code!r} must be 1-12 letters or digits.")
    if cfg.ledger_delay < 0 or cfg.error_delay < 0:
        raise ConfigError("ledger_delay and error_delay must not be negative.")
    if cfg.request_timeout <= 0:
        raise ConfigError("request_timeout must be positive.")
    if cfg.log_level.upper() not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log level {cfg.log_level!r}.")

    return AssetIdentity(cfg.asset_code, cfg.asset_issuer, cfg.passphrase())
