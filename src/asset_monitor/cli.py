"""CLI entry point for the asset_monitor daemon."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from asset_monitor.config import load_config, parse_start_ledger, validate_config
from asset_monitor.daemon import run_monitor
from asset_monitor.errors import ConfigError
from asset_monitor.models.config import FeedMode, MonitorConfig, OutputFormat
from asset_monitor.output import print_configuration
from asset_monitor.policy.filter import AssetEventFilter
from asset_monitor.stellar.address import encode_contract
from asset_monitor.stellar.asset import AssetIdentity
from asset_monitor.stellar.meta import TransactionMetaDecoder
from asset_monitor.stellar.values import format_scval


def _load(ctx: click.Context) -> MonitorConfig:
    try:
        return load_config(ctx.obj["config_path"])
    except ConfigError as exc:
        _fail(exc)


def _validated(cfg: MonitorConfig) -> AssetIdentity:
    """Exit with error if the configuration cannot run."""
    try:
        return validate_config(cfg)
    except ConfigError as exc:
        _fail(exc)


def _fail(exc: Exception):
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """asset-monitor - track the supply of a Stellar asset from its contract events."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Monitor ────────────────────────────────────────────


@cli.command()
@click.option(
    "--mode",
    type=click.Choice([m.value for m in FeedMode]),
    default=None,
    help="Walk ledgers one by one (historical) or follow the ledger stream",
)
@click.option("--start-ledger", default=None, help="Ledger sequence to start from")
@click.option("--json", "json_output", is_flag=True, help="Write one JSON record per line")
@click.pass_context
def run(ctx: click.Context, mode: str | None, start_ledger: str | None, json_output: bool) -> None:
    """Start the supply monitor."""
    cfg = _load(ctx)
    if mode:
        cfg.mode = FeedMode(mode)
    if start_ledger is not None:
        cfg.start_ledger = parse_start_ledger(start_ledger)
    if json_output:
        cfg.output = OutputFormat.JSON

    identity = _validated(cfg)
    if not ctx.obj["verbose"]:
        logging.getLogger().setLevel(cfg.log_level.upper())
    if cfg.output is OutputFormat.TEXT:
        print_configuration(cfg, identity)

    asyncio.run(run_monitor(cfg, identity))


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show monitor configuration."""
    cfg = _load(ctx)
    click.echo(f"Mode:         {cfg.mode.value}")
    click.echo(f"Network:      {cfg.network}")
    click.echo(f"Horizon URL:  {cfg.horizon_url}")
    click.echo(f"Asset code:   {cfg.asset_code or '(not set)'}")
    click.echo(f"Asset issuer: {cfg.asset_issuer or '(not set)'}")
    click.echo(f"Start ledger: {cfg.start_ledger if cfg.start_ledger is not None else 'latest'}")
    click.echo(f"Delays:       {cfg.ledger_delay}s per ledger, {cfg.error_delay}s after errors")
    click.echo(f"Output:       {cfg.output.value}")


@cli.command("contract-id")
@click.pass_context
def contract_id(ctx: click.Context) -> None:
    """Print the asset's derived Stellar Asset Contract id."""
    identity = _validated(_load(ctx))
    click.echo(f"Asset:    {identity.canonical_name}")
    click.echo(f"Contract: {identity.contract_address}")


@cli.command()
@click.argument("meta_xdr")
@click.pass_context
def decode(ctx: click.Context, meta_xdr: str) -> None:
    """Decode a base64 TransactionMeta and list its contract events."""
    identity = _validated(_load(ctx))
    event_filter = AssetEventFilter(identity)

    operations = TransactionMetaDecoder().decode(meta_xdr)
    if not operations:
        click.echo("No v4 operation events found.")
        return

    for index, events in enumerate(operations):
        click.echo(f"Operation {index}: {len(events)} event(s)")
        for event in events:
            contract = encode_contract(event.contract_id) if event.contract_id else "(none)"
            marker = " [asset]" if event_filter.select(event) is not None else ""
            click.echo(f"  Contract: {contract}{marker}")
            click.echo(f"  Topics:   {[format_scval(t) for t in event.topics]}")
            click.echo(f"  Data:     {format_scval(event.data)}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
