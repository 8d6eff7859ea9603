"""Console output: human-readable text or one JSON record per line."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Callable

import click

from asset_monitor.models.config import MonitorConfig, OutputFormat
from asset_monitor.models.records import ApplyOutcome
from asset_monitor.models.snapshots import AssetEventSnapshot, LedgerSnapshot
from asset_monitor.stellar.asset import AssetIdentity

_KIND_COLORS = {
    "mint": "green",
    "burn": "red",
    "clawback": "red",
}


class ConsoleReporter:
    """Writes ledger progress lines and asset event blocks."""

    def __init__(
        self,
        output: OutputFormat = OutputFormat.TEXT,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self._output = output
        self._echo = echo

    def asset_event(self, snap: AssetEventSnapshot) -> None:
        if self._output is OutputFormat.JSON:
            self._echo(json.dumps(snap.to_dict()))
            return

        if snap.outcome == ApplyOutcome.APPLIED.value:
            label = click.style(f"({snap.kind.upper()})", fg=_KIND_COLORS.get(snap.kind))
            self._echo(f"{label} -> {snap.amount}\n")
        elif snap.outcome == ApplyOutcome.UNTRACKED.value:
            self._echo(f"Untracked Event Type: {snap.kind}\nNo supply change.")
        else:
            label = click.style(f"({snap.kind.upper()})", fg="yellow")
            self._echo(f"{label} -> {snap.amount} [malformed]\n")

    def ledger(self, snap: LedgerSnapshot) -> None:
        if self._output is OutputFormat.JSON:
            self._echo(json.dumps(snap.to_dict()))
            return
        now = datetime.now().strftime("%H:%M:%S")
        self._echo(
            f"[{now}] PROCESSING LEDGER [{snap.ledger_sequence}]...    SUPPLY: {snap.supply}"
        )


def print_configuration(
    cfg: MonitorConfig,
    identity: AssetIdentity,
    echo: Callable[[str], None] = click.echo,
) -> None:
    """Startup banner."""

    def green(text: object) -> str:
        return click.style(str(text), fg="green")

    echo("\n=== Configuration ===")
    echo(f"Horizon URL: {green(cfg.horizon_url)}")
    echo(f"Network:     {green(cfg.network)}")
    echo(f"Mode:        {green(cfg.mode.value)}")
    echo(f"Asset:       {green(identity.canonical_name)}")
    echo(f"Contract:    {green(identity.contract_address)}")
    if cfg.start_ledger is not None:
        echo(f"Start:       {green(cfg.start_ledger)}")
    echo("=====================\n")
