"""Supply ledger - running total of mint/burn/clawback amounts."""

from __future__ import annotations

import logging
import re

from asset_monitor.models.records import ApplyOutcome, ApplyResult

log = logging.getLogger(__name__)

STROOPS_PER_UNIT = 10_000_000  # 7 decimal places
DECIMALS = 7

_AMOUNT_RE = re.compile(r"[+-]?[0-9]+")

# Sign applied to the amount for each tracked event kind
_DELTA_SIGN = {
    "mint": 1,
    "burn": -1,
    "clawback": -1,
}


def format_supply(stroops: int) -> str:
    """Format stroops as a decimal unit amount, truncated toward zero.

    12345000 -> "1.2345", 10000000 -> "1", -5000000 -> "-0.5".
    """
    whole, frac = divmod(abs(stroops), STROOPS_PER_UNIT)
    digits = f"{frac:0{DECIMALS}d}".rstrip("0")
    text = f"{whole}.{digits}" if digits else str(whole)
    if stroops < 0:
        text = "-" + text
    return text


def parse_amount(amount: str) -> int:
    """Parse a base-10 integer amount. Raises ValueError on anything else."""
    if not isinstance(amount, str) or not _AMOUNT_RE.fullmatch(amount):
        raise ValueError(f"not an integer amount: {amount!r}")
    return int(amount)


class SupplyLedger:
    """In-memory total supply in stroops.

    Created once per process at zero and never reset. The total is allowed to
    go negative (the monitor may start after the asset's first mints).
    """

    def __init__(self) -> None:
        self._supply = 0
        self.applied = 0
        self.untracked = 0
        self.malformed = 0

    @property
    def supply(self) -> int:
        return self._supply

    def apply(self, kind: str, amount: str) -> ApplyResult:
        """Fold one asset event into the supply. Never raises."""
        try:
            value = parse_amount(amount)
        except ValueError as exc:
            self.malformed += 1
            log.warning("Dropping %s event with malformed amount %r", kind, amount)
            return ApplyResult(
                outcome=ApplyOutcome.MALFORMED,
                kind=kind,
                amount=None,
                supply=self._supply,
                error=str(exc),
            )

        sign = _DELTA_SIGN.get(kind)
        if sign is None:
            self.untracked += 1
            log.info("Untracked event type %r, no supply change", kind)
            return ApplyResult(
                outcome=ApplyOutcome.UNTRACKED,
                kind=kind,
                amount=value,
                supply=self._supply,
            )

        self._supply += sign * value
        self.applied += 1
        log.debug("%s %d -> supply %d", kind, value, self._supply)
        return ApplyResult(
            outcome=ApplyOutcome.APPLIED,
            kind=kind,
            amount=value,
            supply=self._supply,
        )

    def format(self) -> str:
        return format_supply(self._supply)
