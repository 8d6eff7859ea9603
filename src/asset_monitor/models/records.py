"""Result types for supply accounting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ApplyOutcome(str, Enum):
    APPLIED = "applied"
    UNTRACKED = "untracked"  # kind is not mint/burn/clawback; informational
    MALFORMED = "malformed"  # amount did not parse; event dropped


@dataclass(frozen=True)
class ApplyResult:
    """Result of folding one asset event into the supply ledger."""

    outcome: ApplyOutcome
    kind: str
    amount: int | None  # stroops; None when malformed
    supply: int  # supply after the apply (unchanged unless APPLIED)
    error: str | None = None

    @property
    def applied(self) -> bool:
        return self.outcome is ApplyOutcome.APPLIED
