"""Exception types shared across the monitor."""

from __future__ import annotations


class MonitorError(Exception):
    """Base class for all asset_monitor errors."""


class ConfigError(MonitorError):
    """Configuration is missing or invalid. Fatal at startup."""


class FeedError(MonitorError):
    """The ledger feed could not be reached or returned an error.

    Always retryable: the main loop backs off and tries the same ledger again.
    ``not_found`` marks a 404, which for a ledger past the tip just means it
    has not closed yet.
    """

    def __init__(
        self,
        message: str,
        sequence: int | None = None,
        not_found: bool = False,
    ) -> None:
        super().__init__(message)
        self.sequence = sequence
        self.not_found = not_found


class AddressDecodeError(MonitorError):
    """Raw key bytes could not be encoded as a StrKey address."""
