"""Protocol interfaces for asset_monitor components."""

from asset_monitor.interfaces.feed import LedgerFeed
from asset_monitor.interfaces.source import LedgerSource

__all__ = ["LedgerFeed", "LedgerSource"]
