"""Supply accounting."""

from asset_monitor.accounting.supply import SupplyLedger, format_supply

__all__ = ["SupplyLedger", "format_supply"]
