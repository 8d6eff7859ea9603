"""Event selection policy."""

from asset_monitor.policy.filter import AssetEventFilter

__all__ = ["AssetEventFilter"]
