"""asset_monitor - supply monitor for a single Stellar Asset Contract."""

__version__ = "0.1.0"
