"""Version information for the round-trip arbitrage scanner."""

__version__ = "0.1.0"
