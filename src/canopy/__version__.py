"""Version information for canopy."""

__version__ = "0.1.0"
