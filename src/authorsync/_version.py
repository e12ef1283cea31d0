"""Version information for authorsync."""

__version__ = "1.0.0"
