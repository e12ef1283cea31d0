"""Terminal output for authorsync."""

from .display import RichDisplay

__all__ = ["RichDisplay"]
