"""Report generation for identity clusters."""

from .mailmap_writer import format_mapping_summary, generate_mailmap, generate_stats

__all__ = ["generate_mailmap", "format_mapping_summary", "generate_stats"]
