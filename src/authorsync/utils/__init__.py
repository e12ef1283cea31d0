"""Utility modules for authorsync."""

from .identity_io import load_identities, merge_duplicates, parse_identities, parse_shortlog
from .mailmap_parser import MailmapEntry, apply_mailmap, parse_mailmap, read_mailmap

__all__ = [
    "load_identities",
    "merge_duplicates",
    "parse_identities",
    "parse_shortlog",
    "MailmapEntry",
    "apply_mailmap",
    "parse_mailmap",
    "read_mailmap",
]
