"""Identity-resolution engine: normalization, scoring, clustering, selection."""

from .canonical import select_canonical
from .clustering import analyze_identities, find_clusters
from .normalize import email_domain, email_local, is_noreply, normalize_name
from .similarity import emails_match, name_similarity

__all__ = [
    "normalize_name",
    "email_local",
    "email_domain",
    "is_noreply",
    "name_similarity",
    "emails_match",
    "find_clusters",
    "analyze_identities",
    "select_canonical",
]
