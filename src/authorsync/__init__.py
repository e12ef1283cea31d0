"""authorsync - Detect duplicate git authors and generate .mailmap files."""

from ._version import __version__
from .core import (
    analyze_identities,
    email_domain,
    email_local,
    emails_match,
    find_clusters,
    is_noreply,
    name_similarity,
    normalize_name,
    select_canonical,
)
from .errors import AuthorsyncError, ConfigurationError, EmptyInputError, InputFormatError
from .models import (
    AnalysisResult,
    AnalysisStats,
    ClusterStats,
    EmailMatchVerdict,
    Identity,
    IdentityCluster,
)
from .pipeline import analyze
from .reports import format_mapping_summary, generate_mailmap, generate_stats
from .utils import load_identities, parse_mailmap

__all__ = [
    "__version__",
    "Identity",
    "IdentityCluster",
    "EmailMatchVerdict",
    "AnalysisStats",
    "ClusterStats",
    "AnalysisResult",
    "AuthorsyncError",
    "ConfigurationError",
    "EmptyInputError",
    "InputFormatError",
    "normalize_name",
    "email_local",
    "email_domain",
    "is_noreply",
    "name_similarity",
    "emails_match",
    "find_clusters",
    "analyze_identities",
    "select_canonical",
    "generate_mailmap",
    "format_mapping_summary",
    "generate_stats",
    "load_identities",
    "parse_mailmap",
    "analyze",
]
