"""Mailmap, summary and statistics output for identity clusters."""

import logging
from collections.abc import Sequence
from datetime import datetime
from io import StringIO
from typing import Optional

from .._version import __version__
from ..models import ClusterStats, Identity, IdentityCluster

# Get logger for this module
logger = logging.getLogger(__name__)


def format_mailmap_line(canonical: Identity, alias: Identity) -> str:
    """Format one ``Canonical <email> Alias <email>`` mailmap entry."""
    return f"{canonical.name} <{canonical.email}> {alias.name} <{alias.email}>"


def _write_header(
    report: StringIO, clusters: Sequence[IdentityCluster], generated_at: datetime
) -> None:
    alias_count = sum(len(cluster.aliases) for cluster in clusters)
    report.write("# .mailmap - maps alias author identities to canonical ones\n")
    report.write(f"# Generated by authorsync v{__version__}\n")
    report.write(f"# Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n")
    report.write(f"# Clusters: {len(clusters)}, aliases: {alias_count}\n")
    report.write("# Format: Canonical Name <canonical@email> Alias Name <alias@email>\n")
    report.write("\n")


def generate_mailmap(
    clusters: Sequence[IdentityCluster],
    comments: bool = True,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render clusters as mailmap text.

    Args:
        clusters: Clusters to render, written in the given order
        comments: Prepend a ``#`` header block identifying the tool
        generated_at: Timestamp for the header (defaults to now)

    Returns:
        Mailmap text with one line per alias. Without comments the text
        contains no ``#`` character at all.
    """
    report = StringIO()

    if comments:
        _write_header(report, clusters, generated_at or datetime.now())

    for cluster in clusters:
        for alias in cluster.aliases:
            report.write(format_mailmap_line(cluster.canonical, alias))
            report.write("\n")

    logger.debug(f"Generated mailmap for {len(clusters)} clusters (comments={comments})")
    return report.getvalue()


def format_mapping_summary(clusters: Sequence[IdentityCluster]) -> str:
    """Format clusters as a human-readable block per canonical identity."""
    blocks = []
    for cluster in clusters:
        lines = [f"{cluster.canonical} ({cluster.total_commits} commits total)"]
        for alias in cluster.aliases:
            lines.append(f"  ← {alias} ({alias.commits} commits)")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def generate_stats(clusters: Sequence[IdentityCluster], total_authors_before: int) -> ClusterStats:
    """Calculate consolidation statistics for a set of clusters.

    Args:
        clusters: Clusters found for one identity list
        total_authors_before: Number of identities before consolidation

    Returns:
        Cluster statistics; ``reduction_percent`` is 0 when there were no
        authors to begin with
    """
    aliases_consolidated = sum(len(cluster.aliases) for cluster in clusters)
    commits_affected = sum(alias.commits for cluster in clusters for alias in cluster.aliases)

    reduction_percent = 0
    if total_authors_before > 0:
        # Round half up rather than Python's banker's rounding
        reduction_percent = int(aliases_consolidated * 100 / total_authors_before + 0.5)

    return ClusterStats(
        clusters_found=len(clusters),
        aliases_consolidated=aliases_consolidated,
        commits_affected=commits_affected,
        authors_after=total_authors_before - aliases_consolidated,
        reduction_percent=reduction_percent,
    )
