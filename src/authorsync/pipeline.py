"""High-level analysis entry point.

Runs the whole resolution flow over an in-memory identity list:

  1. optional exclusion and existing-mailmap resolution
  2. clustering (with optional canonical re-ranking)
  3. statistics, mailmap text and human-readable summary

Both the CLI commands and library callers use :func:`analyze` so the flow
is never duplicated.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from .config import Config, ConfigLoader
from .core.clustering import analyze_identities, find_clusters
from .models import AnalysisResult, Identity
from .reports.mailmap_writer import format_mapping_summary, generate_mailmap, generate_stats
from .utils.mailmap_parser import MailmapEntry, apply_mailmap

logger = logging.getLogger(__name__)


def analyze(
    identities: Sequence[Identity],
    config: Optional[Config] = None,
    existing_mailmap: Optional[dict[str, MailmapEntry]] = None,
) -> AnalysisResult:
    """Cluster identities and render every output for one analysis run.

    Args:
        identities: Identities to analyze
        config: Configuration (defaults from :meth:`ConfigLoader.default`)
        existing_mailmap: Parsed mailmap whose mappings are applied before
            clustering, so already-resolved aliases are not proposed again

    Returns:
        Analysis result bundle
    """
    config = config or ConfigLoader.default()

    working = config.filter_identities(list(identities))
    if existing_mailmap:
        before = len(working)
        working = apply_mailmap(working, existing_mailmap)
        logger.info(f"Existing mailmap resolved {before - len(working)} identities")

    if not working:
        logger.info("No identities to analyze")

    clusters = find_clusters(
        working,
        min_confidence=config.identity.min_confidence,
        rerank_canonical=config.identity.rerank_canonical,
    )

    return AnalysisResult(
        identities=working,
        clusters=clusters,
        stats=analyze_identities(working),
        cluster_stats=generate_stats(clusters, len(working)),
        mailmap=generate_mailmap(clusters, comments=config.output.comments),
        summary=format_mapping_summary(clusters),
        metadata={
            "min_confidence": config.identity.min_confidence,
            "rerank_canonical": config.identity.rerank_canonical,
            "input_identities": len(identities),
        },
    )
