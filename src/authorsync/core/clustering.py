"""Identity clustering - groups author identities that belong to one person."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable

from ..models import AnalysisStats, EmailMatchVerdict, Identity, IdentityCluster
from .canonical import select_canonical
from .normalize import email_domain, is_noreply, normalize_name
from .similarity import emails_match, name_similarity

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONFIDENCE = 0.6

# Fixed informational value, not an aggregate of per-alias confidences
CLUSTER_CONFIDENCE = 0.8

SIMILAR_NAME_THRESHOLD = 0.8
NAME_MISMATCH_THRESHOLD = 0.3
SAME_DOMAIN_WEIGHT = 0.9
OTHER_DOMAIN_WEIGHT = 0.7
NAME_MISMATCH_DISCOUNT = 0.6


@dataclass
class PairScore:
    """Running (confidence, reason) state while scoring one candidate pair."""

    email: EmailMatchVerdict
    confidence: float = 0.0
    reason: str = ""


PairRule = Callable[[Identity, Identity, PairScore], None]


def _email_rule(canonical: Identity, candidate: Identity, score: PairScore) -> None:
    if score.email.match:
        score.confidence = score.email.confidence
        score.reason = score.email.reason


def _similar_name_rule(canonical: Identity, candidate: Identity, score: PairScore) -> None:
    if score.email.match:
        return
    similarity = name_similarity(canonical.name, candidate.name)
    if similarity <= SIMILAR_NAME_THRESHOLD:
        return
    if email_domain(canonical.email) == email_domain(candidate.email):
        score.confidence = similarity * SAME_DOMAIN_WEIGHT
        score.reason = "similar-name-same-domain"
    else:
        score.confidence = similarity * OTHER_DOMAIN_WEIGHT
        score.reason = "similar-name"


def _name_mismatch_rule(canonical: Identity, candidate: Identity, score: PairScore) -> None:
    # A shared mailbox used by clearly different people
    if not score.email.match:
        return
    if name_similarity(canonical.name, candidate.name) < NAME_MISMATCH_THRESHOLD:
        score.confidence = score.email.confidence * NAME_MISMATCH_DISCOUNT
        score.reason = f"{score.email.reason}-name-mismatch"


PAIR_RULES: tuple[PairRule, ...] = (
    _email_rule,
    _similar_name_rule,
    _name_mismatch_rule,
)


def score_pair(canonical: Identity, candidate: Identity) -> tuple[float, str]:
    """Score how likely ``candidate`` is an alias of ``canonical``.

    Runs every rule in :data:`PAIR_RULES` in order over a shared state.

    Returns:
        Tuple of (confidence, reason); reason is empty when nothing matched
    """
    score = PairScore(email=emails_match(canonical.email, candidate.email))
    for rule in PAIR_RULES:
        rule(canonical, candidate, score)
    return score.confidence, score.reason


def _rerank(cluster: IdentityCluster) -> IdentityCluster:
    members = cluster.members
    winner = select_canonical(members)
    if winner is cluster.canonical:
        return cluster

    logger.debug(f"Canonical for cluster changed from {cluster.canonical} to {winner}")
    aliases = [member for member in members if member is not winner]
    return IdentityCluster(
        canonical=winner,
        aliases=aliases,
        confidence=cluster.confidence,
        reason=cluster.reason,
    )


def find_clusters(
    identities: Sequence[Identity],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    rerank_canonical: bool = False,
) -> list[IdentityCluster]:
    """Find clusters of identities that likely belong to the same person.

    Identities are visited in descending commit order, so the most active
    unconsumed identity heads each cluster. Equal commit counts keep their
    input order.

    Args:
        identities: Identity records to group
        min_confidence: Minimum pair confidence for a candidate to join
        rerank_canonical: Re-pick each cluster's canonical identity with
            :func:`select_canonical` instead of keeping the cluster head

    Returns:
        Clusters with at least one alias, ordered by total commits descending
    """
    ordered = sorted(identities, key=lambda identity: identity.commits, reverse=True)
    consumed: set[int] = set()
    clusters: list[IdentityCluster] = []

    for i, canonical in enumerate(ordered):
        if i in consumed:
            continue

        aliases: list[Identity] = []
        cluster_reason = ""

        for j in range(i + 1, len(ordered)):
            if j in consumed:
                continue

            candidate = ordered[j]
            confidence, reason = score_pair(canonical, candidate)
            if confidence < min_confidence:
                continue

            aliases.append(candidate)
            consumed.add(j)
            if not cluster_reason:
                cluster_reason = reason
            logger.debug(
                f"Matched {candidate} to {canonical} "
                f"(confidence={confidence:.2f}, reason={reason})"
            )

        if aliases:
            consumed.add(i)
            clusters.append(
                IdentityCluster(
                    canonical=canonical,
                    aliases=aliases,
                    confidence=CLUSTER_CONFIDENCE,
                    reason=cluster_reason,
                )
            )

    if rerank_canonical:
        clusters = [_rerank(cluster) for cluster in clusters]

    clusters.sort(key=lambda cluster: cluster.total_commits, reverse=True)

    logger.info(
        f"Found {len(clusters)} identity clusters among {len(ordered)} identities "
        f"(min_confidence={min_confidence})"
    )
    return clusters


def analyze_identities(identities: Sequence[Identity]) -> AnalysisStats:
    """Summarize a raw identity list before any clustering."""
    unique_names = len({normalize_name(identity.name) for identity in identities})

    return AnalysisStats(
        total_identities=len(identities),
        unique_names=unique_names,
        unique_emails=len({identity.email.lower() for identity in identities}),
        unique_domains=len({email_domain(identity.email) for identity in identities}),
        noreply_emails=sum(1 for identity in identities if is_noreply(identity.email)),
        potential_duplicates=len(identities) - unique_names,
        total_commits=sum(identity.commits for identity in identities),
    )
