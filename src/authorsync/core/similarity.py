"""Pairwise similarity scoring for author names and emails."""

import re
from typing import Optional

from rapidfuzz.distance import Levenshtein

from ..models import NO_EMAIL_MATCH, EmailMatchVerdict
from .normalize import email_local, normalize_name

# GitHub private commit address: optional "<id>+" prefix, then the username
GITHUB_NOREPLY_RE = re.compile(r"^(\d+\+)?([^@]+)@users\.noreply\.github\.com$")

SUBSTRING_SIMILARITY = 0.9
JACCARD_THRESHOLD = 0.5
MIN_SHARED_LOCAL_LENGTH = 3


def name_similarity(name1: str, name2: str) -> float:
    """Calculate a similarity score between two names.

    The checks run in order and the first applicable one decides:

    1. identical normalized names score 1.0
    2. an empty side scores 0.0
    3. one name containing the other ("John" vs "John Doe") scores 0.9
    4. token-set Jaccard overlap above 0.5 scores ``0.7 + 0.2 * jaccard``
    5. otherwise ``1 - levenshtein / max_length``

    Args:
        name1: First display name
        name2: Second display name

    Returns:
        Similarity in [0, 1]
    """
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)

    if n1 == n2:
        return 1.0
    if not n1 or not n2:
        return 0.0

    if n1 in n2 or n2 in n1:
        return SUBSTRING_SIMILARITY

    words1 = set(n1.split(" "))
    words2 = set(n2.split(" "))
    jaccard = len(words1 & words2) / len(words1 | words2)
    if jaccard > JACCARD_THRESHOLD:
        return 0.7 + jaccard * 0.2

    max_len = max(len(n1), len(n2))
    distance = Levenshtein.distance(n1, n2)
    return 1 - distance / max_len


def _github_username(email: str) -> Optional[str]:
    match = GITHUB_NOREPLY_RE.match(email)
    return match.group(2) if match else None


def emails_match(email1: str, email2: str) -> EmailMatchVerdict:
    """Check whether two emails likely belong to the same person.

    Args:
        email1: First email address
        email2: Second email address

    Returns:
        Verdict carrying whether the emails match, how confident the match is
        and a reason tag. Argument order does not affect the result.
    """
    e1 = email1.lower()
    e2 = email2.lower()

    if e1 == e2:
        return EmailMatchVerdict(True, 1.0, "exact-email")

    local1 = email_local(e1)
    local2 = email_local(e2)

    # Personal vs work address with the same mailbox name
    if local1 == local2 and len(local1) > MIN_SHARED_LOCAL_LENGTH:
        return EmailMatchVerdict(True, 0.8, "same-local-part")

    user1 = _github_username(e1)
    user2 = _github_username(e2)
    if user1 is not None and user2 is not None and user1 == user2:
        return EmailMatchVerdict(True, 0.95, "github-noreply-username")

    if user1 is not None and user1 == local2:
        return EmailMatchVerdict(True, 0.7, "github-noreply-match")
    if user2 is not None and user2 == local1:
        return EmailMatchVerdict(True, 0.7, "github-noreply-match")

    return NO_EMAIL_MATCH
