"""Canonical identity selection.

Given identities believed to belong to one person, pick the one that should
represent them in the mailmap.

The score starts from the commit count and applies multiplicative
adjustments: noreply addresses and placeholder identities such as
``root@localhost`` are penalized, company domains get a bonus.
"""

import logging
from collections.abc import Sequence

from ..errors import EmptyInputError
from ..models import Identity
from .normalize import email_domain, email_local, is_noreply, normalize_name

logger = logging.getLogger(__name__)

NOREPLY_PENALTY = 0.1
COMPANY_DOMAIN_BONUS = 1.2
GENERIC_NAME_PENALTY = 0.05
# Scores within this fraction of the best are considered tied
TIE_MARGIN = 0.05

FREE_MAIL_DOMAINS = frozenset(
    {
        "126.com",
        "163.com",
        "aol.com",
        "fastmail.com",
        "gmail.com",
        "gmx.com",
        "gmx.de",
        "gmx.net",
        "googlemail.com",
        "hotmail.com",
        "icloud.com",
        "live.com",
        "mac.com",
        "mail.ru",
        "me.com",
        "msn.com",
        "outlook.com",
        "proton.me",
        "protonmail.com",
        "qq.com",
        "web.de",
        "yahoo.com",
        "yandex.ru",
        "zoho.com",
    }
)

GENERIC_NAMES = frozenset(
    {
        "admin",
        "administrator",
        "build",
        "builder",
        "default",
        "git",
        "jenkins",
        "localhost",
        "nobody",
        "none",
        "root",
        "test",
        "ubuntu",
        "unknown",
        "user",
        "your name",
    }
)

LOCAL_DOMAIN_SUFFIXES = (".local", ".localdomain", ".lan", ".internal")


def is_company_domain(email: str) -> bool:
    """Check whether an email's domain looks like an organisation's own domain."""
    domain = email_domain(email)
    if not domain or "." not in domain:
        return False
    if domain == "localhost" or domain.endswith(LOCAL_DOMAIN_SUFFIXES):
        return False
    if domain in FREE_MAIL_DOMAINS or is_noreply(email):
        return False
    return True


def is_generic_identity(identity: Identity) -> bool:
    """Check for placeholder names like ``root`` or ``admin`` in name or mailbox."""
    return (
        normalize_name(identity.name) in GENERIC_NAMES
        or email_local(identity.email) in GENERIC_NAMES
    )


def name_token_count(name: str) -> int:
    """Count name tokens longer than one character ("John D" counts as 1)."""
    return sum(1 for token in normalize_name(name).split(" ") if len(token) > 1)


def score_identity(identity: Identity) -> float:
    """Composite preference score used to rank canonical candidates."""
    score = float(identity.commits + 1)

    if is_noreply(identity.email):
        score *= NOREPLY_PENALTY
    elif is_company_domain(identity.email):
        score *= COMPANY_DOMAIN_BONUS

    if is_generic_identity(identity):
        score *= GENERIC_NAME_PENALTY

    return score


def select_canonical(identities: Sequence[Identity]) -> Identity:
    """Pick the best representative among identities of one person.

    Args:
        identities: Identities believed to be the same person

    Returns:
        One of the given identities, unchanged

    Raises:
        EmptyInputError: If no identities are given
    """
    if not identities:
        raise EmptyInputError("Cannot select a canonical identity from empty input")

    if len(identities) == 1:
        return identities[0]

    scores = [score_identity(identity) for identity in identities]
    best_score = max(scores)
    cutoff = best_score * (1 - TIE_MARGIN)

    best_index = -1
    best_key = None
    for index, (identity, score) in enumerate(zip(identities, scores)):
        if score < cutoff:
            continue
        key = (name_token_count(identity.name), score)
        if best_key is None or key > best_key:
            best_index = index
            best_key = key

    winner = identities[best_index]
    logger.debug(f"Selected canonical {winner} out of {len(identities)} identities")
    return winner
