"""Name and email normalization used for identity comparison.

Normalized values are only ever used for comparison, never for display.
"""

import re

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_WHITESPACE_RE = re.compile(r"\s+")

# Hosting providers that hand out private commit addresses
NOREPLY_SUFFIXES = (
    "@users.noreply.github.com",
    "@users.noreply.gitlab.com",
)


def normalize_name(name: str) -> str:
    """Canonicalize a free-text name for comparison.

    Args:
        name: Display name as found in history

    Returns:
        Lowercased name with every non ``[a-z0-9]`` character replaced by a
        space and whitespace collapsed, e.g. ``"John O'Brien"`` becomes
        ``"john o brien"``.
    """
    lowered = name.lower()
    spaced = _NON_ALNUM_RE.sub(" ", lowered)
    return _WHITESPACE_RE.sub(" ", spaced).strip()


def email_local(email: str) -> str:
    """Return the lowercased part before the first ``@`` (whole string if none)."""
    return email.split("@")[0].lower()


def email_domain(email: str) -> str:
    """Return the lowercased part after the first ``@``, or ``""`` if absent."""
    _, _, domain = email.partition("@")
    return domain.lower()


def is_noreply(email: str) -> bool:
    """Check whether an address looks automated or provider-generated.

    This is a heuristic: plus-addressed personal emails are reported as
    alias addresses too.
    """
    lower = email.lower()
    return (
        "noreply" in lower
        or "no-reply" in lower
        or any(suffix in lower for suffix in NOREPLY_SUFFIXES)
        or "+" in lower
    )
