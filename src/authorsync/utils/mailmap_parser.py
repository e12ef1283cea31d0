"""Parsing of existing mailmap files.

Line grammar (the same one :func:`generate_mailmap` writes)::

    Canonical Name <canonical@email> Alias Name <alias@email>
    Canonical Name <canonical@email> <alias@email>
    Canonical Name <email>
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import NamedTuple, Optional, Union

from ..errors import InputFormatError
from ..models import Identity
from .identity_io import merge_duplicates

logger = logging.getLogger(__name__)

_MAILMAP_LINE_RE = re.compile(r"^([^<]+)?<([^>]+)>(?:\s+([^<]+)?<([^>]+)>)?$")


class MailmapEntry(NamedTuple):
    """Canonical identity a mailmap line resolves to."""

    name: str
    email: str


def mailmap_key(name: str, email: str) -> str:
    """Build the ``name|email`` lookup key (``|email`` for email-only keys)."""
    return f"{name}|{email}"


def parse_mailmap(content: str) -> dict[str, MailmapEntry]:
    """Parse mailmap text into a mapping of alias key to canonical identity.

    Blank lines and ``#`` comment lines are skipped, as are lines that do not
    follow the mailmap grammar. A bare ``Name <email>`` line maps the key
    ``|email`` so any identity using that email picks up the name.

    Args:
        content: Mailmap file content

    Returns:
        Dict keyed ``"<alias name>|<alias email>"`` or ``"|<email>"``
    """
    mappings: dict[str, MailmapEntry] = {}

    for line_number, line in enumerate(content.splitlines(), start=1):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        match = _MAILMAP_LINE_RE.match(trimmed)
        if not match:
            logger.debug(f"Skipping unparseable mailmap line {line_number}: {trimmed!r}")
            continue

        canonical_name, canonical_email, old_name, old_email = match.groups()
        canonical = MailmapEntry(
            name=(canonical_name or "").strip(),
            email=canonical_email.strip(),
        )

        if old_email:
            mappings[mailmap_key((old_name or "").strip(), old_email.strip())] = canonical
        elif canonical_name:
            mappings[mailmap_key("", canonical_email.strip())] = canonical

    logger.debug(f"Parsed {len(mappings)} mailmap entries")
    return mappings


def read_mailmap(path: Union[Path, str]) -> Optional[dict[str, MailmapEntry]]:
    """Read and parse a mailmap file, returning None when it does not exist."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise InputFormatError(f"Could not read mailmap: {e}", str(path)) from e
    return parse_mailmap(content)


def _lowercase_keys(mapping: dict[str, MailmapEntry]) -> dict[str, MailmapEntry]:
    return {key.lower(): entry for key, entry in mapping.items()}


def _resolve(identity: Identity, lowered: dict[str, MailmapEntry]) -> Identity:
    email = identity.email.lower()
    entry = lowered.get(mailmap_key(identity.name.lower(), email)) or lowered.get(
        mailmap_key("", email)
    )
    if entry is None:
        return identity

    return Identity(
        name=entry.name or identity.name,
        email=entry.email or identity.email,
        commits=identity.commits,
    )


def resolve_identity(identity: Identity, mapping: dict[str, MailmapEntry]) -> Identity:
    """Rewrite one identity to its canonical form under ``mapping``.

    Follows git's lookup order: the exact ``name|email`` entry wins over an
    email-only entry. Keys are compared case-insensitively.
    """
    return _resolve(identity, _lowercase_keys(mapping))


def apply_mailmap(
    identities: Iterable[Identity], mapping: dict[str, MailmapEntry]
) -> list[Identity]:
    """Resolve identities through an existing mailmap and merge the results.

    Identities an existing mailmap already maps together collapse into one
    record with the summed commit count.
    """
    lowered = _lowercase_keys(mapping)
    resolved = [_resolve(identity, lowered) for identity in identities]
    return merge_duplicates(resolved)
