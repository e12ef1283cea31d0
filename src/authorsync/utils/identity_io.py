"""Loading identity lists from already-exported history data.

Supported formats:

- ``yaml``: a YAML or JSON list of ``{name, email, commits}`` mappings, or a
  mapping with an ``authors`` key holding that list (the shape written by
  ``authorsync analyze --json``)
- ``shortlog``: output of ``git shortlog -sne`` (``<count>\\t<Name> <email>``)
- ``log``: one ``Name|email`` line per commit, as printed by
  ``git log --format='%aN|%aE'``; occurrences are counted
"""

import logging
import re
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO, Union

import yaml

from ..errors import InputFormatError
from ..models import Identity

logger = logging.getLogger(__name__)

INPUT_FORMATS = ("auto", "yaml", "shortlog", "log")

_SHORTLOG_RE = re.compile(r"^\s*(\d+)\s+(.*?)\s*<([^>]*)>\s*$")
_LOG_LINE_RE = re.compile(r"^([^|]*)\|([^|]*)$")


def merge_duplicates(identities: Iterable[Identity]) -> list[Identity]:
    """Combine records with the same (name, email), summing their commits.

    The first occurrence decides the position in the returned list.
    """
    totals: dict[tuple[str, str], int] = {}
    for identity in identities:
        key = (identity.name, identity.email)
        totals[key] = totals.get(key, 0) + identity.commits
    return [Identity(name, email, commits) for (name, email), commits in totals.items()]


def parse_shortlog(text: str) -> list[Identity]:
    """Parse ``git shortlog -sne`` output into identities.

    Blank lines and lines without a name or email are skipped.
    """
    identities = []
    for line in text.splitlines():
        if not line.strip():
            continue
        match = _SHORTLOG_RE.match(line)
        if not match:
            logger.debug(f"Skipping malformed shortlog line: {line!r}")
            continue
        commits, name, email = match.groups()
        if not name or not email.strip():
            logger.debug(f"Skipping shortlog line without name or email: {line!r}")
            continue
        identities.append(Identity(name=name, email=email.strip(), commits=int(commits)))
    return merge_duplicates(identities)


def parse_log_lines(text: str) -> list[Identity]:
    """Count ``Name|email`` lines into identities, most commits first."""
    counts: dict[tuple[str, str], int] = {}
    for line in text.splitlines():
        match = _LOG_LINE_RE.match(line.strip())
        if not match:
            continue
        name, email = match.group(1).strip(), match.group(2).strip()
        if not name or not email:
            continue
        counts[(name, email)] = counts.get((name, email), 0) + 1

    identities = [Identity(name, email, commits) for (name, email), commits in counts.items()]
    identities.sort(key=lambda identity: identity.commits, reverse=True)
    return identities


def _records_from_data(data: Any, source: str) -> list[dict[str, Any]]:
    if data is None:
        return []
    if isinstance(data, dict):
        if "authors" not in data:
            raise InputFormatError("Expected a list of identities or an 'authors' key", source)
        data = data["authors"]
    if not isinstance(data, list):
        raise InputFormatError(f"Expected a list of identities, got {type(data).__name__}", source)
    return data


def parse_structured(text: str, source: str = "<string>") -> list[Identity]:
    """Parse a YAML/JSON identity list.

    Raises:
        InputFormatError: If the document is not valid YAML or does not hold
            a list of identity mappings with non-negative commit counts
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InputFormatError(f"Invalid YAML/JSON identity list: {e}", source) from e

    identities = []
    for index, record in enumerate(_records_from_data(data, source)):
        if not isinstance(record, dict):
            raise InputFormatError(f"Identity #{index} is not a mapping: {record!r}", source)
        try:
            identity = Identity.from_dict(record)
        except (TypeError, ValueError) as e:
            raise InputFormatError(f"Invalid identity #{index}: {e}", source) from e
        if not identity.name or not identity.email:
            logger.debug(f"Skipping identity #{index} without name or email")
            continue
        identities.append(identity)
    return merge_duplicates(identities)


def detect_format(text: str) -> str:
    """Guess the input format from the first non-blank line."""
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if _SHORTLOG_RE.match(line):
            return "shortlog"
        if stripped[0] not in "-[{#" and _LOG_LINE_RE.match(stripped):
            return "log"
        return "yaml"
    return "yaml"


def parse_identities(text: str, fmt: str = "auto", source: str = "<string>") -> list[Identity]:
    """Parse identity text in the given (or detected) format."""
    if fmt not in INPUT_FORMATS:
        raise InputFormatError(f"Unknown input format '{fmt}'", source)
    if fmt == "auto":
        fmt = detect_format(text)
        logger.debug(f"Detected input format '{fmt}' for {source}")

    if fmt == "shortlog":
        return parse_shortlog(text)
    if fmt == "log":
        return parse_log_lines(text)
    return parse_structured(text, source)


def load_identities(
    source: Union[Path, str, TextIO], fmt: str = "auto"
) -> list[Identity]:
    """Load identities from a file path, ``-`` for stdin, or an open stream.

    Args:
        source: Where to read from
        fmt: One of :data:`INPUT_FORMATS`

    Returns:
        Identities with duplicate (name, email) pairs merged

    Raises:
        InputFormatError: If the source cannot be read or parsed
    """
    if hasattr(source, "read"):
        name = getattr(source, "name", "<stream>")
        text = source.read()
    elif str(source) == "-":
        name = "<stdin>"
        text = sys.stdin.read()
    else:
        path = Path(source)
        name = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise InputFormatError("Identity file not found", name) from e
        except (OSError, UnicodeDecodeError) as e:
            raise InputFormatError(f"Could not read identity file: {e}", name) from e

    identities = parse_identities(text, fmt, source=name)
    logger.info(f"Loaded {len(identities)} identities from {name}")
    return identities
