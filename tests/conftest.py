"""Shared fixtures for authorsync tests."""

import pytest

from authorsync.models import Identity


@pytest.fixture
def team_identities() -> list[Identity]:
    """Five people, each with two identities, mixed across match rules."""
    return [
        Identity("Alice Smith", "alice@acme.com", 40),
        Identity("Carol White", "carol@acme.com", 25),
        Identity("Carol White", "carol.white@gmail.com", 25),
        Identity("Dan Brown", "dan@corp.io", 8),
        Identity("Daniel Brown", "dan@corp.io", 3),
        Identity("John Smith", "john.smith@initech.com", 12),
        Identity("Jon Smith", "jsmith@initech.com", 4),
        Identity("octocat", "12345+octocat@users.noreply.github.com", 100),
        Identity("The Octocat", "octocat@github.com", 60),
        Identity("Alice Smith", "alice@gmail.com", 2),
    ]


SHORTLOG_OUTPUT = (
    "    50\tJohn Doe <john@example.com>\n"
    "     5\tJohn <john@example.com>\n"
    "    20\tJane Roe <jane@corp.io>\n"
)


@pytest.fixture
def shortlog_output() -> str:
    return SHORTLOG_OUTPUT
