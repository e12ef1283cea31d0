"""Data models for author identity resolution."""

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class Identity:
    """A single (name, email) attribution observed in history."""

    name: str
    email: str
    commits: int = 0

    def __post_init__(self) -> None:
        if self.commits < 0:
            raise ValueError(f"Commit count cannot be negative: {self.commits}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Identity":
        """Build an identity from a plain mapping with name/email/commits keys."""
        commits = data.get("commits")
        if commits is None:
            commits = 0
        if isinstance(commits, bool) or not isinstance(commits, int):
            raise TypeError(f"Commit count must be an integer, got {commits!r}")

        return cls(
            name=str(data.get("name", "") or ""),
            email=str(data.get("email", "") or ""),
            commits=commits,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class EmailMatchVerdict:
    """Result of comparing two email addresses."""

    match: bool
    confidence: float
    reason: str


NO_EMAIL_MATCH = EmailMatchVerdict(match=False, confidence=0.0, reason="")


@dataclass
class IdentityCluster:
    """A canonical identity plus the aliases believed to be the same person."""

    canonical: Identity
    aliases: list[Identity]
    confidence: float  # 0.0 to 1.0, informational only
    reason: str

    @property
    def total_commits(self) -> int:
        """Commits across the canonical identity and every alias."""
        return self.canonical.commits + sum(alias.commits for alias in self.aliases)

    @property
    def members(self) -> list[Identity]:
        """All identities in the cluster, canonical first."""
        return [self.canonical, *self.aliases]

    @property
    def all_emails(self) -> set[str]:
        """Get all emails in this cluster."""
        emails = {self.canonical.email}
        emails.update(alias.email for alias in self.aliases)
        return emails

    @property
    def all_names(self) -> set[str]:
        """Get all names in this cluster."""
        names = {self.canonical.name}
        names.update(alias.name for alias in self.aliases)
        return names

    def to_dict(self) -> dict[str, Any]:
        return {
            "canonical": self.canonical.to_dict(),
            "aliases": [alias.to_dict() for alias in self.aliases],
            "confidence": self.confidence,
            "reason": self.reason,
            "emails": sorted(self.all_emails),
            "names": sorted(self.all_names),
        }


@dataclass(frozen=True)
class ClusterStats:
    """Aggregate statistics over one set of clusters."""

    clusters_found: int
    aliases_consolidated: int
    commits_affected: int
    authors_after: int
    reduction_percent: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class AnalysisStats:
    """Aggregate statistics over a raw identity list."""

    total_identities: int
    unique_names: int
    unique_emails: int
    unique_domains: int
    noreply_emails: int
    potential_duplicates: int
    total_commits: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class AnalysisResult:
    """Everything produced by one analysis run."""

    identities: list[Identity]
    clusters: list[IdentityCluster]
    stats: AnalysisStats
    cluster_stats: ClusterStats
    mailmap: str = ""
    summary: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "authors": [identity.to_dict() for identity in self.identities],
            "clusters": [cluster.to_dict() for cluster in self.clusters],
            "stats": {**self.stats.to_dict(), **self.cluster_stats.to_dict()},
            "mailmap": self.mailmap,
            "metadata": self.metadata,
        }
