"""Tests for identity clustering."""

import pytest

from authorsync.core.clustering import (
    CLUSTER_CONFIDENCE,
    analyze_identities,
    find_clusters,
    score_pair,
)
from authorsync.models import Identity


class TestScorePair:
    """Rule-by-rule tests for pair scoring."""

    def test_email_match(self):
        confidence, reason = score_pair(
            Identity("John Doe", "john@example.com", 10), Identity("John", "john@example.com", 1)
        )
        assert confidence == 1.0
        assert reason == "exact-email"

    def test_similar_name_same_domain(self):
        confidence, reason = score_pair(
            Identity("John Smith", "john.smith@acme.com", 20),
            Identity("Jon Smith", "jsmith@acme.com", 5),
        )
        assert confidence == pytest.approx(0.81)
        assert reason == "similar-name-same-domain"

    def test_similar_name_other_domain(self):
        confidence, reason = score_pair(
            Identity("John Smith", "john.smith@acme.com", 20),
            Identity("Jon Smith", "jsmith@gmail.com", 5),
        )
        assert confidence == pytest.approx(0.63)
        assert reason == "similar-name"

    def test_shared_mailbox_with_different_names_is_discounted(self):
        confidence, reason = score_pair(
            Identity("Alice Smith", "shared@team.com", 10),
            Identity("Bob Jones", "shared@team.com", 5),
        )
        assert confidence == pytest.approx(0.6)
        assert reason == "exact-email-name-mismatch"

    def test_nothing_matches(self):
        assert score_pair(
            Identity("Alice", "alice@a.com", 1), Identity("Bob", "bob@b.com", 1)
        ) == (0.0, "")


class TestFindClusters:
    """Tests for find_clusters."""

    def test_empty_input(self):
        assert find_clusters([]) == []

    def test_single_identity(self):
        assert find_clusters([Identity("John Doe", "john@example.com", 5)]) == []

    def test_exact_email_forms_one_cluster(self):
        clusters = find_clusters(
            [Identity("John Doe", "john@example.com", 10), Identity("John", "john@example.com", 5)]
        )
        assert len(clusters) == 1
        assert clusters[0].reason == "exact-email"
        assert clusters[0].confidence == CLUSTER_CONFIDENCE

    def test_highest_commit_count_becomes_canonical(self):
        clusters = find_clusters(
            [Identity("John", "john@example.com", 1), Identity("John Doe", "john@example.com", 50)]
        )
        assert clusters[0].canonical.name == "John Doe"
        assert [alias.name for alias in clusters[0].aliases] == ["John"]

    def test_unrelated_identities_are_not_clustered(self):
        clusters = find_clusters(
            [Identity("Alice", "alice@a.com", 3), Identity("Bob", "bob@b.com", 2)]
        )
        assert clusters == []

    def test_shared_mailbox_respects_threshold(self):
        identities = [
            Identity("Alice Smith", "shared@team.com", 10),
            Identity("Bob Jones", "shared@team.com", 5),
        ]
        assert len(find_clusters(identities)) == 1
        assert find_clusters(identities, min_confidence=0.7) == []

    def test_clusters_team(self, team_identities):
        clusters = find_clusters(team_identities)

        assert len(clusters) == 5
        reasons = {cluster.canonical.name: cluster.reason for cluster in clusters}
        assert reasons == {
            "octocat": "github-noreply-match",
            "Carol White": "similar-name",
            "Alice Smith": "same-local-part",
            "John Smith": "similar-name-same-domain",
            "Dan Brown": "exact-email",
        }

    def test_sorted_by_total_commits(self, team_identities):
        clusters = find_clusters(team_identities)
        totals = [cluster.total_commits for cluster in clusters]
        assert totals == [160, 50, 42, 16, 11]

    def test_tied_commits_keep_input_order(self, team_identities):
        """Both Carol identities have 25 commits; the first listed leads."""
        carol = next(c for c in find_clusters(team_identities) if c.canonical.name == "Carol White")
        assert carol.canonical.email == "carol@acme.com"
        assert carol.aliases[0].email == "carol.white@gmail.com"

    def test_each_identity_in_at_most_one_cluster(self, team_identities):
        seen = []
        for cluster in find_clusters(team_identities, min_confidence=0.3):
            seen.extend(cluster.members)
        assert len(seen) == len(set(seen))

    def test_aliases_never_include_canonical(self, team_identities):
        for cluster in find_clusters(team_identities):
            assert cluster.aliases
            assert cluster.canonical not in cluster.aliases

    def test_lower_threshold_never_finds_fewer_clusters(self, team_identities):
        counts = [
            len(find_clusters(team_identities, min_confidence=threshold))
            for threshold in (0.95, 0.9, 0.8, 0.7, 0.6)
        ]
        assert counts == [1, 1, 3, 5, 5]
        assert counts == sorted(counts)

    def test_rerank_canonical_demotes_noreply_head(self, team_identities):
        clusters = find_clusters(team_identities, rerank_canonical=True)
        octo = clusters[0]

        assert octo.canonical.email == "octocat@github.com"
        assert [alias.email for alias in octo.aliases] == [
            "12345+octocat@users.noreply.github.com"
        ]
        assert octo.reason == "github-noreply-match"
        assert octo.total_commits == 160

    def test_rerank_keeps_membership(self, team_identities):
        plain = find_clusters(team_identities)
        reranked = find_clusters(team_identities, rerank_canonical=True)
        assert [set(c.members) for c in plain] == [set(c.members) for c in reranked]


class TestAnalyzeIdentities:
    """Tests for analyze_identities."""

    def test_statistics(self, team_identities):
        stats = analyze_identities(team_identities)

        assert stats.total_identities == 10
        assert stats.unique_names == 8
        assert stats.unique_emails == 9
        assert stats.unique_domains == 6
        assert stats.noreply_emails == 1
        assert stats.potential_duplicates == 2
        assert stats.total_commits == 279

    def test_empty(self):
        stats = analyze_identities([])
        assert stats.total_identities == 0
        assert stats.total_commits == 0
