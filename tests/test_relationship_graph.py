from __future__ import annotations

import numpy as np
import pytest

from skillpath.schemas.jobs import JobPosting
from skillpath.services.relationship_graph import RelationshipGraph


CLUSTERS = {"x": ("a", "b"), "y": ("c",)}


def _graph() -> RelationshipGraph:
    return RelationshipGraph.from_skill_sets([{"a", "b"}, {"a", "b"}, {"a", "c"}], clusters=CLUSTERS)


def test_strength_is_relative_to_strongest_pair() -> None:
    graph = _graph()
    assert graph.strength("a", "b") == pytest.approx(1.0)
    assert graph.strength("b", "a") == pytest.approx(1.0)
    assert graph.strength("a", "c") == pytest.approx(0.5)
    assert graph.strength("b", "c") == 0.0
    assert graph.strength("a", "a") == 0.0
    assert graph.strength("a", "missing") == 0.0


def test_centrality_combines_membership_and_bridging() -> None:
    graph = _graph()
    # a: strongest link to its only peer and reaches cluster y through c.
    assert graph.centrality("a") == pytest.approx(1.0)
    assert graph.centrality("b") == pytest.approx(0.8)
    assert graph.centrality("c") == pytest.approx(0.6)
    assert graph.centrality("unknown") == 0.0


def test_neighbors_peers_and_related() -> None:
    graph = RelationshipGraph.from_skill_sets([{"a", "c"}], clusters=CLUSTERS)
    assert graph.neighbors("a") == {"c"}
    assert graph.cluster_peers("a") == {"b"}
    assert graph.related("a") == {"b", "c"}
    assert graph.clusters_of("c") == ["y"]
    assert "b" not in graph
    assert graph.neighbors("b") == set()


def test_edges_list_each_pair_once() -> None:
    edges = _graph().edges()
    pairs = {e.skills: (e.co_occurrences, e.strength) for e in edges}
    assert pairs == {("a", "b"): (2, 1.0), ("a", "c"): (1, 0.5)}


def test_diagonal_is_ignored() -> None:
    co = np.array([[5, 1], [1, 7]])
    graph = RelationshipGraph(["a", "b"], co, clusters={})
    assert graph.strength("a", "b") == 1.0
    assert graph.centrality("a") == 0.0


def test_empty_graph() -> None:
    graph = RelationshipGraph.from_skill_sets([], clusters=CLUSTERS)
    assert len(graph) == 0
    assert graph.edges() == []
    assert graph.centrality("a") == 0.0
    assert graph.related("a") == {"b"}


def test_from_corpus_normalizes_skills(corpus: list[JobPosting]) -> None:
    graph = RelationshipGraph.from_corpus(corpus)
    assert "kubernetes" in graph
    assert "react" in graph
    assert graph.strength("javascript", "react") == pytest.approx(1.0)
    assert graph.strength("python", "docker") == pytest.approx(1.0)
    for skill in graph.skills:
        assert 0.0 <= graph.centrality(skill) <= 1.0
