from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

import numpy as np

from skillpath.data.taxonomy import CLUSTER_BRIDGE_WEIGHT, CLUSTER_MEMBERSHIP_WEIGHT, SKILL_CLUSTERS
from skillpath.schemas.jobs import JobPosting
from skillpath.schemas.weights import RelationshipEdge
from skillpath.services.skill_normalizer import SkillNormalizer


logger = logging.getLogger(__name__)


class RelationshipGraph:
    """Skill co-occurrence graph over one job corpus.

    Edge strength is the pair's co-occurrence count divided by the largest pair count in the
    corpus. Centrality combines the mean strength to same-cluster peers with the share of
    other clusters the skill is connected to. A graph is immutable; build a new one when the
    corpus changes.
    """

    def __init__(
        self,
        skills: Sequence[str],
        co_occurrence: np.ndarray,
        clusters: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._skills = list(skills)
        self._index = {s: i for i, s in enumerate(self._skills)}
        counts = np.array(co_occurrence, dtype=np.int64, copy=True)
        if counts.size:
            np.fill_diagonal(counts, 0)
        self._counts = counts
        peak = int(counts.max()) if counts.size else 0
        self._strength = counts / peak if peak else np.zeros_like(counts, dtype=np.float64)
        self._clusters = {
            name: frozenset(members) for name, members in (SKILL_CLUSTERS if clusters is None else clusters).items()
        }
        self._centrality = {s: self._compute_centrality(s) for s in self._skills}

    @classmethod
    def from_skill_sets(
        cls,
        skill_sets: Iterable[Iterable[str]],
        clusters: Mapping[str, Iterable[str]] | None = None,
    ) -> "RelationshipGraph":
        rows = [frozenset(s for s in skills if s) for skills in skill_sets]
        vocab = sorted(set().union(*rows)) if rows else []
        index = {s: i for i, s in enumerate(vocab)}
        incidence = np.zeros((len(rows), len(vocab)), dtype=np.int64)
        for r, skills in enumerate(rows):
            for s in skills:
                incidence[r, index[s]] = 1
        co = incidence.T @ incidence if vocab else np.zeros((0, 0), dtype=np.int64)
        graph = cls(vocab, co, clusters)
        logger.debug("relationships.built skills=%d edges=%d", len(vocab), len(graph.edges()))
        return graph

    @classmethod
    def from_corpus(
        cls,
        corpus: Sequence[JobPosting],
        normalizer: SkillNormalizer | None = None,
        clusters: Mapping[str, Iterable[str]] | None = None,
    ) -> "RelationshipGraph":
        normalizer = normalizer or SkillNormalizer()
        return cls.from_skill_sets((normalizer.parse_and_normalize(job.required_skills) for job in corpus), clusters)

    @property
    def skills(self) -> list[str]:
        return list(self._skills)

    def __contains__(self, skill: object) -> bool:
        return skill in self._index

    def __len__(self) -> int:
        return len(self._skills)

    def strength(self, first: str, second: str) -> float:
        i, j = self._index.get(first), self._index.get(second)
        if i is None or j is None:
            return 0.0
        return float(self._strength[i, j])

    def neighbors(self, skill: str) -> set[str]:
        i = self._index.get(skill)
        if i is None:
            return set()
        return {self._skills[j] for j in np.flatnonzero(self._counts[i])}

    def clusters_of(self, skill: str) -> list[str]:
        return [name for name, members in self._clusters.items() if skill in members]

    def cluster_peers(self, skill: str) -> set[str]:
        peers: set[str] = set()
        for name in self.clusters_of(skill):
            peers.update(self._clusters[name])
        peers.discard(skill)
        return peers

    def related(self, skill: str) -> set[str]:
        """Co-occurrence neighbours plus same-cluster peers."""

        return self.neighbors(skill) | self.cluster_peers(skill)

    def _compute_centrality(self, skill: str) -> float:
        i = self._index[skill]
        own = set(self.clusters_of(skill))

        peers = [p for p in self.cluster_peers(skill) if p in self._index]
        membership = float(np.mean([self._strength[i, self._index[p]] for p in peers])) if peers else 0.0

        others = [name for name in self._clusters if name not in own]
        neighbors = self.neighbors(skill)
        reached = sum(1 for name in others if neighbors & self._clusters[name])
        bridging = reached / len(others) if others else 0.0

        return min(1.0, CLUSTER_MEMBERSHIP_WEIGHT * membership + CLUSTER_BRIDGE_WEIGHT * bridging)

    def centrality(self, skill: str) -> float:
        return self._centrality.get(skill, 0.0)

    def edges(self) -> list[RelationshipEdge]:
        out: list[RelationshipEdge] = []
        n = len(self._skills)
        for i in range(n):
            for j in range(i + 1, n):
                count = int(self._counts[i, j])
                if count:
                    out.append(
                        RelationshipEdge(
                            skills=(self._skills[i], self._skills[j]),
                            strength=float(self._strength[i, j]),
                            co_occurrences=count,
                        )
                    )
        return out
