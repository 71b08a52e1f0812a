from __future__ import annotations

from types import SimpleNamespace

import pytest

from skillpath.schemas.jobs import JobPosting, ScoreBreakdown, ScoredJob
from skillpath.services.job_scorer import JobScorer
from skillpath.services.market_weights import MarketWeightEngine
from skillpath.services.relationship_graph import RelationshipGraph


def test_score_components(monkeypatch: pytest.MonkeyPatch) -> None:
    scorer = JobScorer()
    job = JobPosting(id="j", required_skills=["python", "docker", "sql", "aws", "git"])
    weights = {"python": 0.4, "docker": 0.4, "sql": 0.4, "java": 0.8}
    graph = SimpleNamespace(centrality=lambda skill: 0.6)
    monkeypatch.setattr(scorer, "relationship_bonus", lambda skill, required, g: 0.4 / 3)

    result = scorer.score(["python", "docker", "sql", "java"], job, weights, graph)

    assert result.breakdown.market_weight == pytest.approx(30.0)
    assert result.breakdown.centrality == pytest.approx(12.0)
    assert result.breakdown.coverage == pytest.approx(9.0)
    assert result.breakdown.relationship == pytest.approx(6.0)
    assert result.score == pytest.approx(57.0)
    assert result.matched_skills == ["docker", "python", "sql"]
    assert result.missing_skills == ["aws", "git"]
    assert result.match_count == 3
    assert result.average_matched_weight == pytest.approx(0.4)
    assert result.experience_compatibility is None


def test_relationship_bonus_is_capped(monkeypatch: pytest.MonkeyPatch) -> None:
    scorer = JobScorer()
    job = JobPosting(id="j", required_skills=["python", "docker"])
    graph = SimpleNamespace(centrality=lambda skill: 0.0)
    monkeypatch.setattr(scorer, "relationship_bonus", lambda skill, required, g: 0.9)
    result = scorer.score(["python", "docker"], job, {}, graph)
    assert result.breakdown.relationship == pytest.approx(15.0)
    # No user weight at all: the market component is zero rather than undefined.
    assert result.breakdown.market_weight == 0.0


def test_relationship_bonus_uses_neighbors_and_peers() -> None:
    clusters = {"x": ("a", "b")}
    graph = RelationshipGraph.from_skill_sets([{"a", "c"}, {"a", "c"}, {"b"}], clusters=clusters)
    scorer = JobScorer()
    # c is a co-occurrence neighbour of a.
    assert scorer.relationship_bonus("a", {"a", "c"}, graph) == pytest.approx(0.3 + 0.2 * graph.centrality("a"))
    # b is a cluster peer of a even without co-occurrence.
    assert scorer.relationship_bonus("a", {"a", "b"}, graph) == pytest.approx(0.3 + 0.2 * graph.centrality("a"))
    assert scorer.relationship_bonus("a", {"a"}, graph) == pytest.approx(0.2 * graph.centrality("a"))


def test_job_without_requirements_scores_zero() -> None:
    result = JobScorer().score(["python"], JobPosting(id="empty"), {"python": 1.0}, RelationshipGraph.from_skill_sets([]))
    assert result.score == 0.0
    assert result.match_count == 0
    assert result.matched_skills == []


def test_scores_stay_in_range(corpus: list[JobPosting]) -> None:
    engine = MarketWeightEngine()
    user = ["Python", "docker", "react.js", "SQL"]
    weights = engine.compute_weights(user, corpus)
    graph = RelationshipGraph.from_corpus(corpus)
    for item in JobScorer().rank(user, corpus, weights, graph):
        assert 0.0 <= item.score <= 100.0
        assert set(item.matched_skills).isdisjoint(item.missing_skills)


def test_adding_a_required_skill_never_increases_score(corpus: list[JobPosting]) -> None:
    engine = MarketWeightEngine()
    user = ["python", "docker", "aws"]
    weights = engine.compute_weights(user, corpus)
    graph = RelationshipGraph.from_corpus(corpus)
    scorer = JobScorer()
    base = JobPosting(id="a", required_skills=["python", "docker", "aws"])
    wider = JobPosting(id="b", required_skills=["python", "docker", "aws", "rust"])
    assert scorer.score(user, wider, weights, graph).score <= scorer.score(user, base, weights, graph).score


def test_rank_orders_by_score_then_tie_breakers() -> None:
    def scored(job_id: str, score: float, count: int, avg: float) -> ScoredJob:
        return ScoredJob(
            job=JobPosting(id=job_id),
            score=score,
            breakdown=ScoreBreakdown(),
            match_count=count,
            average_matched_weight=avg,
        )

    items = [scored("low", 10, 5, 0.9), scored("tie-few", 50, 1, 0.9), scored("tie-many", 50, 2, 0.1), scored("tie-heavy", 50, 2, 0.5)]
    ordered = sorted(items, key=ScoredJob.sort_key)
    assert [i.job.id for i in ordered] == ["tie-heavy", "tie-many", "tie-few", "low"]


def test_rank_is_stable_and_limited() -> None:
    jobs = [JobPosting(id=str(i), required_skills=["python"]) for i in range(4)]
    graph = RelationshipGraph.from_skill_sets([{"python"}])
    ranked = JobScorer().rank(["python"], jobs, {"python": 0.5}, graph, limit=3)
    assert [r.job.id for r in ranked] == ["0", "1", "2"]


def test_experience_compatibility_is_reported() -> None:
    job = JobPosting(id="s", title="Senior Backend Engineer", required_skills=["python"])
    graph = RelationshipGraph.from_skill_sets([{"python"}])
    result = JobScorer().score(["python"], job, {"python": 0.5}, graph, user_years=6)
    assert result.experience_compatibility == pytest.approx(1.0)
    junior = JobScorer().score(["python"], job, {"python": 0.5}, graph, user_years=1)
    assert junior.experience_compatibility == pytest.approx(0.5)


def test_score_never_drops_as_a_matched_skill_gains_weight(corpus: list[JobPosting]) -> None:
    scorer = JobScorer()
    graph = RelationshipGraph.from_corpus(corpus)
    job = JobPosting(id="j", required_skills=["python", "docker", "sql", "aws", "git"])
    user = ["python", "docker", "sql", "java"]

    scores = []
    for python_weight in (0.0, 0.1, 0.3, 0.6, 1.0):
        weights = {"python": python_weight, "docker": 0.4, "sql": 0.4, "java": 0.8}
        scores.append(scorer.score(user, job, weights, graph).score)

    assert scores == sorted(scores)
    assert scores[-1] > scores[0]
