from __future__ import annotations

import asyncio

import pytest

from skillpath.config import Settings
from skillpath.engine import build_engine
from skillpath.schemas.jobs import JobPosting
from skillpath.services.recommendation_service import plan_learning, recommend_jobs, resolve_user_skills


def test_build_engine_wires_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKILLPATH_WEIGHT_CACHE_MAX_ENTRIES", "5")
    monkeypatch.setenv("SKILLPATH_FUZZY_THRESHOLD", "0.2")
    monkeypatch.setenv("SKILLPATH_BATCH_CONCURRENCY", "2")
    monkeypatch.setenv("SKILLPATH_GENERATOR_TIMEOUT_SECONDS", "3")
    engine = build_engine(Settings())

    assert engine.cache.max_entries == 5
    assert engine.market.cache is engine.cache
    assert engine.fuzzy.threshold == pytest.approx(0.2)
    assert engine.builder.generator_timeout == 3
    assert engine.batch_concurrency == 2
    assert engine.scorer.normalizer is engine.normalizer


def test_recommend_jobs_ranks_best_match_first(corpus: list[JobPosting]) -> None:
    engine = build_engine(Settings())
    ranked = recommend_jobs(engine, ["Python", "Django", "Docker"], corpus)

    assert len(ranked) == len(corpus)
    assert ranked[0].job.id == "1"
    assert ranked[0].matched_skills == ["django", "docker", "python"]
    assert [r.score for r in ranked] == sorted((r.score for r in ranked), reverse=True)
    assert len(engine.cache) == 3


def test_recommend_jobs_limit_and_empty_input(corpus: list[JobPosting]) -> None:
    engine = build_engine(Settings())
    assert len(recommend_jobs(engine, "python, docker", corpus, limit=2)) == 2
    assert recommend_jobs(engine, [], corpus) == []
    assert recommend_jobs(engine, ["python"], []) == []


def test_recommend_jobs_experience_gate(corpus: list[JobPosting]) -> None:
    engine = build_engine(Settings())
    ranked = recommend_jobs(engine, ["Python", "Django", "Docker"], corpus, user_years=0, experience_mode="gate")
    assert "1" not in [r.job.id for r in ranked]
    assert all(r.experience_compatibility is not None and r.experience_compatibility >= 0.5 for r in ranked)


def test_plan_learning_builds_paths_and_timelines(corpus: list[JobPosting]) -> None:
    engine = build_engine(Settings())
    user = ["Python", "Django", "Docker"]
    ranked = recommend_jobs(engine, user, corpus)

    plan = asyncio.run(plan_learning(engine, user, ranked, top_n=2, hours_per_week=5))

    assert len(plan.gaps) == 2
    assert [p.skill for p in plan.paths] == [g.skill for g in plan.gaps]
    assert all(p.ok for p in plan.paths)
    for gap in plan.gaps:
        timeline = plan.timelines[gap.skill]
        assert timeline.total_weeks == 12
        assert timeline.hours_per_week == 5


def test_recommend_jobs_zero_limit_returns_nothing(corpus: list[JobPosting]) -> None:
    engine = build_engine(Settings())
    assert recommend_jobs(engine, ["python"], corpus, limit=0) == []
    assert len(recommend_jobs(engine, ["python"], corpus, limit=None)) == len(corpus)


def test_recommend_jobs_snaps_misspelled_skills(corpus: list[JobPosting]) -> None:
    engine = build_engine(Settings())
    assert resolve_user_skills(engine, "Pyhton, Dockr, brandnewthing, eslint") == {"python", "docker", "brandnewthing"}

    ranked = recommend_jobs(engine, ["Pyhton", "Djang0", "Docker"], corpus)
    assert ranked[0].job.id == "1"
    assert ranked[0].matched_skills == ["django", "docker", "python"]
