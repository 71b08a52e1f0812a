# recommendation_service.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Literal

from skillpath.schemas.gaps import BatchResult, SkillGap
from skillpath.schemas.jobs import JobPosting, ScoredJob
from skillpath.schemas.timeline import Timeline
from skillpath.services.experience import filter_by_experience
from skillpath.services.gap_service import build_learning_paths, compute_skill_gaps
from skillpath.services.relationship_graph import RelationshipGraph
from skillpath.services.timeline import distribute_path

if TYPE_CHECKING:
    from skillpath.engine import SkillPathEngine


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LearningPlan:
    gaps: list[SkillGap]
    paths: list[BatchResult]
    timelines: dict[str, Timeline] = field(default_factory=dict)


def _resolve_limit(limit: int | None, default: int = 30) -> int:
    if limit is None:
        return default
    return max(0, limit)


def resolve_user_skills(engine: SkillPathEngine, user_skills: Iterable[str] | str) -> set[str]:
    """Canonical user skills with near-miss spellings ("Pyhton") snapped to the vocabulary.

    Skills the vocabulary does not know are kept as normalized.
    """

    parsed = engine.normalizer.parse_and_normalize(user_skills)
    resolved = {m.skill for m in engine.fuzzy.match_skills(sorted(parsed))}
    if resolved != parsed:
        logger.debug("recommend.skills_resolved changed=%s", sorted(resolved - parsed))
    return resolved


def recommend_jobs(
    engine: SkillPathEngine,
    user_skills: Iterable[str] | str,
    corpus: Sequence[JobPosting],
    *,
    limit: int | None = 30,
    user_years: float | None = None,
    experience_mode: Literal["gate", "reweight"] | None = None,
) -> list[ScoredJob]:
    user = resolve_user_skills(engine, user_skills)
    if not user or not corpus:
        logger.info("recommend.empty_input user_skills=%d jobs=%d", len(user), len(corpus))
        return []

    weights = engine.market.compute_weights(sorted(user), corpus)
    graph = RelationshipGraph.from_corpus(corpus, engine.normalizer)
    ranked = engine.scorer.rank(user, corpus, weights, graph, user_years=user_years)
    if experience_mode is not None and user_years is not None:
        ranked = filter_by_experience(ranked, user_years, mode=experience_mode)
    return ranked[: _resolve_limit(limit)]


async def plan_learning(
    engine: SkillPathEngine,
    user_skills: Iterable[str],
    scored_jobs: Sequence[ScoredJob],
    *,
    top_n: int = 5,
    duration: str | None = None,
    hours_per_week: int | None = None,
    start_date: date | None = None,
) -> LearningPlan:
    """Gap analysis over ranked jobs, then a learning path and timeline per gap."""

    user = list(user_skills)
    gaps = compute_skill_gaps(user, scored_jobs, top_n=top_n, normalizer=engine.normalizer)
    results = await build_learning_paths(
        gaps, engine.builder, current_skills=user, concurrency=engine.batch_concurrency
    )
    timelines: dict[str, Timeline] = {}
    for result in results:
        if result.path is None or not result.path.nodes:
            continue
        timelines[result.skill] = distribute_path(
            result.path,
            duration or engine.default_duration,
            hours_per_week or engine.default_hours_per_week,
            start_date=start_date,
        )
    return LearningPlan(gaps=gaps, paths=results, timelines=timelines)
