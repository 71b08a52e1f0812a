# gap_service.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence

from skillpath.data.taxonomy import DEFAULT_LEARNING_TIME, INTERVIEW_IMPORTANCE, LEARNING_TIME_ESTIMATES
from skillpath.exceptions import SkillPathError
from skillpath.schemas.gaps import BatchResult, SkillGap
from skillpath.schemas.jobs import ScoredJob
from skillpath.services.knowledge_graph import KnowledgeGraphBuilder
from skillpath.services.skill_normalizer import SkillNormalizer


logger = logging.getLogger(__name__)


def estimated_learning_hours(skill: str) -> int:
    return LEARNING_TIME_ESTIMATES.get(skill.strip().lower(), DEFAULT_LEARNING_TIME)


def interview_importance(skill: str) -> str:
    lowered = skill.strip().lower()
    for tier, fragments in INTERVIEW_IMPORTANCE:
        if any(f in lowered for f in fragments):
            return tier
    return "low"


def _priority_for(rank: int) -> str:
    if rank < 2:
        return "high"
    if rank < 5:
        return "medium"
    return "low"


def compute_skill_gaps(
    user_skills: Iterable[str],
    scored_jobs: Sequence[ScoredJob],
    top_n: int = 5,
    normalizer: SkillNormalizer | None = None,
) -> list[SkillGap]:
    """Missing skills ranked by how many of the ranked jobs require them.

    Ties keep the order in which the skill first appears across the ranked jobs.
    """

    normalizer = normalizer or SkillNormalizer()
    have = normalizer.parse_and_normalize(list(user_skills))
    counts: dict[str, int] = {}
    for item in scored_jobs:
        for skill in item.missing_skills:
            if skill in have:
                continue
            counts[skill] = counts.get(skill, 0) + 1

    first_seen = {skill: i for i, skill in enumerate(counts)}
    ranked = sorted(counts, key=lambda s: (-counts[s], first_seen[s]))[: max(top_n, 0)]
    return [
        SkillGap(
            skill=skill,
            demand=counts[skill],
            priority=_priority_for(rank),
            interview_importance=interview_importance(skill),
            estimated_learning_hours=estimated_learning_hours(skill),
        )
        for rank, skill in enumerate(ranked)
    ]


async def build_learning_paths(
    skills: Iterable[str | SkillGap],
    builder: KnowledgeGraphBuilder,
    *,
    current_skills: Iterable[str] = (),
    concurrency: int = 4,
) -> list[BatchResult]:
    """Build a learning path per skill concurrently, at most `concurrency` at a time.

    Failures are isolated: each skill yields its own BatchResult, in input order.
    """

    names = [s.skill if isinstance(s, SkillGap) else s for s in skills]
    current = list(current_skills)
    semaphore = asyncio.Semaphore(max(concurrency, 1))

    async def _one(skill: str) -> BatchResult:
        async with semaphore:
            try:
                path = await builder.build(skill, current)
            except SkillPathError as exc:
                logger.error("gaps.path_failed skill=%s error=%s", skill, exc)
                return BatchResult(skill=skill, error=str(exc))
            except Exception as exc:
                logger.exception("gaps.path_crashed skill=%s", skill)
                return BatchResult(skill=skill, error=f"{type(exc).__name__}: {exc}")
            return BatchResult(skill=skill, path=path)

    results = await asyncio.gather(*(_one(name) for name in names))
    failed = sum(1 for r in results if not r.ok)
    logger.info("gaps.paths_built total=%d failed=%d", len(results), failed)
    return list(results)
