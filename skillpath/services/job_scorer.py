from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from skillpath.data.taxonomy import RELATED_CENTRALITY_SHARE, RELATED_NEIGHBOR_BONUS
from skillpath.schemas.jobs import JobPosting, ScoreBreakdown, ScoredJob
from skillpath.schemas.weights import SkillWeight
from skillpath.services.experience import compatibility, detect_experience, required_years
from skillpath.services.relationship_graph import RelationshipGraph
from skillpath.services.skill_normalizer import SkillNormalizer


logger = logging.getLogger(__name__)

MARKET_WEIGHT_POINTS = 50.0
CENTRALITY_POINTS = 20.0
COVERAGE_POINTS = 15.0
RELATIONSHIP_POINTS = 15.0

WeightLike = SkillWeight | float


def _weight_of(weights: Mapping[str, WeightLike], skill: str) -> float:
    value = weights.get(skill)
    if value is None:
        return 0.0
    if isinstance(value, SkillWeight):
        return value.weight
    return float(value)


class JobScorer:
    def __init__(self, normalizer: SkillNormalizer | None = None) -> None:
        self.normalizer = normalizer or SkillNormalizer()

    def relationship_bonus(self, skill: str, required: set[str], graph: RelationshipGraph) -> float:
        bonus = RELATED_NEIGHBOR_BONUS if required & (graph.related(skill) - {skill}) else 0.0
        return bonus + RELATED_CENTRALITY_SHARE * graph.centrality(skill)

    def score(
        self,
        user_skills: Iterable[str] | set[str],
        job: JobPosting,
        weights: Mapping[str, WeightLike],
        graph: RelationshipGraph,
        user_years: float | None = None,
    ) -> ScoredJob:
        """Score one posting against a candidate's skills on a 0..100 scale.

        R = M + C + V + L where M is the matched share of the candidate's market weight
        (50 points), C the mean centrality of matched skills (20), V the coverage of the
        job's requirements (15) and L the capped relationship bonus (15).
        """

        user = self.normalizer.parse_and_normalize(user_skills)
        required = self.normalizer.parse_and_normalize(job.required_skills)

        e: float | None = None
        if user_years is not None:
            profile = detect_experience(job.title, job.description)
            e = compatibility(user_years, required_years(profile))

        if not required:
            return ScoredJob(job=job, score=0.0, breakdown=ScoreBreakdown(), experience_compatibility=e)

        matched = user & required
        missing = required - user

        user_total = sum(_weight_of(weights, s) for s in user)
        matched_total = sum(_weight_of(weights, s) for s in matched)
        m = matched_total / user_total * MARKET_WEIGHT_POINTS if user_total > 0 else 0.0

        c = 0.0
        if matched:
            c = sum(graph.centrality(s) for s in matched) / len(matched) * CENTRALITY_POINTS

        v = len(matched) / len(required) * COVERAGE_POINTS

        related = sum(self.relationship_bonus(s, required, graph) for s in matched)
        rel = min(related, 1.0) * RELATIONSHIP_POINTS

        total = max(0.0, min(100.0, m + c + v + rel))
        return ScoredJob(
            job=job,
            score=total,
            breakdown=ScoreBreakdown(market_weight=m, centrality=c, coverage=v, relationship=rel),
            matched_skills=sorted(matched),
            missing_skills=sorted(missing),
            match_count=len(matched),
            average_matched_weight=matched_total / len(matched) if matched else 0.0,
            experience_compatibility=e,
        )

    def rank(
        self,
        user_skills: Iterable[str],
        jobs: Sequence[JobPosting],
        weights: Mapping[str, WeightLike],
        graph: RelationshipGraph,
        *,
        user_years: float | None = None,
        limit: int | None = None,
    ) -> list[ScoredJob]:
        """Score and sort: score, then match count, then average matched weight, all descending.

        Remaining ties keep input order.
        """

        user = self.normalizer.parse_and_normalize(user_skills)
        scored = [self.score(user, job, weights, graph, user_years) for job in jobs]
        scored.sort(key=ScoredJob.sort_key)
        if limit is not None:
            scored = scored[: max(limit, 0)]
        logger.info("scoring.ranked jobs=%d user_skills=%d returned=%d", len(jobs), len(user), len(scored))
        return scored
