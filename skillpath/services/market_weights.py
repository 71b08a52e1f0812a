from __future__ import annotations

import logging
import math
import time
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from skillpath.schemas.jobs import JobPosting
from skillpath.schemas.weights import SkillFrequency, SkillWeight
from skillpath.services.skill_normalizer import SkillNormalizer
from skillpath.services.weight_cache import WeightCache


logger = logging.getLogger(__name__)

DEFAULT_COEFFICIENTS = (0.40, 0.35, 0.15, 0.10)
MAX_SALARY_PREMIUM = 2.0
MAX_TIER = 5.0


@dataclass(frozen=True)
class MarketAnalysis:
    total_jobs: int
    frequency: dict[str, int] = field(default_factory=dict)
    salaries: dict[str, list[float]] = field(default_factory=dict)
    max_tier: dict[str, int] = field(default_factory=dict)
    top_employers: frozenset[str] = frozenset()
    market_avg_salary: float | None = None
    # Canonical skills per posting, in corpus order.
    posting_skills: tuple[frozenset[str], ...] = ()


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class MarketWeightEngine:
    def __init__(
        self,
        normalizer: SkillNormalizer | None = None,
        cache: WeightCache | None = None,
        *,
        coefficients: tuple[float, float, float, float] = DEFAULT_COEFFICIENTS,
        top_employer_tier: int = 4,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if abs(sum(coefficients) - 1.0) > 1e-6:
            raise ValueError("coefficients must sum to 1.0")
        self.normalizer = normalizer or SkillNormalizer()
        self.cache = cache if cache is not None else WeightCache()
        self.coefficients = coefficients
        self.top_employer_tier = top_employer_tier
        self._clock = clock

    def analyze(self, corpus: Sequence[JobPosting]) -> MarketAnalysis:
        """Single aggregation pass over the corpus shared by every per-skill computation."""

        frequency: dict[str, int] = defaultdict(int)
        salaries: dict[str, list[float]] = defaultdict(list)
        max_tier: dict[str, int] = {}
        top_employers: set[str] = set()
        salary_total = 0.0
        salary_count = 0
        posting_skills: list[frozenset[str]] = []

        for job in corpus:
            skills = frozenset(self.normalizer.parse_and_normalize(job.required_skills))
            posting_skills.append(skills)
            if job.salary is not None and job.salary > 0:
                salary_total += job.salary
                salary_count += 1
            if job.employer_tier is not None and job.employer_tier >= self.top_employer_tier:
                top_employers.add((job.company or job.id).strip().lower())
            for skill in skills:
                frequency[skill] += 1
                if job.salary is not None and job.salary > 0:
                    salaries[skill].append(job.salary)
                if job.employer_tier is not None:
                    max_tier[skill] = max(max_tier.get(skill, 0), job.employer_tier)

        return MarketAnalysis(
            total_jobs=len(corpus),
            frequency=dict(frequency),
            salaries=dict(salaries),
            max_tier=max_tier,
            top_employers=frozenset(top_employers),
            market_avg_salary=salary_total / salary_count if salary_count else None,
            posting_skills=tuple(posting_skills),
        )

    def _empty(self, skill: str, job_count: int) -> SkillWeight:
        return SkillWeight(skill=skill, job_count=job_count, computed_at=self._clock())

    def weight_from_analysis(self, skill: str, analysis: MarketAnalysis) -> SkillWeight:
        total = analysis.total_jobs
        if total == 0:
            return self._empty(skill, 0)
        freq = analysis.frequency.get(skill, 0)

        demand = math.log(freq + 1) / math.log(total + 1)

        salary_premium = 0.0
        skill_salaries = analysis.salaries.get(skill)
        if skill_salaries and analysis.market_avg_salary:
            avg = sum(skill_salaries) / len(skill_salaries)
            salary_premium = min(avg / analysis.market_avg_salary, MAX_SALARY_PREMIUM) / MAX_SALARY_PREMIUM

        tier = analysis.max_tier.get(skill, 0) / MAX_TIER

        top = len(analysis.top_employers)
        penetration = min(freq / top, 1.0) if top else 0.0

        c_d, c_s, c_t, c_p = self.coefficients
        weight = c_d * demand + c_s * salary_premium + c_t * tier + c_p * penetration
        return SkillWeight(
            skill=skill,
            demand=_clamp01(demand),
            salary_premium=_clamp01(salary_premium),
            tier=_clamp01(tier),
            penetration=_clamp01(penetration),
            weight=_clamp01(weight),
            job_count=total,
            computed_at=self._clock(),
        )

    def compute_weight(
        self, skill: str, corpus: Sequence[JobPosting], *, analysis: MarketAnalysis | None = None
    ) -> SkillWeight:
        normalized = self.normalizer.normalize(skill)
        job_count = len(corpus)
        if not normalized or job_count == 0:
            return self._empty(normalized, job_count)

        cached = self.cache.get(normalized, job_count)
        if cached is not None:
            logger.debug("weights.cache_hit skill=%s", normalized)
            return cached

        result = self.weight_from_analysis(normalized, analysis or self.analyze(corpus))
        self.cache.set(normalized, result, job_count)
        return result

    def compute_weights(self, skills: Iterable[str], corpus: Sequence[JobPosting]) -> dict[str, SkillWeight]:
        """Weights keyed by canonical skill. The corpus is analyzed at most once per call."""

        job_count = len(corpus)
        analysis: MarketAnalysis | None = None
        out: dict[str, SkillWeight] = {}
        hits = misses = 0
        for raw in skills:
            skill = self.normalizer.normalize(raw)
            if not skill or skill in out:
                continue
            if job_count == 0:
                out[skill] = self._empty(skill, 0)
                continue
            cached = self.cache.get(skill, job_count)
            if cached is not None:
                hits += 1
                out[skill] = cached
                continue
            misses += 1
            if analysis is None:
                analysis = self.analyze(corpus)
            result = self.weight_from_analysis(skill, analysis)
            self.cache.set(skill, result, job_count)
            out[skill] = result
        logger.info("weights.computed skills=%d jobs=%d hits=%d misses=%d", len(out), job_count, hits, misses)
        return out

    def top_skills(self, corpus: Sequence[JobPosting], limit: int = 20) -> list[SkillFrequency]:
        analysis = self.analyze(corpus)
        if analysis.total_jobs == 0:
            return []
        ranked = sorted(analysis.frequency.items(), key=lambda item: (-item[1], item[0]))[: max(limit, 0)]
        out: list[SkillFrequency] = []
        for skill, freq in ranked:
            pct = freq / analysis.total_jobs * 100.0
            if pct >= 60:
                priority = "critical"
            elif pct >= 30:
                priority = "important"
            else:
                priority = "nice-to-have"
            out.append(SkillFrequency(skill=skill, frequency=freq, percentage=round(pct, 2), priority=priority))
        return out
