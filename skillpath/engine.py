from __future__ import annotations

import logging
from dataclasses import dataclass

from skillpath.config import Settings, get_settings
from skillpath.services.fuzzy_matcher import FuzzyMatcher
from skillpath.services.job_scorer import JobScorer
from skillpath.services.knowledge_graph import KnowledgeGraphBuilder
from skillpath.services.market_weights import MarketWeightEngine
from skillpath.services.providers import ContentGenerator, ReferenceGraphProvider
from skillpath.services.skill_normalizer import SkillNormalizer
from skillpath.services.weight_cache import WeightCache


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillPathEngine:
    """Process-level wiring of the matching and learning-path components.

    Holds the only long-lived mutable state (the weight cache). Construct one per process,
    or one per test.
    """

    normalizer: SkillNormalizer
    fuzzy: FuzzyMatcher
    cache: WeightCache
    market: MarketWeightEngine
    scorer: JobScorer
    builder: KnowledgeGraphBuilder
    batch_concurrency: int = 4
    default_hours_per_week: int = 10
    default_duration: str = "3-month"


def build_engine(
    settings: Settings | None = None,
    *,
    reference: ReferenceGraphProvider | None = None,
    generator: ContentGenerator | None = None,
) -> SkillPathEngine:
    settings = settings or get_settings()
    normalizer = SkillNormalizer()
    cache = WeightCache(
        ttl_seconds=settings.weight_cache_ttl_seconds,
        max_entries=settings.weight_cache_max_entries,
        drift_tolerance=settings.weight_cache_drift_tolerance,
    )
    engine = SkillPathEngine(
        normalizer=normalizer,
        fuzzy=FuzzyMatcher(normalizer, threshold=settings.fuzzy_threshold),
        cache=cache,
        market=MarketWeightEngine(
            normalizer,
            cache,
            coefficients=settings.coefficients,
            top_employer_tier=settings.top_employer_tier,
        ),
        scorer=JobScorer(normalizer),
        builder=KnowledgeGraphBuilder(
            normalizer,
            reference=reference,
            generator=generator,
            generator_timeout=settings.generator_timeout_seconds,
        ),
        batch_concurrency=settings.batch_concurrency,
        default_hours_per_week=settings.default_hours_per_week,
        default_duration=settings.default_duration,
    )
    logger.debug(
        "engine.built cache_ttl=%s cache_max=%s generator=%s reference=%s",
        settings.weight_cache_ttl_seconds,
        settings.weight_cache_max_entries,
        generator is not None,
        reference is not None,
    )
    return engine
