from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from rapidfuzz import fuzz, process

from skillpath.data.vocabulary import EXTRA_KNOWN_SKILLS
from skillpath.services.skill_normalizer import SkillNormalizer


logger = logging.getLogger(__name__)

UNKNOWN_SKILL_CONFIDENCE = 0.5


@dataclass(frozen=True)
class FuzzyMatch:
    original: str
    skill: str
    confidence: float


class FuzzyMatcher:
    def __init__(
        self,
        normalizer: SkillNormalizer | None = None,
        *,
        threshold: float = 0.3,
        extra_skills: Iterable[str] = EXTRA_KNOWN_SKILLS,
    ) -> None:
        self.normalizer = normalizer or SkillNormalizer()
        self.threshold = threshold
        known = self.normalizer.vocabulary()
        known.update(s for s in (self.normalizer.normalize(x) for x in extra_skills) if s)
        self._choices: list[str] = sorted(known)
        self._known = frozenset(self._choices)

    @property
    def known_skills(self) -> frozenset[str]:
        return self._known

    def find_best_match(self, raw: str) -> FuzzyMatch | None:
        """Resolve `raw` to a known skill.

        Exact normalization wins with confidence 1.0. Otherwise the closest vocabulary
        entry is accepted when its distance score (1 - similarity) is below the threshold.
        """

        if not raw or len(raw.strip()) < 2:
            return None

        normalized = self.normalizer.normalize(raw)
        if not normalized:
            return None
        if normalized in self._known:
            return FuzzyMatch(original=raw, skill=normalized, confidence=1.0)

        hit = process.extractOne(
            normalized,
            self._choices,
            scorer=fuzz.ratio,
            processor=str.lower,
            score_cutoff=(1.0 - self.threshold) * 100.0,
        )
        if hit is None:
            return None

        choice, similarity, _ = hit
        score = 1.0 - similarity / 100.0
        if score >= self.threshold:
            return None
        logger.debug("fuzzy.match raw=%s skill=%s score=%.3f", raw, choice, score)
        return FuzzyMatch(original=raw, skill=choice, confidence=1.0 - score)

    def match_skills(self, skills: Iterable[str]) -> list[FuzzyMatch]:
        results: list[FuzzyMatch] = []
        for skill in skills:
            match = self.find_best_match(skill)
            if match is not None:
                results.append(match)
                continue
            # Unknown skills keep their normalized form; excluded tools disappear.
            normalized = self.normalizer.normalize(skill)
            if normalized:
                results.append(FuzzyMatch(original=skill, skill=normalized, confidence=UNKNOWN_SKILL_CONFIDENCE))
        return results

    def calculate_similarity(self, first: Iterable[str], second: Iterable[str]) -> float:
        """Jaccard similarity of the two normalized skill sets (0.0 when either is empty)."""

        a = {s for s in (self.normalizer.normalize(x) for x in first) if s}
        b = {s for s in (self.normalizer.normalize(x) for x in second) if s}
        if not a or not b:
            return 0.0
        return len(a & b) / len(a | b)
