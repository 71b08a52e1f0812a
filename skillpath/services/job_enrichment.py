from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from functools import lru_cache

from skillpath.data.taxonomy import DEFAULT_EMPLOYER_TIER, EMPLOYER_TIERS
from skillpath.schemas.jobs import JobPosting
from skillpath.services.skill_normalizer import SkillNormalizer


logger = logging.getLogger(__name__)

_INTRA_WORD_DOT_RE = re.compile(r"(?<=\w)\.(?=\w)")

_SALARY_PATTERNS: tuple[re.Pattern[str], ...] = (
    # $120,000 or $120000
    re.compile(r"\$\s?(\d{2,3}),?(\d{3})(?!\d)"),
    # $120k
    re.compile(r"\$\s?(\d{2,3})\s?k\b", re.I),
    # 120,000 per year / annually
    re.compile(r"(?<![\d$])(\d{2,3}),?(\d{3})(?:\s*-\s*\$?\d{2,3},?\d{3})?\s*(?:per year|annually|a year|/year)", re.I),
    # salary: 120,000
    re.compile(r"salary\D{0,20}?(\d{2,3}),?(\d{3})(?!\d)", re.I),
)


@lru_cache(maxsize=8)
def _skill_pattern(terms: tuple[str, ...]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(t) for t in terms)
    return re.compile(rf"(?<![\w+#])({alternation})(?![\w+#])")


def extract_skills_from_text(text: str, normalizer: SkillNormalizer | None = None) -> list[str]:
    """Canonical skills mentioned in free text, in order of first appearance."""

    if not text:
        return []
    normalizer = normalizer or SkillNormalizer()
    prepared = _INTRA_WORD_DOT_RE.sub("", text.lower())
    pattern = _skill_pattern(tuple(normalizer.known_terms()))
    found: list[str] = []
    for m in pattern.finditer(prepared):
        skill = normalizer.normalize(m.group(1))
        if len(skill) > 1 and skill not in found:
            found.append(skill)
    return found


def extract_salary(text: str) -> float | None:
    """First salary figure in the text as an annual amount, or None."""

    if not text:
        return None
    for pattern in _SALARY_PATTERNS:
        m = pattern.search(text)
        if not m:
            continue
        groups = [g for g in m.groups() if g]
        if len(groups) == 1:
            return float(int(groups[0]) * 1000)
        return float(int(groups[0] + groups[1]))
    return None


def classify_employer_tier(company: str, tiers: Mapping[int, Sequence[str]] | None = None) -> int | None:
    if not company or not company.strip():
        return None
    name = company.lower()
    table = EMPLOYER_TIERS if tiers is None else tiers
    for tier in sorted(table, reverse=True):
        for fragment in table[tier]:
            if re.search(rf"\b{re.escape(fragment)}\b", name):
                return tier
    return DEFAULT_EMPLOYER_TIER


def enrich_posting(posting: JobPosting, normalizer: SkillNormalizer | None = None) -> JobPosting:
    """Return a copy with skills, salary and employer tier filled in where the source left them empty."""

    update: dict[str, object] = {}
    if not posting.required_skills:
        skills = extract_skills_from_text(f"{posting.title}\n{posting.description}", normalizer)
        if skills:
            update["required_skills"] = tuple(skills)
    if posting.salary is None:
        salary = extract_salary(f"{posting.title}\n{posting.description}")
        if salary is not None:
            update["salary"] = salary
    if posting.employer_tier is None:
        tier = classify_employer_tier(posting.company)
        if tier is not None:
            update["employer_tier"] = tier
    if not update:
        return posting
    logger.debug("enrichment.filled job=%s fields=%s", posting.id, sorted(update))
    return posting.model_copy(update=update)
