from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Literal

from skillpath.schemas.jobs import ExperienceLevel, ExperienceProfile, ScoredJob


logger = logging.getLogger(__name__)

_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of)?\s*(?:experience|exp)", re.IGNORECASE)

# Checked in order against the title only.
_TITLE_LEVELS: tuple[tuple[ExperienceLevel, re.Pattern[str], str], ...] = (
    ("entry", re.compile(r"\b(entry|entry-level|graduate|intern|trainee)\b", re.I), "Entry level in title"),
    ("junior", re.compile(r"\b(junior|jr\.?)(?=\W|$)", re.I), "Junior in title"),
    ("senior", re.compile(r"\b(senior|sr\.?)(?=\W|$)", re.I), "Senior in title"),
    ("lead", re.compile(r"\b(lead|team lead|tech lead|technical lead)\b", re.I), "Lead in title"),
    ("principal", re.compile(r"\b(principal|staff|architect|distinguished)\b", re.I), "Principal/Staff in title"),
)
_ENTRY_CUES = re.compile(r"\b(no experience required|fresh graduate|recent graduate)\b", re.I)
_LEADERSHIP_CUES = re.compile(r"\b(mentor|mentoring|leadership|team management|manage team)\b", re.I)

LEVEL_YEARS: dict[str, int] = {
    "entry": 0,
    "junior": 1,
    "mid": 3,
    "senior": 6,
    "lead": 9,
    "principal": 12,
}


def _level_for_years(years: int) -> ExperienceLevel:
    if years <= 1:
        return "entry"
    if years <= 2:
        return "junior"
    if years <= 5:
        return "mid"
    if years <= 8:
        return "senior"
    return "lead"


def detect_experience(title: str, description: str = "") -> ExperienceProfile:
    """Estimate the seniority a posting asks for.

    Title keywords are the strongest signal, then an explicit "N years of experience",
    then softer description cues. With no signal the posting is treated as mid-level.
    """

    title = title or ""
    text = f"{title} {description or ''}"
    indicators: list[str] = []

    years: int | None = None
    m = _YEARS_RE.search(text)
    if m:
        years = int(m.group(1))
        indicators.append(f"{years}+ years required")

    for level, pattern, label in _TITLE_LEVELS:
        if pattern.search(title):
            indicators.append(label)
            return ExperienceProfile(level=level, years_required=years, confidence=0.9, indicators=indicators)

    if years is not None:
        return ExperienceProfile(
            level=_level_for_years(years), years_required=years, confidence=0.7, indicators=indicators
        )

    if _ENTRY_CUES.search(text):
        indicators.append("Entry level indicators in description")
        return ExperienceProfile(level="entry", confidence=0.6, indicators=indicators)
    if _LEADERSHIP_CUES.search(text):
        indicators.append("Leadership indicators")
        return ExperienceProfile(level="senior", confidence=0.5, indicators=indicators)

    indicators.append("Default to mid-level")
    return ExperienceProfile(level="mid", confidence=0.3, indicators=indicators)


def required_years(profile: ExperienceProfile) -> int:
    if profile.years_required is not None:
        return profile.years_required
    return LEVEL_YEARS[profile.level]


def recommended_level(years: float) -> ExperienceLevel:
    if years <= 0:
        return "entry"
    if years <= 2:
        return "junior"
    if years <= 5:
        return "mid"
    if years <= 8:
        return "senior"
    if years <= 12:
        return "lead"
    return "principal"


def compatibility(user_years: float, job_years: float) -> float:
    user_years = max(float(user_years), 0.0)
    job_years = max(float(job_years), 0.0)
    return 1.0 - abs(user_years - job_years) / max(user_years, job_years, 10.0)


def filter_by_experience(
    scored_jobs: Sequence[ScoredJob],
    user_years: float,
    *,
    min_compatibility: float = 0.5,
    mode: Literal["gate", "reweight"] = "gate",
) -> list[ScoredJob]:
    """Optional stage applied after ranking.

    "gate" drops jobs whose compatibility is below `min_compatibility` and keeps order.
    "reweight" multiplies each score by its compatibility and re-ranks.
    """

    if mode not in ("gate", "reweight"):
        raise ValueError(f"Unknown experience filter mode: {mode!r}")

    out: list[ScoredJob] = []
    for item in scored_jobs:
        e = item.experience_compatibility
        if e is None:
            e = compatibility(user_years, required_years(detect_experience(item.job.title, item.job.description)))
        if mode == "gate":
            if e >= min_compatibility:
                out.append(item.model_copy(update={"experience_compatibility": e}))
        else:
            out.append(item.model_copy(update={"experience_compatibility": e, "score": item.score * e}))

    if mode == "reweight":
        out.sort(key=ScoredJob.sort_key)
    logger.debug("experience.filtered mode=%s kept=%d of=%d", mode, len(out), len(scored_jobs))
    return out
