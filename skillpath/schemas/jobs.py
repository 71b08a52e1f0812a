from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class JobPosting(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    # Raw skill mentions as supplied by the corpus source; canonicalized lazily.
    required_skills: tuple[str, ...] = Field(default_factory=tuple)
    salary: float | None = Field(default=None, ge=0)
    employer_tier: int | None = Field(default=None, ge=1, le=5)
    source: str = "unknown"


class ScoreBreakdown(BaseModel):
    market_weight: float = 0.0
    centrality: float = 0.0
    coverage: float = 0.0
    relationship: float = 0.0


class ScoredJob(BaseModel):
    job: JobPosting
    score: float = Field(ge=0, le=100)
    breakdown: ScoreBreakdown
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    match_count: int = 0
    average_matched_weight: float = 0.0
    experience_compatibility: float | None = None

    def sort_key(self) -> tuple[float, int, float]:
        # Ascending sort on this key ranks best first.
        return (-self.score, -self.match_count, -self.average_matched_weight)


ExperienceLevel = Literal["entry", "junior", "mid", "senior", "lead", "principal"]


class ExperienceProfile(BaseModel):
    level: ExperienceLevel = "mid"
    years_required: int | None = None
    confidence: float = Field(default=0.3, ge=0, le=1)
    indicators: list[str] = Field(default_factory=list)
