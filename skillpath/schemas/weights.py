from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SkillWeight(BaseModel):
    skill: str
    demand: float = Field(default=0.0, ge=0, le=1)
    salary_premium: float = Field(default=0.0, ge=0, le=1)
    tier: float = Field(default=0.0, ge=0, le=1)
    penetration: float = Field(default=0.0, ge=0, le=1)
    weight: float = Field(default=0.0, ge=0, le=1)
    job_count: int = Field(default=0, ge=0)
    computed_at: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.job_count == 0 or not self.skill


class RelationshipEdge(BaseModel):
    # Stored with skills in sorted order; the pair is unordered.
    skills: tuple[str, str]
    strength: float = Field(ge=0, le=1)
    co_occurrences: int = 0


class SkillFrequency(BaseModel):
    skill: str
    frequency: int
    percentage: float
    priority: Literal["critical", "important", "nice-to-have"]
