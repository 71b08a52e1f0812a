from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from skillpath.schemas.knowledge_graph import LearningPath


class SkillGap(BaseModel):
    skill: str
    demand: int = Field(description="number of ranked jobs that require the skill")
    priority: Literal["high", "medium", "low"]
    interview_importance: Literal["critical", "high", "medium", "low"]
    estimated_learning_hours: int


class BatchResult(BaseModel):
    skill: str
    path: LearningPath | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.path is not None and self.error is None
