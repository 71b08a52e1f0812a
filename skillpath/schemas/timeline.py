from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from skillpath.schemas.knowledge_graph import Difficulty


class MiniProject(BaseModel):
    title: str
    description: str
    objectives: list[str] = Field(default_factory=list)
    estimated_hours: float = 0
    difficulty: Difficulty = "beginner"


class WeeklyGoal(BaseModel):
    week: int = Field(ge=1)
    topics: list[str] = Field(default_factory=list)
    node_ids: list[str] = Field(default_factory=list)
    hours_per_week: int
    mini_project: MiniProject
    milestone: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class Checkpoint(BaseModel):
    week: int = Field(ge=0)
    title: str
    description: str
    deliverable: str
    assessment_criteria: list[str] = Field(default_factory=list)


class Milestone(BaseModel):
    week: int = Field(ge=0)
    title: str
    achievement: str


class Timeline(BaseModel):
    skill: str = ""
    total_weeks: int = Field(ge=1)
    total_hours: float = 0
    hours_per_week: int
    start_date: date | None = None
    end_date: date | None = None
    weekly_goals: list[WeeklyGoal] = Field(default_factory=list)
    checkpoints: list[Checkpoint] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)
