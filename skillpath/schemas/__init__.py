from skillpath.schemas.gaps import BatchResult, SkillGap
from skillpath.schemas.jobs import ExperienceProfile, JobPosting, ScoreBreakdown, ScoredJob
from skillpath.schemas.knowledge_graph import (
    IntegrityReport,
    KnowledgeEdge,
    KnowledgeGraphData,
    KnowledgeNode,
    LearningPath,
    LearningResource,
    MiniTopic,
    ProjectMilestone,
)
from skillpath.schemas.timeline import Checkpoint, Milestone, MiniProject, Timeline, WeeklyGoal
from skillpath.schemas.weights import RelationshipEdge, SkillFrequency, SkillWeight

__all__ = [
    "BatchResult",
    "Checkpoint",
    "ExperienceProfile",
    "IntegrityReport",
    "JobPosting",
    "KnowledgeEdge",
    "KnowledgeGraphData",
    "KnowledgeNode",
    "LearningPath",
    "LearningResource",
    "Milestone",
    "MiniProject",
    "MiniTopic",
    "ProjectMilestone",
    "RelationshipEdge",
    "ScoreBreakdown",
    "ScoredJob",
    "SkillFrequency",
    "SkillGap",
    "SkillWeight",
    "Timeline",
    "WeeklyGoal",
]
