from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


NodeCategory = Literal["foundation", "core", "advanced", "project", "specialization"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
EdgeType = Literal["prerequisite", "related"]


class _Payload(BaseModel):
    # Generator payloads arrive camelCased; accept both spellings.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LearningResource(_Payload):
    title: str
    url: str
    type: Literal["tutorial", "documentation", "course", "practice", "article", "video", "project"] = "tutorial"
    platform: str = ""
    is_free: bool = Field(default=True, validation_alias=AliasChoices("is_free", "isFree"))


class MiniTopic(_Payload):
    title: str
    description: str = ""
    resources: list[LearningResource] = Field(default_factory=list)
    estimated_hours: float = Field(default=0, ge=0, validation_alias=AliasChoices("estimated_hours", "estimatedTime"))


class ProjectMilestone(_Payload):
    title: str
    description: str = ""
    difficulty: Difficulty = "beginner"
    deliverables: list[str] = Field(default_factory=list)
    estimated_hours: float = Field(default=0, ge=0, validation_alias=AliasChoices("estimated_hours", "estimatedTime"))


class KnowledgeNode(_Payload):
    id: str = Field(min_length=1)
    title: str
    description: str = ""
    category: NodeCategory = "core"
    difficulty: Difficulty = "beginner"
    estimated_hours: float = Field(default=0, ge=0, validation_alias=AliasChoices("estimated_hours", "estimatedTime"))
    connections: list[str] = Field(default_factory=list)
    mini_topics: list[MiniTopic] = Field(default_factory=list, validation_alias=AliasChoices("mini_topics", "miniTopics"))
    project_milestone: ProjectMilestone | None = Field(
        default=None, validation_alias=AliasChoices("project_milestone", "projectMilestone")
    )


class KnowledgeEdge(_Payload):
    from_id: str = Field(validation_alias=AliasChoices("from_id", "from"))
    to_id: str = Field(validation_alias=AliasChoices("to_id", "to"))
    type: EdgeType = "prerequisite"
    strength: float = Field(default=1.0, ge=0, le=1)


class KnowledgeGraphData(_Payload):
    nodes: list[KnowledgeNode] = Field(default_factory=list)
    edges: list[KnowledgeEdge] = Field(default_factory=list)
    skill_path: list[str] = Field(default_factory=list, validation_alias=AliasChoices("skill_path", "skillPath"))


class IntegrityReport(BaseModel):
    node_count: int = 0
    edge_count: int = 0
    dangling_references: list[str] = Field(default_factory=list)
    isolated_nodes: list[str] = Field(default_factory=list)
    # Each entry describes one edge added during repair, e.g. "prerequisite a->b (connection)".
    repairs: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.dangling_references and not self.isolated_nodes


class LearningPath(BaseModel):
    target_skill: str
    total_hours: float = 0.0
    difficulty: Difficulty = "beginner"
    nodes: list[KnowledgeNode] = Field(default_factory=list)
    edges: list[KnowledgeEdge] = Field(default_factory=list)
    skill_path: list[str] = Field(default_factory=list)
    source: Literal["reference", "generator", "fallback", "empty"] = "reference"
    is_fallback: bool = False
    integrity: IntegrityReport = Field(default_factory=IntegrityReport)

    def ordered_nodes(self) -> list[KnowledgeNode]:
        by_id = {n.id: n for n in self.nodes}
        return [by_id[i] for i in self.skill_path if i in by_id]
