from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Protocol
from urllib.parse import quote_plus

from skillpath.schemas.knowledge_graph import (
    KnowledgeEdge,
    KnowledgeGraphData,
    KnowledgeNode,
    LearningResource,
    MiniTopic,
)
from skillpath.services.skill_normalizer import SkillNormalizer


class ReferenceGraphProvider(Protocol):
    def lookup(self, skill: str) -> KnowledgeGraphData | None: ...


class ContentGenerator(Protocol):
    """External learning-content source, usually an LLM client.

    May return a validated graph or the raw JSON payload; anything else is treated as malformed.
    """

    async def generate(self, target_skill: str, current_skills: set[str]) -> KnowledgeGraphData | Mapping[str, Any]: ...


class InMemoryReferenceProvider:
    def __init__(
        self,
        graphs: Mapping[str, KnowledgeGraphData] | None = None,
        normalizer: SkillNormalizer | None = None,
    ) -> None:
        self.normalizer = normalizer or SkillNormalizer()
        self._graphs: dict[str, KnowledgeGraphData] = {}
        for skill, graph in (graphs or {}).items():
            self.register(skill, graph)

    @classmethod
    def from_payloads(
        cls, payloads: Mapping[str, Mapping[str, Any]], normalizer: SkillNormalizer | None = None
    ) -> "InMemoryReferenceProvider":
        # Raises pydantic.ValidationError on malformed reference content.
        return cls({skill: KnowledgeGraphData.model_validate(p) for skill, p in payloads.items()}, normalizer)

    def register(self, skill: str, graph: KnowledgeGraphData) -> None:
        key = self.normalizer.normalize(skill) or skill.strip().lower()
        self._graphs[key] = graph

    def lookup(self, skill: str) -> KnowledgeGraphData | None:
        key = self.normalizer.normalize(skill) or skill.strip().lower()
        return self._graphs.get(key)

    def __len__(self) -> int:
        return len(self._graphs)


def slugify(skill: str) -> str:
    return re.sub(r"\s+", "-", skill.strip().lower())


def fallback_graph(skill: str) -> KnowledgeGraphData:
    """Minimal deterministic foundation -> intermediate -> advanced graph for `skill`."""

    slug = slugify(skill)
    basics, intermediate, advanced = f"{slug}-basics", f"{slug}-intermediate", f"{slug}-advanced"
    nodes = [
        KnowledgeNode(
            id=basics,
            title=f"{skill} Fundamentals",
            description=f"Learn the core concepts and fundamentals of {skill}",
            category="foundation",
            difficulty="beginner",
            estimated_hours=20,
            connections=[intermediate],
            mini_topics=[
                MiniTopic(
                    title=f"Introduction to {skill}",
                    description=f"Getting started with {skill}",
                    resources=[
                        LearningResource(
                            title=f"{skill} Official Documentation",
                            url=f"https://www.google.com/search?q={quote_plus(skill + ' official documentation')}",
                            type="documentation",
                            platform="Google",
                        )
                    ],
                    estimated_hours=10,
                )
            ],
        ),
        KnowledgeNode(
            id=intermediate,
            title=f"{skill} Intermediate",
            description=f"Build practical skills and understanding of {skill}",
            category="core",
            difficulty="intermediate",
            estimated_hours=30,
            connections=[advanced],
            mini_topics=[
                MiniTopic(
                    title=f"{skill} Best Practices",
                    description="Industry standards and patterns",
                    resources=[
                        LearningResource(
                            title=f"{skill} Tutorials",
                            url=f"https://www.youtube.com/results?search_query={quote_plus(skill + ' tutorial')}",
                            type="tutorial",
                            platform="YouTube",
                        )
                    ],
                    estimated_hours=15,
                )
            ],
        ),
        KnowledgeNode(
            id=advanced,
            title=f"{skill} Advanced",
            description="Master advanced concepts and real-world applications",
            category="advanced",
            difficulty="advanced",
            estimated_hours=40,
            mini_topics=[
                MiniTopic(
                    title=f"{skill} Projects",
                    description="Build production-ready applications",
                    resources=[
                        LearningResource(
                            title=f"{skill} Project Ideas",
                            url=f"https://www.google.com/search?q={quote_plus(skill + ' project ideas')}",
                            type="project",
                            platform="Google",
                        )
                    ],
                    estimated_hours=20,
                )
            ],
        ),
    ]
    edges = [
        KnowledgeEdge(from_id=basics, to_id=intermediate, type="prerequisite", strength=0.9),
        KnowledgeEdge(from_id=intermediate, to_id=advanced, type="prerequisite", strength=0.8),
    ]
    return KnowledgeGraphData(nodes=nodes, edges=edges, skill_path=[basics, intermediate, advanced])
