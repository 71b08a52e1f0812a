from __future__ import annotations

import asyncio
import heapq
import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from skillpath.exceptions import GeneratorError, PrerequisiteCycleError
from skillpath.schemas.knowledge_graph import (
    Difficulty,
    IntegrityReport,
    KnowledgeEdge,
    KnowledgeGraphData,
    KnowledgeNode,
    LearningPath,
)
from skillpath.services.providers import ContentGenerator, ReferenceGraphProvider, fallback_graph, slugify
from skillpath.services.skill_normalizer import SkillNormalizer


logger = logging.getLogger(__name__)

REPAIR_EDGE_STRENGTH = 0.5
CORE_MIN_DEPENDENTS = 3

_DIFFICULTY_RANK: dict[str, int] = {"beginner": 1, "intermediate": 2, "advanced": 3}


def _reference_rank(data: KnowledgeGraphData) -> dict[str, int]:
    """Position of each node in the declared skill path, then declaration order for the rest."""

    ids = {n.id for n in data.nodes}
    rank: dict[str, int] = {}
    for node_id in data.skill_path:
        if node_id in ids and node_id not in rank:
            rank[node_id] = len(rank)
    for node in data.nodes:
        if node.id not in rank:
            rank[node.id] = len(rank)
    return rank


def _components(node_ids: Iterable[str], edges: Iterable[tuple[str, str]]) -> list[set[str]]:
    adjacency: dict[str, set[str]] = {n: set() for n in node_ids}
    for a, b in edges:
        if a in adjacency and b in adjacency:
            adjacency[a].add(b)
            adjacency[b].add(a)
    seen: set[str] = set()
    out: list[set[str]] = []
    for start in adjacency:
        if start in seen:
            continue
        component = {start}
        stack = [start]
        while stack:
            for nxt in adjacency[stack.pop()]:
                if nxt not in component:
                    component.add(nxt)
                    stack.append(nxt)
        seen |= component
        out.append(component)
    return out


def _main_component(components: list[set[str]], rank: Mapping[str, int]) -> set[str]:
    return min(components, key=lambda c: (-len(c), min(rank[n] for n in c)))


def _reaches(start: str, goal: str, successors: Mapping[str, set[str]]) -> bool:
    stack, seen = [start], {start}
    while stack:
        current = stack.pop()
        if current == goal:
            return True
        for nxt in successors.get(current, ()):
            if nxt not in seen:
                seen.add(nxt)
                stack.append(nxt)
    return False


def overall_difficulty(nodes: list[KnowledgeNode]) -> Difficulty:
    if not nodes:
        return "beginner"
    total_hours = sum(n.estimated_hours for n in nodes)
    if total_hours > 0:
        avg = sum(_DIFFICULTY_RANK[n.difficulty] * n.estimated_hours for n in nodes) / total_hours
    else:
        avg = sum(_DIFFICULTY_RANK[n.difficulty] for n in nodes) / len(nodes)
    if avg <= 1.5:
        return "beginner"
    if avg <= 2.5:
        return "intermediate"
    return "advanced"


class KnowledgeGraphBuilder:
    """Turns a target skill into an ordered LearningPath.

    Stages: lookup (reference provider, then generator, then deterministic fallback),
    validate, repair, order (Kahn over prerequisite edges), categorize.
    """

    def __init__(
        self,
        normalizer: SkillNormalizer | None = None,
        reference: ReferenceGraphProvider | None = None,
        generator: ContentGenerator | None = None,
        *,
        generator_timeout: float = 30.0,
    ) -> None:
        self.normalizer = normalizer or SkillNormalizer()
        self.reference = reference
        self.generator = generator
        self.generator_timeout = generator_timeout

    async def build(self, target_skill: str, current_skills: Iterable[str] = ()) -> LearningPath:
        skill = self.normalizer.normalize(target_skill)
        if not skill:
            report = IntegrityReport(warnings=[f"no learnable skill in {target_skill!r}"])
            logger.info("graph.empty_target raw=%r", target_skill)
            return LearningPath(target_skill=(target_skill or "").strip(), source="empty", integrity=report)

        data, source = await self.lookup(skill, current_skills)
        return self.assemble(skill, data, source=source)

    async def lookup(self, skill: str, current_skills: Iterable[str] = ()) -> tuple[KnowledgeGraphData, str]:
        if self.reference is not None:
            data = self.reference.lookup(skill)
            if data is not None and data.nodes:
                return data, "reference"

        if self.generator is not None:
            current = self.normalizer.parse_and_normalize(list(current_skills))
            try:
                raw = await asyncio.wait_for(self.generator.generate(skill, current), timeout=self.generator_timeout)
                return self._coerce(skill, raw), "generator"
            except asyncio.TimeoutError:
                logger.warning("graph.generator_timeout skill=%s timeout=%.1fs", skill, self.generator_timeout)
            except GeneratorError as exc:
                logger.warning("graph.generator_malformed skill=%s error=%s", skill, exc)
            except Exception as exc:
                logger.warning("graph.generator_failed skill=%s error=%s", skill, exc)

        logger.warning("graph.fallback skill=%s", skill)
        return fallback_graph(skill), "fallback"

    def _coerce(self, skill: str, raw: Any) -> KnowledgeGraphData:
        if isinstance(raw, KnowledgeGraphData):
            data = raw
        elif isinstance(raw, Mapping):
            payload = dict(raw)
            nodes = payload.get("nodes")
            if isinstance(nodes, list):
                # Generated nodes sometimes omit ids.
                payload["nodes"] = [
                    {**n, "id": n.get("id") or f"{slugify(skill)}-node-{i}"} if isinstance(n, Mapping) else n
                    for i, n in enumerate(nodes)
                ]
            try:
                data = KnowledgeGraphData.model_validate(payload)
            except ValidationError as exc:
                raise GeneratorError(f"malformed generator payload: {exc.error_count()} errors") from exc
        else:
            raise GeneratorError(f"unexpected generator output type {type(raw).__name__}")
        if not data.nodes:
            raise GeneratorError("generator returned no nodes")
        return data

    def assemble(self, skill: str, data: KnowledgeGraphData, *, source: str = "reference") -> LearningPath:
        """Validate, repair, order and categorize an already-fetched graph.

        Raises PrerequisiteCycleError when prerequisite edges form a cycle.
        """

        report = self.validate(skill, data)
        repaired = self.repair(data, report)
        order = self.order(skill, repaired)
        is_fallback = source == "fallback"
        # Fallback nodes already carry their foundation/core/advanced categories.
        nodes = list(repaired.nodes) if is_fallback else self.categorize(repaired)
        if is_fallback:
            report.warnings.append(f"fallback learning path used for {skill}")

        return LearningPath(
            target_skill=skill,
            total_hours=float(sum(n.estimated_hours for n in nodes)),
            difficulty=overall_difficulty(nodes),
            nodes=nodes,
            edges=list(repaired.edges),
            skill_path=order,
            source=source,
            is_fallback=is_fallback,
            integrity=report,
        )

    def validate(self, skill: str, data: KnowledgeGraphData) -> IntegrityReport:
        ids: set[str] = set()
        warnings: list[str] = []
        for node in data.nodes:
            if node.id in ids:
                warnings.append(f"duplicate node id {node.id}; later definition ignored")
            ids.add(node.id)

        dangling: list[str] = []
        for edge in data.edges:
            for end in (edge.from_id, edge.to_id):
                if end not in ids:
                    dangling.append(f"edge {edge.from_id}->{edge.to_id}: unknown node {end}")
        for node in data.nodes:
            for target in node.connections:
                if target not in ids:
                    dangling.append(f"node {node.id} connection: unknown node {target}")
        for node_id in data.skill_path:
            if node_id not in ids:
                dangling.append(f"skill_path: unknown node {node_id}")

        links = [(e.from_id, e.to_id) for e in data.edges]
        links += [(n.id, c) for n in data.nodes for c in n.connections]
        isolated: list[str] = []
        if ids:
            rank = _reference_rank(data)
            components = _components(rank, links)
            main = _main_component(components, rank)
            isolated = sorted((n for c in components if c is not main for n in c), key=rank.__getitem__)

        warnings += [f"dangling reference: {d}" for d in dangling]
        warnings += [f"node {n} is disconnected from the main graph" for n in isolated]
        for message in warnings:
            logger.info("graph.validation_warning skill=%s %s", skill, message)

        return IntegrityReport(
            node_count=len(ids),
            edge_count=len(data.edges),
            dangling_references=dangling,
            isolated_nodes=isolated,
            warnings=warnings,
        )

    def repair(self, data: KnowledgeGraphData, report: IntegrityReport | None = None) -> KnowledgeGraphData:
        """Return a repaired copy: dangling references pruned, connection edges synthesized,
        disconnected components attached to the main one.

        Every edge added here is recorded in `report.repairs` when a report is given.
        """

        nodes: list[KnowledgeNode] = []
        ids: set[str] = set()
        for node in data.nodes:
            if node.id not in ids:
                ids.add(node.id)
                nodes.append(node)
        nodes = [
            n.model_copy(update={"connections": [c for c in n.connections if c in ids and c != n.id]})
            for n in nodes
        ]
        skill_path = [i for i in data.skill_path if i in ids]
        edges = [e for e in data.edges if e.from_id in ids and e.to_id in ids and e.from_id != e.to_id]
        repairs: list[str] = []

        linked = {frozenset((e.from_id, e.to_id)) for e in edges}
        successors: dict[str, set[str]] = defaultdict(set)
        for e in edges:
            if e.type == "prerequisite":
                successors[e.from_id].add(e.to_id)

        for node in nodes:
            for target in node.connections:
                pair = frozenset((node.id, target))
                if pair in linked:
                    continue
                # A connection that would close a prerequisite cycle is kept as a related edge.
                kind = "related" if _reaches(target, node.id, successors) else "prerequisite"
                edges.append(KnowledgeEdge(from_id=node.id, to_id=target, type=kind, strength=REPAIR_EDGE_STRENGTH))
                linked.add(pair)
                if kind == "prerequisite":
                    successors[node.id].add(target)
                repairs.append(f"{kind} {node.id}->{target} (connection)")

        graph = KnowledgeGraphData(nodes=nodes, edges=edges, skill_path=skill_path)
        if nodes:
            rank = _reference_rank(graph)
            components = _components(rank, [(e.from_id, e.to_id) for e in edges])
            main = set(_main_component(components, rank))
            others = sorted((c for c in components if not (c <= main)), key=lambda c: min(rank[n] for n in c))
            for component in others:
                first = min(component, key=rank.__getitem__)
                before = [n for n in main if rank[n] < rank[first]]
                if before:
                    anchor = max(before, key=rank.__getitem__)
                    edge = KnowledgeEdge(from_id=anchor, to_id=first, type="prerequisite", strength=REPAIR_EDGE_STRENGTH)
                else:
                    anchor = min(main, key=rank.__getitem__)
                    edge = KnowledgeEdge(from_id=first, to_id=anchor, type="prerequisite", strength=REPAIR_EDGE_STRENGTH)
                edges.append(edge)
                main |= component
                repairs.append(f"prerequisite {edge.from_id}->{edge.to_id} (attach)")

        if report is not None:
            report.repairs.extend(repairs)
            # Counts describe the repaired graph.
            report.node_count = len(nodes)
            report.edge_count = len(edges)
        return KnowledgeGraphData(nodes=nodes, edges=edges, skill_path=skill_path)

    def order(self, skill: str, data: KnowledgeGraphData) -> list[str]:
        """Kahn's algorithm over prerequisite edges; ready nodes are released in reference order."""

        rank = _reference_rank(data)
        indegree = {n: 0 for n in rank}
        successors: dict[str, set[str]] = defaultdict(set)
        for e in data.edges:
            if e.type != "prerequisite" or e.from_id not in indegree or e.to_id not in indegree:
                continue
            if e.to_id not in successors[e.from_id]:
                successors[e.from_id].add(e.to_id)
                indegree[e.to_id] += 1

        ready = [(rank[n], n) for n, deg in indegree.items() if deg == 0]
        heapq.heapify(ready)
        out: list[str] = []
        while ready:
            _, current = heapq.heappop(ready)
            out.append(current)
            for nxt in successors[current]:
                indegree[nxt] -= 1
                if indegree[nxt] == 0:
                    heapq.heappush(ready, (rank[nxt], nxt))

        if len(out) < len(indegree):
            released = set(out)
            remaining = [n for n in rank if n not in released]
            logger.error("graph.prerequisite_cycle skill=%s nodes=%s", skill, remaining)
            raise PrerequisiteCycleError(skill, remaining)
        return out

    def categorize(self, data: KnowledgeGraphData) -> list[KnowledgeNode]:
        """Category by prerequisite fan-in; declared categories are overwritten."""

        incoming: dict[str, int] = defaultdict(int)
        dependents: dict[str, int] = defaultdict(int)
        for a, b in {(e.from_id, e.to_id) for e in data.edges if e.type == "prerequisite"}:
            dependents[a] += 1
            incoming[b] += 1

        out: list[KnowledgeNode] = []
        for node in data.nodes:
            if incoming[node.id] == 0:
                category = "foundation"
            elif dependents[node.id] >= CORE_MIN_DEPENDENTS:
                category = "core"
            elif node.difficulty == "advanced":
                category = "advanced"
            else:
                category = "specialization"
            out.append(node if node.category == category else node.model_copy(update={"category": category}))
        return out
