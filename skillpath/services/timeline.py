from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import date, timedelta

from skillpath.schemas.knowledge_graph import Difficulty, KnowledgeNode, LearningPath
from skillpath.schemas.timeline import Checkpoint, Milestone, MiniProject, Timeline, WeeklyGoal


logger = logging.getLogger(__name__)

DURATION_WEEKS: dict[str, int] = {
    "3-month": 12,
    "6-month": 24,
    "12-month": 48,
}

CHECKPOINT_FRACTIONS = (0.25, 0.5, 0.75, 1.0)

_CHECKPOINTS = (
    ("Foundation Checkpoint", "Verify understanding of fundamental concepts"),
    ("Intermediate Checkpoint", "Build a small project using core skills"),
    ("Advanced Checkpoint", "Implement advanced features and optimizations"),
    ("Final Assessment", "Complete a comprehensive capstone project"),
)
ASSESSMENT_CRITERIA = (
    "Code quality and best practices",
    "Functionality and features",
    "Documentation and testing",
    "Performance and optimization",
)
_WEEK_LABELS = (
    "25% Complete - Foundation Established",
    "50% Complete - Halfway There",
    "75% Complete - Advanced Topics Mastered",
    "100% Complete - Skill Mastered",
)
_MILESTONES = (
    ("Beginner Level Achieved", "Completed foundational {skill} concepts"),
    ("Intermediate Level Achieved", "Built first {skill} project"),
    ("Advanced Level Achieved", "Mastered advanced {skill} techniques"),
    ("Expert Level Achieved", "Ready for professional {skill} roles"),
)
_TEMPLATE_HOURS: dict[str, float] = {"beginner": 3, "intermediate": 5, "advanced": 8}


def weeks_for_duration(duration: str) -> int:
    try:
        return DURATION_WEEKS[duration]
    except KeyError:
        raise ValueError(f"Unknown duration {duration!r}; expected one of {sorted(DURATION_WEEKS)}") from None


def checkpoint_weeks(total_weeks: int) -> list[int]:
    return [math.floor(total_weeks * f) for f in CHECKPOINT_FRACTIONS[:-1]] + [total_weeks]


def _difficulty_for(week: int, total_weeks: int) -> Difficulty:
    progress = week / total_weeks
    if progress > 0.66:
        return "advanced"
    if progress > 0.33:
        return "intermediate"
    return "beginner"


def _mini_project(skill: str, week: int, total_weeks: int, nodes: Sequence[KnowledgeNode]) -> MiniProject:
    topics = [n.title or "Topic" for n in nodes]
    for node in nodes:
        pm = node.project_milestone
        if pm is not None:
            return MiniProject(
                title=pm.title,
                description=pm.description,
                objectives=list(pm.deliverables)
                or [f"Apply {topics[0]} in practice", "Build a working implementation", "Test and debug your solution"],
                estimated_hours=pm.estimated_hours or 5,
                difficulty=pm.difficulty,
            )

    difficulty = _difficulty_for(week, total_weeks)
    main = topics[0] if topics else skill
    if difficulty == "beginner":
        title = f"Build a Simple {main} Application"
        description = f"Create a basic project to practice {main} fundamentals. Focus on core concepts and syntax."
        objectives = [f"Implement basic {main} features", "Write clean, readable code", "Test your implementation", "Document your learning"]
    elif difficulty == "intermediate":
        title = f"{main} Feature Implementation"
        description = f"Build a more complex feature using {main}. Integrate multiple concepts and best practices."
        objectives = [f"Combine {' and '.join(topics[:2]) or main}", "Follow design patterns", "Handle edge cases", "Optimize performance"]
    else:
        title = f"Advanced {main} Project"
        description = f"Create a production-ready implementation showcasing advanced {main} techniques."
        objectives = [f"Master advanced {main} concepts", "Implement scalable architecture", "Add comprehensive testing", "Deploy and document"]
    return MiniProject(
        title=title,
        description=description,
        objectives=objectives,
        estimated_hours=_TEMPLATE_HOURS[difficulty],
        difficulty=difficulty,
    )


def distribute(
    ordered_nodes: Sequence[KnowledgeNode],
    total_weeks: int,
    hours_per_week: int,
    *,
    skill: str = "",
    total_hours: float | None = None,
    start_date: date | None = None,
) -> Timeline:
    """Spread ordered learning nodes over `total_weeks` weeks.

    Each week takes the next ceil(n / weeks) nodes, so trailing weeks may be empty.
    `hours_per_week` is lowered to ceil(total_hours / total_weeks) when that is smaller.
    """

    if total_weeks <= 0:
        raise ValueError("total_weeks must be positive")
    if hours_per_week <= 0:
        raise ValueError("hours_per_week must be positive")

    nodes = list(ordered_nodes)
    if total_hours is None:
        total_hours = float(sum(n.estimated_hours for n in nodes))
    pace = hours_per_week
    if total_hours > 0:
        pace = min(hours_per_week, math.ceil(total_hours / total_weeks))

    per_week = math.ceil(len(nodes) / total_weeks) if nodes else 0
    marks = checkpoint_weeks(total_weeks)

    goals: list[WeeklyGoal] = []
    for week in range(1, total_weeks + 1):
        chunk = nodes[(week - 1) * per_week : week * per_week] if per_week else []
        label = next((text for mark, text in zip(marks, _WEEK_LABELS) if mark == week), None)
        week_start = start_date + timedelta(days=(week - 1) * 7) if start_date else None
        goals.append(
            WeeklyGoal(
                week=week,
                topics=[n.title or "Topic" for n in chunk],
                node_ids=[n.id for n in chunk],
                hours_per_week=pace,
                mini_project=_mini_project(skill, week, total_weeks, chunk),
                milestone=label,
                start_date=week_start,
                end_date=week_start + timedelta(days=6) if week_start else None,
            )
        )

    checkpoints: list[Checkpoint] = []
    for index, (week, (title, description)) in enumerate(zip(marks, _CHECKPOINTS)):
        deliverable = f"{skill} Project {index + 1}".strip()
        if nodes:
            node_index = math.floor(len(nodes) / 4 * (index + 1)) - 1
            node = nodes[node_index] if 0 <= node_index < len(nodes) else nodes[-1]
            if node.project_milestone is not None:
                deliverable = node.project_milestone.title
        checkpoints.append(
            Checkpoint(
                week=week,
                title=title,
                description=description,
                deliverable=deliverable,
                assessment_criteria=list(ASSESSMENT_CRITERIA),
            )
        )

    milestones = [
        Milestone(week=week, title=title, achievement=text.format(skill=skill or "the skill"))
        for week, (title, text) in zip(marks, _MILESTONES)
    ]

    logger.debug("timeline.distributed skill=%s weeks=%d nodes=%d per_week=%d", skill, total_weeks, len(nodes), per_week)
    return Timeline(
        skill=skill,
        total_weeks=total_weeks,
        total_hours=total_hours,
        hours_per_week=pace,
        start_date=start_date,
        end_date=start_date + timedelta(weeks=total_weeks) if start_date else None,
        weekly_goals=goals,
        checkpoints=checkpoints,
        milestones=milestones,
    )


def distribute_path(
    path: LearningPath,
    duration: str = "3-month",
    hours_per_week: int = 10,
    start_date: date | None = None,
) -> Timeline:
    return distribute(
        path.ordered_nodes(),
        weeks_for_duration(duration),
        hours_per_week,
        skill=path.target_skill,
        total_hours=path.total_hours,
        start_date=start_date,
    )
