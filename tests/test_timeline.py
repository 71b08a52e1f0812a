from __future__ import annotations

import asyncio
from datetime import date

import pytest

from skillpath.schemas.knowledge_graph import KnowledgeNode, ProjectMilestone
from skillpath.services.knowledge_graph import KnowledgeGraphBuilder
from skillpath.services.timeline import checkpoint_weeks, distribute, distribute_path, weeks_for_duration


def _nodes(count: int, hours: float = 5) -> list[KnowledgeNode]:
    return [KnowledgeNode(id=f"n{i}", title=f"Topic {i}", estimated_hours=hours) for i in range(count)]


def test_one_node_per_week_when_nodes_fit() -> None:
    timeline = distribute(_nodes(6), 12, 10, skill="docker")
    assert timeline.total_weeks == 12
    assert len(timeline.weekly_goals) == 12
    assert [g.node_ids for g in timeline.weekly_goals[:6]] == [[f"n{i}"] for i in range(6)]
    assert all(g.node_ids == [] for g in timeline.weekly_goals[6:])
    assert [c.week for c in timeline.checkpoints] == [3, 6, 9, 12]
    assert [m.week for m in timeline.milestones] == [3, 6, 9, 12]


@pytest.mark.parametrize(("count", "weeks", "expected"), [(30, 12, 3), (5, 2, 3), (1, 12, 1)])
def test_every_node_is_scheduled_once_in_order(count: int, weeks: int, expected: int) -> None:
    nodes = _nodes(count)
    timeline = distribute(nodes, weeks, 10)
    scheduled = [i for g in timeline.weekly_goals for i in g.node_ids]
    assert scheduled == [n.id for n in nodes]
    assert len(timeline.weekly_goals[0].node_ids) == expected


def test_pace_is_lowered_to_fit_total_hours() -> None:
    assert distribute(_nodes(12), 12, 10).hours_per_week == 5
    assert distribute(_nodes(12), 12, 4).hours_per_week == 4
    assert distribute(_nodes(3, hours=0), 12, 10).hours_per_week == 10
    assert distribute(_nodes(12), 12, 10, total_hours=60).weekly_goals[0].hours_per_week == 5


def test_week_labels_and_milestones() -> None:
    timeline = distribute(_nodes(12), 12, 10, skill="docker")
    labels = {g.week: g.milestone for g in timeline.weekly_goals if g.milestone}
    assert labels == {
        3: "25% Complete - Foundation Established",
        6: "50% Complete - Halfway There",
        9: "75% Complete - Advanced Topics Mastered",
        12: "100% Complete - Skill Mastered",
    }
    assert timeline.milestones[-1].achievement == "Ready for professional docker roles"
    assert distribute(_nodes(4), 4, 10).milestones[0].achievement == "Completed foundational the skill concepts"


def test_template_projects_escalate_in_difficulty() -> None:
    goals = distribute(_nodes(12), 12, 10).weekly_goals
    assert goals[0].mini_project.difficulty == "beginner"
    assert goals[5].mini_project.difficulty == "intermediate"
    assert goals[11].mini_project.difficulty == "advanced"
    assert goals[11].mini_project.estimated_hours == 8


def test_node_milestone_is_used_verbatim() -> None:
    nodes = _nodes(4)
    nodes[1] = nodes[1].model_copy(
        update={
            "project_milestone": ProjectMilestone(
                title="Todo API", description="Ship a CRUD service", deliverables=["OpenAPI document"], estimated_hours=6
            )
        }
    )
    timeline = distribute(nodes, 4, 10, skill="flask")
    project = timeline.weekly_goals[1].mini_project
    assert project.title == "Todo API"
    assert project.objectives == ["OpenAPI document"]
    assert project.estimated_hours == 6


def test_checkpoint_deliverables_come_from_quarter_nodes() -> None:
    nodes = _nodes(8)
    nodes[1] = nodes[1].model_copy(update={"project_milestone": ProjectMilestone(title="CLI Tool")})
    checkpoints = distribute(nodes, 12, 10, skill="go").checkpoints
    assert checkpoints[0].deliverable == "CLI Tool"
    assert checkpoints[1].deliverable == "go Project 2"
    assert checkpoints[3].title == "Final Assessment"
    assert len(checkpoints[3].assessment_criteria) == 4


def test_dates_follow_start_date() -> None:
    timeline = distribute(_nodes(3), 12, 10, start_date=date(2026, 1, 5))
    week2 = timeline.weekly_goals[1]
    assert week2.start_date == date(2026, 1, 12)
    assert week2.end_date == date(2026, 1, 18)
    assert timeline.end_date == date(2026, 3, 30)
    assert distribute(_nodes(3), 12, 10).weekly_goals[0].start_date is None


def test_invalid_inputs() -> None:
    with pytest.raises(ValueError):
        distribute(_nodes(3), 0, 10)
    with pytest.raises(ValueError):
        distribute(_nodes(3), 12, 0)
    with pytest.raises(ValueError):
        weeks_for_duration("2-month")


def test_durations_and_checkpoint_weeks() -> None:
    assert weeks_for_duration("3-month") == 12
    assert weeks_for_duration("6-month") == 24
    assert weeks_for_duration("12-month") == 48
    assert checkpoint_weeks(12) == [3, 6, 9, 12]
    assert checkpoint_weeks(10) == [2, 5, 7, 10]
    assert checkpoint_weeks(1) == [0, 0, 0, 1]


def test_distribute_path_uses_path_order_and_hours() -> None:
    path = asyncio.run(KnowledgeGraphBuilder().build("kubernetes"))
    timeline = distribute_path(path, "3-month", 10)
    assert timeline.skill == "kubernetes"
    assert timeline.total_hours == 90
    assert timeline.hours_per_week == 8
    assert [i for g in timeline.weekly_goals for i in g.node_ids] == path.skill_path
