"""Unit tests for project metric and member stat recomputation."""

from datetime import datetime, timedelta

import pytest

from taskvantage.core.aggregation import (
    average_completion_hours,
    compute_member_stats,
    compute_project_metrics,
    productivity_score,
    tasks_for_member,
    tasks_for_project,
)
from taskvantage.models import ProjectMetrics, TaskStatus
from tests.fixtures.factories import ProjectFactory, TaskFactory, TeamMemberFactory


class TestAverageCompletionHours:
    """Tests for average_completion_hours."""

    def test_no_qualifying_tasks(self) -> None:
        """Test the average is zero when nothing is completed."""
        assert average_completion_hours([TaskFactory.create(), TaskFactory.create()]) == 0.0

    def test_ignores_completed_without_date(self) -> None:
        """Test completed tasks without a completion date are skipped."""
        tasks = [
            TaskFactory.completed(hours=10),
            TaskFactory.completed(hours=30),
            TaskFactory.create(status=TaskStatus.COMPLETED),
        ]
        assert average_completion_hours(tasks) == pytest.approx(20.0)


class TestComputeProjectMetrics:
    """Tests for compute_project_metrics."""

    def test_scenario_four_tasks_half_done(self, now: datetime) -> None:
        """Test 1 todo, 1 in progress, 2 completed gives 50% completion."""
        project = ProjectFactory.create()
        tasks = [
            TaskFactory.create(project_id=project.id),
            TaskFactory.create(project_id=project.id, status=TaskStatus.IN_PROGRESS),
            TaskFactory.completed(project_id=project.id),
            TaskFactory.completed(project_id=project.id),
        ]

        metrics = compute_project_metrics(project, tasks, now)

        assert metrics.total_tasks == 4
        assert metrics.completed_tasks == 2
        assert metrics.completion_percentage == 50.0

    def test_overdue_and_time_spent(self, now: datetime) -> None:
        """Test overdue counting and actual hour totals."""
        project = ProjectFactory.create()
        tasks = [
            TaskFactory.create(project_id=project.id, due_date=now - timedelta(days=1), actual_hours=3),
            TaskFactory.completed(project_id=project.id, due_date=now - timedelta(days=1), actual_hours=4.5),
            TaskFactory.create(project_id=project.id, due_date=now + timedelta(days=1)),
        ]

        metrics = compute_project_metrics(project, tasks, now)

        assert metrics.overdue_tasks == 1
        assert metrics.time_spent == pytest.approx(7.5)

    def test_productivity_score_uses_team_size(self, now: datetime) -> None:
        """Test team score is completion / team size * 10, unclamped."""
        members = [TeamMemberFactory.create() for _ in range(2)]
        project = ProjectFactory.create(team_member_ids=[m.id for m in members])
        tasks = [TaskFactory.completed(project_id=project.id)]

        metrics = compute_project_metrics(project, tasks, now)

        assert metrics.team_productivity_score == pytest.approx(500.0)

    def test_productivity_zero_without_team(self, now: datetime) -> None:
        """Test an empty team leaves the score at zero."""
        project = ProjectFactory.create()
        metrics = compute_project_metrics(project, [TaskFactory.completed(project_id=project.id)], now)
        assert metrics.team_productivity_score == 0.0

    def test_budget_spent_carried_over(self, now: datetime) -> None:
        """Test budget spent is user data and survives recompute."""
        project = ProjectFactory.create(metrics=ProjectMetrics(budget_spent=1200.0))
        assert compute_project_metrics(project, [], now).budget_spent == 1200.0


class TestMemberStats:
    """Tests for compute_member_stats and productivity_score."""

    def test_productivity_formula(self) -> None:
        """Test rate * 0.8 plus a speed bonus capped at 100."""
        assert productivity_score(50.0, 24.0) == pytest.approx(40.0 + 20.0)
        assert productivity_score(100.0, 1.0) == pytest.approx(80.0 + 100.0)
        assert productivity_score(80.0, 0.0) == pytest.approx(64.0)

    def test_compute_member_stats(self) -> None:
        """Test assigned, completed, averages and distinct projects."""
        member = TeamMemberFactory.create()
        p1 = ProjectFactory.create()
        p2 = ProjectFactory.create()
        tasks = [
            TaskFactory.completed(hours=12, assigned_to_member_id=member.id, project_id=p1.id),
            TaskFactory.create(assigned_to_member_id=member.id, project_id=p1.id),
            TaskFactory.create(assigned_to_member_id=member.id, project_id=p2.id),
            TaskFactory.create(assigned_to_member_id=member.id),
        ]

        stats = compute_member_stats(tasks)

        assert stats.tasks_assigned == 4
        assert stats.tasks_completed == 1
        assert stats.completion_rate == 25.0
        assert stats.average_completion_time == pytest.approx(12.0)
        assert stats.projects_involved == 2
        assert stats.productivity_score == pytest.approx(25.0 * 0.8 + 40.0)

    def test_empty_stats(self) -> None:
        """Test a member with no tasks has zeroed stats."""
        stats = compute_member_stats([])
        assert stats.tasks_assigned == 0
        assert stats.productivity_score == 0.0


class TestTaskSelection:
    """Tests for tasks_for_project and tasks_for_member."""

    def test_selection_keeps_order(self) -> None:
        """Test selection filters by reference and keeps collection order."""
        project = ProjectFactory.create()
        member = TeamMemberFactory.create()
        a = TaskFactory.create(project_id=project.id)
        b = TaskFactory.create(assigned_to_member_id=member.id)
        c = TaskFactory.create(project_id=project.id, assigned_to_member_id=member.id)

        assert [t.id for t in tasks_for_project([a, b, c], project.id)] == [a.id, c.id]
        assert [t.id for t in tasks_for_member([a, b, c], member.id)] == [b.id, c.id]
