"""Pure recompute functions for project metrics and member stats.

Every function here derives its result from the task list it is given and
nothing else, so calling it twice on unchanged data yields the same result.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from uuid import UUID

from taskvantage.models import Project, ProjectMetrics, Task, TaskStatus, TeamMemberStats

# Productivity bonus for fast completion is capped at this value
SPEED_BONUS_CAP = 100.0


def average_completion_hours(tasks: Iterable[Task]) -> float:
    """Mean hours from creation to completion over completed tasks.

    Only tasks with status Completed and a completion date count.

    Args:
        tasks: Tasks to average over

    Returns:
        Mean duration in hours, or 0.0 when no task qualifies
    """
    durations = [hours for hours in (t.completion_hours() for t in tasks) if hours is not None]
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def compute_project_metrics(
    project: Project,
    tasks: Sequence[Task],
    now: datetime,
) -> ProjectMetrics:
    """Derive a project's metrics from the tasks that reference it.

    Args:
        project: Project whose team size feeds the productivity score
        tasks: Tasks whose project_id is the project's id
        now: Reference time for overdue checks

    Returns:
        Fresh ProjectMetrics (budget_spent carried over, it is user data)
    """
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    overdue = sum(1 for t in tasks if t.is_overdue(now))

    metrics = ProjectMetrics(
        total_tasks=total,
        completed_tasks=completed,
        overdue_tasks=overdue,
        average_task_completion_time=average_completion_hours(tasks),
        budget_spent=project.metrics.budget_spent,
        time_spent=sum(t.actual_hours for t in tasks if t.actual_hours is not None),
    )

    team_size = project.team_size
    if team_size > 0:
        # Unclamped: small teams with high completion can exceed 100
        metrics.team_productivity_score = metrics.completion_percentage / team_size * 10
    return metrics


def productivity_score(completion_rate: float, average_completion_time: float) -> float:
    """Member productivity: completion rate weighted 0.8 plus a speed bonus.

    The bonus is min(100, 24 / hours * 20) and only applies when the average
    completion time is positive.
    """
    bonus = 0.0
    if average_completion_time > 0:
        bonus = min(SPEED_BONUS_CAP, 24 / average_completion_time * 20)
    return completion_rate * 0.8 + bonus


def compute_member_stats(tasks: Sequence[Task]) -> TeamMemberStats:
    """Derive a member's stats from the tasks assigned to them.

    Args:
        tasks: Tasks whose assigned_to_member_id is the member's id

    Returns:
        Fresh TeamMemberStats
    """
    stats = TeamMemberStats(
        tasks_assigned=len(tasks),
        tasks_completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
        average_completion_time=average_completion_hours(tasks),
        projects_involved=len({t.project_id for t in tasks if t.project_id is not None}),
    )
    stats.productivity_score = productivity_score(stats.completion_rate, stats.average_completion_time)
    return stats


def tasks_for_project(tasks: Iterable[Task], project_id: UUID) -> list[Task]:
    """Tasks referencing a project, in collection order."""
    return [t for t in tasks if t.project_id == project_id]


def tasks_for_member(tasks: Iterable[Task], member_id: UUID) -> list[Task]:
    """Tasks assigned to a member, in collection order."""
    return [t for t in tasks if t.assigned_to_member_id == member_id]
