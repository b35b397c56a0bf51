"""Quick queries and summary statistics over the canonical collections."""

from collections.abc import Sequence
from datetime import datetime, time, timedelta

from pydantic import BaseModel

from taskvantage.core.aggregation import average_completion_hours
from taskvantage.core.queries import matches_query
from taskvantage.models import (
    Project,
    ProjectStatus,
    Task,
    TaskPriority,
    TaskStatus,
    TeamMember,
    TeamRole,
)

TOP_PERFORMER_LIMIT = 5
AVAILABLE_TASK_LIMIT = 10


# =============================================================================
# Tasks
# =============================================================================


def overdue_tasks(tasks: Sequence[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if t.is_overdue(now)]


def tasks_due_today(tasks: Sequence[Task], now: datetime) -> list[Task]:
    """Tasks due between the start of today and the start of tomorrow (UTC)."""
    today = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    tomorrow = today + timedelta(days=1)
    return [t for t in tasks if t.due_date is not None and today <= t.due_date < tomorrow]


def tasks_due_this_week(tasks: Sequence[Task], now: datetime) -> list[Task]:
    week_from_now = now + timedelta(weeks=1)
    return [t for t in tasks if t.due_date is not None and now <= t.due_date <= week_from_now]


def high_priority_tasks(tasks: Sequence[Task]) -> list[Task]:
    return [t for t in tasks if t.priority in (TaskPriority.HIGH, TaskPriority.CRITICAL)]


def tasks_with_priority(tasks: Sequence[Task], priority: TaskPriority) -> list[Task]:
    return [t for t in tasks if t.priority == priority]


def tasks_with_status(tasks: Sequence[Task], status: TaskStatus) -> list[Task]:
    return [t for t in tasks if t.status == status]


class TaskSummary(BaseModel):
    total: int
    completion_rate: float
    overdue_count: int
    in_progress_count: int
    average_completion_time: float


def summarize_tasks(tasks: Sequence[Task], now: datetime) -> TaskSummary:
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    return TaskSummary(
        total=len(tasks),
        completion_rate=completed / len(tasks) * 100.0 if tasks else 0.0,
        overdue_count=len(overdue_tasks(tasks, now)),
        in_progress_count=len(tasks_with_status(tasks, TaskStatus.IN_PROGRESS)),
        average_completion_time=average_completion_hours(tasks),
    )


# =============================================================================
# Projects
# =============================================================================


def active_projects(projects: Sequence[Project]) -> list[Project]:
    return [p for p in projects if p.status == ProjectStatus.ACTIVE]


def overdue_projects(projects: Sequence[Project], now: datetime) -> list[Project]:
    return [p for p in projects if p.is_overdue(now)]


def projects_due_this_week(projects: Sequence[Project], now: datetime) -> list[Project]:
    week_from_now = now + timedelta(weeks=1)
    return [
        p
        for p in projects
        if p.estimated_end_date is not None and now <= p.estimated_end_date <= week_from_now
    ]


class ProjectSummary(BaseModel):
    total: int
    active: int
    completed: int
    overdue: int
    average_completion: float
    completion_rate: float


def summarize_projects(projects: Sequence[Project], now: datetime) -> ProjectSummary:
    total = len(projects)
    completed = sum(1 for p in projects if p.status == ProjectStatus.COMPLETED)
    return ProjectSummary(
        total=total,
        active=len(active_projects(projects)),
        completed=completed,
        overdue=len(overdue_projects(projects, now)),
        average_completion=(
            sum(p.metrics.completion_percentage for p in projects) / total if total else 0.0
        ),
        completion_rate=completed / total * 100.0 if total else 0.0,
    )


# =============================================================================
# Team
# =============================================================================


def active_members(members: Sequence[TeamMember]) -> list[TeamMember]:
    return [m for m in members if m.is_active]


def members_with_role(members: Sequence[TeamMember], role: TeamRole) -> list[TeamMember]:
    return [m for m in members if m.role == role]


def top_performers(members: Sequence[TeamMember], limit: int = TOP_PERFORMER_LIMIT) -> list[TeamMember]:
    ranked = sorted(active_members(members), key=lambda m: m.stats.productivity_score, reverse=True)
    return ranked[:limit]


def members_needing_attention(members: Sequence[TeamMember]) -> list[TeamMember]:
    """Active members with low completion, heavy load or low productivity."""
    return [
        m
        for m in active_members(members)
        if m.stats.completion_rate < 70 or m.stats.tasks_assigned > 10 or m.stats.productivity_score < 50
    ]


def available_members(members: Sequence[TeamMember]) -> list[TeamMember]:
    return [m for m in active_members(members) if m.stats.tasks_assigned < AVAILABLE_TASK_LIMIT]


def suggest_member_for_task(task: Task, members: Sequence[TeamMember]) -> TeamMember | None:
    """Pick an assignee for a task.

    Prefers the first available member with a skill mentioned in the task's
    title or description; otherwise the available member with the fewest
    assigned tasks.
    """
    candidates = available_members(members)
    for member in candidates:
        if any(matches_query(skill, task.title, task.description) for skill in member.skills if skill.strip()):
            return member
    if not candidates:
        return None
    return min(candidates, key=lambda m: m.stats.tasks_assigned)


class TeamSummary(BaseModel):
    total: int
    active: int
    average_productivity: float
    average_completion_rate: float
    total_tasks_completed: int
    total_tasks_assigned: int


def summarize_team(members: Sequence[TeamMember]) -> TeamSummary:
    active = active_members(members)
    return TeamSummary(
        total=len(members),
        active=len(active),
        average_productivity=(
            sum(m.stats.productivity_score for m in active) / len(active) if active else 0.0
        ),
        average_completion_rate=(
            sum(m.stats.completion_rate for m in active) / len(active) if active else 0.0
        ),
        total_tasks_completed=sum(m.stats.tasks_completed for m in members),
        total_tasks_assigned=sum(m.stats.tasks_assigned for m in members),
    )
