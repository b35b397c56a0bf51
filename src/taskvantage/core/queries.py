"""Pure filter and sort functions behind the list views.

Sorting is always stable: entities that compare equal keep their collection
order. Text search is a case-insensitive substring match.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from taskvantage.models import (
    Project,
    ProjectStatus,
    Task,
    TaskPriority,
    TaskStatus,
    TeamMember,
    TeamRole,
)

# Sort key for undated entities; the leading None flag already ranks them last
NO_DATE = datetime.min.replace(tzinfo=timezone.utc)


class TaskSortOption(str, Enum):
    DUE_DATE = "Due Date"
    PRIORITY = "Priority"
    CREATED_DATE = "Created Date"
    TITLE = "Title"
    STATUS = "Status"


class ProjectSortOption(str, Enum):
    DUE_DATE = "Due Date"
    NAME = "Name"
    CREATED_DATE = "Created Date"
    STATUS = "Status"
    COMPLETION = "Completion"


class TeamSortOption(str, Enum):
    NAME = "Name"
    ROLE = "Role"
    JOIN_DATE = "Join Date"
    PRODUCTIVITY = "Productivity"
    TASKS_COMPLETED = "Tasks Completed"


def matches_query(query: str, *fields: str | Iterable[str] | None) -> bool:
    """Case-insensitive substring match of query against any field.

    Args:
        query: Search text; empty or whitespace-only matches everything
        *fields: Strings, None, or iterables of strings (e.g. tags)

    Returns:
        True if query occurs in any field
    """
    needle = query.strip().casefold()
    if not needle:
        return True
    for value in fields:
        if value is None:
            continue
        candidates = [value] if isinstance(value, str) else value
        if any(needle in candidate.casefold() for candidate in candidates):
            return True
    return False


# =============================================================================
# Tasks
# =============================================================================


def filter_tasks(
    tasks: Iterable[Task],
    query: str = "",
    priority: TaskPriority | None = None,
    status: TaskStatus | None = None,
    project_id: UUID | None = None,
    show_completed: bool = True,
) -> list[Task]:
    """Filter tasks by search text and optional criteria.

    Search covers title, description and tags.
    """
    result = []
    for task in tasks:
        if not matches_query(query, task.title, task.description, task.tags):
            continue
        if priority is not None and task.priority != priority:
            continue
        if status is not None and task.status != status:
            continue
        if project_id is not None and task.project_id != project_id:
            continue
        if not show_completed and task.status == TaskStatus.COMPLETED:
            continue
        result.append(task)
    return result


def sort_tasks(tasks: Sequence[Task], option: TaskSortOption = TaskSortOption.DUE_DATE) -> list[Task]:
    if option == TaskSortOption.DUE_DATE:
        # Undated tasks go last
        return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or NO_DATE))
    if option == TaskSortOption.PRIORITY:
        return sorted(tasks, key=lambda t: t.priority.rank, reverse=True)
    if option == TaskSortOption.CREATED_DATE:
        return sorted(tasks, key=lambda t: t.created_date, reverse=True)
    if option == TaskSortOption.TITLE:
        return sorted(tasks, key=lambda t: t.title.casefold())
    if option == TaskSortOption.STATUS:
        return sorted(tasks, key=lambda t: t.status.ordinal)
    raise ValueError(f"Unknown task sort option: {option}")


# =============================================================================
# Projects
# =============================================================================


def filter_projects(
    projects: Iterable[Project],
    query: str = "",
    status: ProjectStatus | None = None,
) -> list[Project]:
    """Filter projects by search text (name, description, tags) and status."""
    return [
        p
        for p in projects
        if matches_query(query, p.name, p.description, p.tags) and (status is None or p.status == status)
    ]


def sort_projects(
    projects: Sequence[Project],
    option: ProjectSortOption = ProjectSortOption.DUE_DATE,
) -> list[Project]:
    if option == ProjectSortOption.DUE_DATE:
        return sorted(
            projects,
            key=lambda p: (p.estimated_end_date is None, p.estimated_end_date or NO_DATE),
        )
    if option == ProjectSortOption.NAME:
        return sorted(projects, key=lambda p: p.name.casefold())
    if option == ProjectSortOption.CREATED_DATE:
        return sorted(projects, key=lambda p: p.created_date, reverse=True)
    if option == ProjectSortOption.STATUS:
        return sorted(projects, key=lambda p: p.status.ordinal)
    if option == ProjectSortOption.COMPLETION:
        return sorted(projects, key=lambda p: p.metrics.completion_percentage, reverse=True)
    raise ValueError(f"Unknown project sort option: {option}")


# =============================================================================
# Team members
# =============================================================================


def filter_members(
    members: Iterable[TeamMember],
    query: str = "",
    role: TeamRole | None = None,
    show_inactive: bool = False,
) -> list[TeamMember]:
    """Filter members by search text and role; inactive members are hidden by default.

    Search covers name, email, skills and department.
    """
    result = []
    for member in members:
        if not matches_query(query, member.name, member.email, member.skills, member.department):
            continue
        if role is not None and member.role != role:
            continue
        if not show_inactive and not member.is_active:
            continue
        result.append(member)
    return result


def sort_members(
    members: Sequence[TeamMember],
    option: TeamSortOption = TeamSortOption.NAME,
) -> list[TeamMember]:
    if option == TeamSortOption.NAME:
        return sorted(members, key=lambda m: m.name.casefold())
    if option == TeamSortOption.ROLE:
        return sorted(members, key=lambda m: m.role.ordinal)
    if option == TeamSortOption.JOIN_DATE:
        return sorted(members, key=lambda m: m.join_date, reverse=True)
    if option == TeamSortOption.PRODUCTIVITY:
        return sorted(members, key=lambda m: m.stats.productivity_score, reverse=True)
    if option == TeamSortOption.TASKS_COMPLETED:
        return sorted(members, key=lambda m: m.stats.tasks_completed, reverse=True)
    raise ValueError(f"Unknown team sort option: {option}")
