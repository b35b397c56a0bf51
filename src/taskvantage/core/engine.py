"""Aggregation engine: canonical collections and eager recomputation."""

import time
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import TypeVar
from uuid import UUID

from taskvantage.core.aggregation import (
    compute_member_stats,
    compute_project_metrics,
    tasks_for_member,
    tasks_for_project,
)
from taskvantage.core.events import (
    ALL_COLLECTIONS,
    PROJECTS,
    TASKS,
    TEAM_MEMBERS,
    ChangeHandler,
    ChangeNotifier,
    CollectionsChanged,
)
from taskvantage.core.insights import generate_project_insights
from taskvantage.models import (
    Entity,
    Project,
    ProjectStatus,
    Task,
    TaskStatus,
    TeamMember,
    TeamRole,
    utc_now,
)
from taskvantage.services.templates import ProjectTemplate
from taskvantage.utils.logging import get_logger
from taskvantage.utils.metrics import Metrics

logger = get_logger(__name__)

E = TypeVar("E", bound=Entity)


def _index_of(collection: list[E], entity_id: UUID | None) -> int | None:
    if entity_id is None:
        return None
    for index, entity in enumerate(collection):
        if entity.id == entity_id:
            return index
    return None


class AggregationEngine:
    """Owns tasks, projects and team members and keeps derived data in sync.

    Provides:
    - CRUD operations for the three collections
    - Cascades (project delete removes its tasks, member delete unassigns)
    - Eager recompute of project metrics/insights and member stats
    - Change notification after each mutation, once recompute has finished

    Entities passed in and handed out are copies; the engine never shares
    state with callers.
    Unknown ids are ignored rather than reported.
    """

    def __init__(
        self,
        tasks: Iterable[Task] | None = None,
        projects: Iterable[Project] | None = None,
        team_members: Iterable[TeamMember] | None = None,
        clock: Callable[[], datetime] | None = None,
        metrics: Metrics | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            tasks: Initial tasks
            projects: Initial projects
            team_members: Initial team members
            clock: Returns the current UTC time (injectable for tests)
            metrics: Optional Prometheus metrics collector
        """
        self._tasks: list[Task] = [t.copy_entity() for t in tasks or []]
        self._projects: list[Project] = [p.copy_entity() for p in projects or []]
        self._team_members: list[TeamMember] = [m.copy_entity() for m in team_members or []]
        self._clock = clock or utc_now
        self._metrics = metrics
        self.notifier = ChangeNotifier()

        logger.debug(
            "aggregation_engine_initialized",
            tasks=len(self._tasks),
            projects=len(self._projects),
            team_members=len(self._team_members),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        return self._clock()

    @property
    def tasks(self) -> list[Task]:
        return _copies(self._tasks)

    @property
    def projects(self) -> list[Project]:
        return _copies(self._projects)

    @property
    def team_members(self) -> list[TeamMember]:
        return _copies(self._team_members)

    def get_task(self, task_id: UUID) -> Task | None:
        index = _index_of(self._tasks, task_id)
        return None if index is None else self._tasks[index].copy_entity()

    def get_project(self, project_id: UUID) -> Project | None:
        index = _index_of(self._projects, project_id)
        return None if index is None else self._projects[index].copy_entity()

    def get_team_member(self, member_id: UUID) -> TeamMember | None:
        index = _index_of(self._team_members, member_id)
        return None if index is None else self._team_members[index].copy_entity()

    def get_tasks_for_project(self, project_id: UUID) -> list[Task]:
        return _copies(tasks_for_project(self._tasks, project_id))

    def get_tasks_for_member(self, member_id: UUID) -> list[Task]:
        return _copies(tasks_for_member(self._tasks, member_id))

    def get_project_team_members(self, project: Project) -> list[TeamMember]:
        return _copies(m for m in self._team_members if m.id in project.team_member_ids)

    def get_member_projects(self, member: TeamMember) -> list[Project]:
        return _copies(p for p in self._projects if member.id in p.team_member_ids)

    def subscribe(self, handler: ChangeHandler) -> Callable[[], None]:
        """Subscribe to change notifications. Returns an unsubscribe callable."""
        return self.notifier.subscribe(handler)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def add_task(self, task: Task) -> Task:
        """Add a task and recompute its project and member.

        Args:
            task: Task to add

        Returns:
            The stored copy
        """
        stored = task.copy_entity()
        self._tasks.append(stored)
        self.recompute_project_metrics(stored.project_id)
        self.recompute_member_stats(stored.assigned_to_member_id)

        self._record("add", "task")
        logger.info("task_added", task_id=str(stored.id), project_id=_str(stored.project_id))
        self._publish("add_task", TASKS, PROJECTS, TEAM_MEMBERS)
        return stored.copy_entity()

    def update_task(self, task: Task) -> Task | None:
        """Replace a task by id and recompute affected projects and members.

        When the task moved to another project or member, the former one is
        recomputed as well.

        Args:
            task: Task with updated values

        Returns:
            The stored copy, or None if no task has that id
        """
        index = _index_of(self._tasks, task.id)
        if index is None:
            logger.debug("task_update_ignored", task_id=str(task.id))
            return None

        previous = self._tasks[index]
        stored = task.copy_entity()
        self._tasks[index] = stored

        for project_id in _distinct(previous.project_id, stored.project_id):
            self.recompute_project_metrics(project_id)
        for member_id in _distinct(previous.assigned_to_member_id, stored.assigned_to_member_id):
            self.recompute_member_stats(member_id)

        self._record("update", "task")
        logger.info("task_updated", task_id=str(stored.id), status=stored.status.value)
        self._publish("update_task", TASKS, PROJECTS, TEAM_MEMBERS)
        return stored.copy_entity()

    def delete_task(self, task: Task) -> bool:
        """Remove a task by id and recompute its former project and member.

        Returns:
            True if a task was removed
        """
        index = _index_of(self._tasks, task.id)
        if index is None:
            return False

        removed = self._tasks.pop(index)
        self.recompute_project_metrics(removed.project_id)
        self.recompute_member_stats(removed.assigned_to_member_id)

        self._record("delete", "task")
        logger.info("task_deleted", task_id=str(removed.id))
        self._publish("delete_task", TASKS, PROJECTS, TEAM_MEMBERS)
        return True

    def toggle_task_completion(self, task: Task) -> Task | None:
        """Flip a task between Completed and To Do, maintaining completed_date."""
        updated = task.copy_entity()
        if task.status == TaskStatus.COMPLETED:
            updated.status = TaskStatus.TODO
            updated.completed_date = None
        else:
            updated.status = TaskStatus.COMPLETED
            updated.completed_date = self.now()
        return self.update_task(updated)

    def mark_task_in_progress(self, task: Task) -> Task | None:
        updated = task.copy_entity()
        updated.status = TaskStatus.IN_PROGRESS
        return self.update_task(updated)

    def add_time_to_task(self, task: Task, hours: float) -> Task | None:
        updated = task.copy_entity()
        updated.actual_hours = (updated.actual_hours or 0.0) + hours
        return self.update_task(updated)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def add_project(self, project: Project) -> Project:
        """Add a project. Metrics start at zero; nothing to recompute yet."""
        stored = project.copy_entity()
        self._projects.append(stored)

        self._record("add", "project")
        logger.info("project_added", project_id=str(stored.id), name=stored.name)
        self._publish("add_project", PROJECTS)
        return stored.copy_entity()

    def update_project(self, project: Project) -> Project | None:
        """Replace a project by id and recompute it.

        Team size and status feed the productivity score and insights, so the
        replaced project is recomputed immediately.

        Returns:
            The stored copy, or None if no project has that id
        """
        index = _index_of(self._projects, project.id)
        if index is None:
            logger.debug("project_update_ignored", project_id=str(project.id))
            return None

        self._projects[index] = project.copy_entity()
        self.recompute_project_metrics(project.id)

        self._record("update", "project")
        logger.info("project_updated", project_id=str(project.id))
        self._publish("update_project", PROJECTS)
        return self._projects[index].copy_entity()

    def delete_project(self, project: Project) -> bool:
        """Remove a project together with every task that references it.

        Members who had tasks in the project are recomputed.

        Returns:
            True if a project was removed
        """
        index = _index_of(self._projects, project.id)
        removed_tasks = [t for t in self._tasks if t.project_id == project.id]
        if index is None and not removed_tasks:
            return False

        self._tasks = [t for t in self._tasks if t.project_id != project.id]
        if index is not None:
            self._projects.pop(index)

        for member_id in {t.assigned_to_member_id for t in removed_tasks if t.assigned_to_member_id}:
            self.recompute_member_stats(member_id)

        self._record("delete", "project")
        logger.info("project_deleted", project_id=str(project.id), tasks_removed=len(removed_tasks))
        self._publish("delete_project", TASKS, PROJECTS, TEAM_MEMBERS)
        return True

    def add_team_member_to_project(self, project: Project, member_id: UUID) -> Project | None:
        if member_id in project.team_member_ids:
            return self.get_project(project.id)
        updated = project.copy_entity()
        updated.team_member_ids.append(member_id)
        return self.update_project(updated)

    def remove_team_member_from_project(self, project: Project, member_id: UUID) -> Project | None:
        updated = project.copy_entity()
        updated.team_member_ids = [mid for mid in updated.team_member_ids if mid != member_id]
        return self.update_project(updated)

    def update_project_status(self, project: Project, status: ProjectStatus) -> Project | None:
        """Change a project's status, stamping end_date on first completion."""
        updated = project.copy_entity()
        updated.status = status
        if status == ProjectStatus.COMPLETED and updated.end_date is None:
            updated.end_date = self.now()
        return self.update_project(updated)

    def create_project_from_template(self, template: ProjectTemplate) -> Project:
        """Build (but do not add) a project from a template."""
        return Project(
            name=template.name,
            description=template.description,
            estimated_end_date=self.now() + timedelta(days=template.estimated_duration),
            tags=list(template.tags),
            color=template.color,
        )

    # ------------------------------------------------------------------
    # Team members
    # ------------------------------------------------------------------

    def add_team_member(self, member: TeamMember) -> TeamMember:
        stored = member.copy_entity()
        self._team_members.append(stored)

        self._record("add", "team_member")
        logger.info("team_member_added", member_id=str(stored.id), role=stored.role.value)
        self._publish("add_team_member", TEAM_MEMBERS)
        return stored.copy_entity()

    def update_team_member(self, member: TeamMember) -> TeamMember | None:
        """Replace a member by id; stats are recomputed so they cannot be overwritten."""
        index = _index_of(self._team_members, member.id)
        if index is None:
            logger.debug("team_member_update_ignored", member_id=str(member.id))
            return None

        self._team_members[index] = member.copy_entity()
        self.recompute_member_stats(member.id)

        self._record("update", "team_member")
        logger.info("team_member_updated", member_id=str(member.id))
        self._publish("update_team_member", TEAM_MEMBERS)
        return self._team_members[index].copy_entity()

    def delete_team_member(self, member: TeamMember) -> bool:
        """Remove a member, unassigning their tasks and leaving every project.

        Tasks and projects are kept. Projects whose team shrank are recomputed.

        Returns:
            True if anything changed
        """
        index = _index_of(self._team_members, member.id)
        unassigned = 0
        for task in self._tasks:
            if task.assigned_to_member_id == member.id:
                task.assigned_to_member_id = None
                unassigned += 1

        affected_projects: list[UUID] = []
        for project in self._projects:
            if member.id in project.team_member_ids:
                project.team_member_ids = [mid for mid in project.team_member_ids if mid != member.id]
                affected_projects.append(project.id)

        if index is None and not unassigned and not affected_projects:
            return False
        if index is not None:
            self._team_members.pop(index)

        for project_id in affected_projects:
            self.recompute_project_metrics(project_id)

        self._record("delete", "team_member")
        logger.info(
            "team_member_deleted",
            member_id=str(member.id),
            tasks_unassigned=unassigned,
            projects_left=len(affected_projects),
        )
        self._publish("delete_team_member", TASKS, PROJECTS, TEAM_MEMBERS)
        return True

    def toggle_member_active_status(self, member: TeamMember) -> TeamMember | None:
        updated = member.copy_entity()
        updated.is_active = not updated.is_active
        return self.update_team_member(updated)

    def update_member_role(self, member: TeamMember, role: TeamRole) -> TeamMember | None:
        updated = member.copy_entity()
        updated.role = role
        return self.update_team_member(updated)

    def add_skill_to_member(self, member: TeamMember, skill: str) -> TeamMember | None:
        if skill in member.skills:
            return self.get_team_member(member.id)
        updated = member.copy_entity()
        updated.skills.append(skill)
        return self.update_team_member(updated)

    def remove_skill_from_member(self, member: TeamMember, skill: str) -> TeamMember | None:
        updated = member.copy_entity()
        updated.skills = [s for s in updated.skills if s != skill]
        return self.update_team_member(updated)

    # ------------------------------------------------------------------
    # Recompute
    # ------------------------------------------------------------------

    def recompute_project_metrics(self, project_id: UUID | None) -> None:
        """Recompute a project's metrics and regenerate its insights.

        A missing or unknown project id is a no-op.
        """
        index = _index_of(self._projects, project_id)
        if index is None:
            return

        start = time.perf_counter()
        now = self.now()
        project = self._projects[index]
        project.metrics = compute_project_metrics(project, tasks_for_project(self._tasks, project.id), now)
        project.insights = generate_project_insights(project, now)

        if self._metrics:
            self._metrics.record_recompute("project", time.perf_counter() - start)
        logger.debug(
            "project_metrics_recomputed",
            project_id=str(project.id),
            total_tasks=project.metrics.total_tasks,
            completion=project.metrics.completion_percentage,
            insights=len(project.insights),
        )

    def recompute_member_stats(self, member_id: UUID | None) -> None:
        """Recompute a member's stats. A missing or unknown id is a no-op."""
        index = _index_of(self._team_members, member_id)
        if index is None:
            return

        start = time.perf_counter()
        member = self._team_members[index]
        member.stats = compute_member_stats(tasks_for_member(self._tasks, member.id))

        if self._metrics:
            self._metrics.record_recompute("member", time.perf_counter() - start)
        logger.debug(
            "member_stats_recomputed",
            member_id=str(member.id),
            tasks_assigned=member.stats.tasks_assigned,
            productivity=member.stats.productivity_score,
        )

    def recompute_all(self) -> None:
        """Recompute every project and member, then notify once."""
        for project in self._projects:
            self.recompute_project_metrics(project.id)
        for member in self._team_members:
            self.recompute_member_stats(member.id)
        self._publish("recompute_all", PROJECTS, TEAM_MEMBERS)

    def replace_all(
        self,
        tasks: Iterable[Task],
        projects: Iterable[Project],
        team_members: Iterable[TeamMember],
    ) -> None:
        """Swap in new collections (e.g. first-run sample data) and recompute."""
        self._tasks = [t.copy_entity() for t in tasks]
        self._projects = [p.copy_entity() for p in projects]
        self._team_members = [m.copy_entity() for m in team_members]
        for project in self._projects:
            self.recompute_project_metrics(project.id)
        for member in self._team_members:
            self.recompute_member_stats(member.id)
        self._publish("replace_all", *ALL_COLLECTIONS)

    def clear(self) -> None:
        """Empty all three collections."""
        self._tasks.clear()
        self._projects.clear()
        self._team_members.clear()
        logger.info("engine_cleared")
        self._publish("clear", *ALL_COLLECTIONS)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record(self, operation: str, entity: str) -> None:
        if self._metrics:
            self._metrics.record_operation(operation, entity)
            self._metrics.set_entity_counts(len(self._tasks), len(self._projects), len(self._team_members))

    def _publish(self, operation: str, *collections: str) -> None:
        self.notifier.publish(
            CollectionsChanged(operation=operation, collections=frozenset(collections), timestamp=self.now())
        )


def _copies(entities: Iterable[E]) -> list[E]:
    return [entity.copy_entity() for entity in entities]


def _distinct(*ids: UUID | None) -> list[UUID]:
    result: list[UUID] = []
    for value in ids:
        if value is not None and value not in result:
            result.append(value)
    return result


def _str(value: UUID | None) -> str | None:
    return None if value is None else str(value)
