"""Live list views bound to an aggregation engine.

A view holds a filter/sort selection and the resulting item list. It
recomputes immediately when the selection changes or the engine reports a
change to its collection, so ``items`` always reflects the latest canonical
state.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from taskvantage.core.engine import AggregationEngine
from taskvantage.core.events import PROJECTS, TASKS, TEAM_MEMBERS, CollectionsChanged
from taskvantage.core.queries import (
    ProjectSortOption,
    TaskSortOption,
    TeamSortOption,
    filter_members,
    filter_projects,
    filter_tasks,
    sort_members,
    sort_projects,
    sort_tasks,
)
from taskvantage.models import Entity, ProjectStatus, TaskPriority, TaskStatus, TeamRole

E = TypeVar("E", bound=Entity)


class ListView(Generic[E]):
    """Base class: subscription handling and selection updates."""

    collection: str = ""
    selection_fields: tuple[str, ...] = ()

    def __init__(self, engine: AggregationEngine) -> None:
        self.engine = engine
        self._items: list[E] = []
        self._unsubscribe = engine.subscribe(self._on_change)

    @property
    def items(self) -> list[E]:
        return list(self._items)

    def configure(self, **selection: Any) -> list[E]:
        """Update one or more selection fields and recompute.

        Raises:
            AttributeError: If a field is not part of this view's selection
        """
        for name, value in selection.items():
            if name not in self.selection_fields:
                raise AttributeError(f"{type(self).__name__} has no selection field '{name}'")
            setattr(self, name, value)
        return self.refresh()

    def refresh(self) -> list[E]:
        self._items = self._compute()
        return self.items

    def close(self) -> None:
        """Stop following engine changes."""
        self._unsubscribe()

    def _on_change(self, event: CollectionsChanged) -> None:
        if event.touches(self.collection):
            self.refresh()

    def _compute(self) -> list[E]:
        raise NotImplementedError


class TaskListView(ListView):
    """Filtered and sorted task list."""

    collection = TASKS
    selection_fields = ("search_text", "priority", "status", "project_id", "show_completed", "sort_option")

    def __init__(
        self,
        engine: AggregationEngine,
        search_text: str = "",
        priority: TaskPriority | None = None,
        status: TaskStatus | None = None,
        project_id: UUID | None = None,
        show_completed: bool = True,
        sort_option: TaskSortOption = TaskSortOption.DUE_DATE,
    ) -> None:
        super().__init__(engine)
        self.search_text = search_text
        self.priority = priority
        self.status = status
        self.project_id = project_id
        self.show_completed = show_completed
        self.sort_option = sort_option
        self.refresh()

    def _compute(self):
        filtered = filter_tasks(
            self.engine.tasks,
            query=self.search_text,
            priority=self.priority,
            status=self.status,
            project_id=self.project_id,
            show_completed=self.show_completed,
        )
        return sort_tasks(filtered, self.sort_option)


class ProjectListView(ListView):
    """Filtered and sorted project list."""

    collection = PROJECTS
    selection_fields = ("search_text", "status", "sort_option")

    def __init__(
        self,
        engine: AggregationEngine,
        search_text: str = "",
        status: ProjectStatus | None = None,
        sort_option: ProjectSortOption = ProjectSortOption.DUE_DATE,
    ) -> None:
        super().__init__(engine)
        self.search_text = search_text
        self.status = status
        self.sort_option = sort_option
        self.refresh()

    def _compute(self):
        filtered = filter_projects(self.engine.projects, query=self.search_text, status=self.status)
        return sort_projects(filtered, self.sort_option)


class TeamListView(ListView):
    """Filtered and sorted team member list."""

    collection = TEAM_MEMBERS
    selection_fields = ("search_text", "role", "show_inactive", "sort_option")

    def __init__(
        self,
        engine: AggregationEngine,
        search_text: str = "",
        role: TeamRole | None = None,
        show_inactive: bool = False,
        sort_option: TeamSortOption = TeamSortOption.NAME,
    ) -> None:
        super().__init__(engine)
        self.search_text = search_text
        self.role = role
        self.show_inactive = show_inactive
        self.sort_option = sort_option
        self.refresh()

    def _compute(self):
        filtered = filter_members(
            self.engine.team_members,
            query=self.search_text,
            role=self.role,
            show_inactive=self.show_inactive,
        )
        return sort_members(filtered, self.sort_option)
