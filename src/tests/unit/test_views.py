"""Unit tests for live list views."""

import pytest

from taskvantage.core.engine import AggregationEngine
from taskvantage.core.queries import TaskSortOption, TeamSortOption
from taskvantage.core.views import ProjectListView, TaskListView, TeamListView
from taskvantage.models import ProjectStatus, TaskPriority, TeamRole
from tests.fixtures.factories import ProjectFactory, TaskFactory, TeamMemberFactory


class TestTaskListView:
    """Tests for TaskListView."""

    def test_follows_engine_changes(self, engine: AggregationEngine) -> None:
        """Test items update immediately after a mutation."""
        view = TaskListView(engine)
        assert view.items == []

        task = engine.add_task(TaskFactory.create(title="Write docs"))
        assert [t.id for t in view.items] == [task.id]

        engine.delete_task(task)
        assert view.items == []

    def test_configure_recomputes(self, engine: AggregationEngine) -> None:
        """Test changing the selection refilters at once."""
        engine.add_task(TaskFactory.create(title="Low one", priority=TaskPriority.LOW))
        high = engine.add_task(TaskFactory.create(title="High one", priority=TaskPriority.HIGH))
        view = TaskListView(engine, sort_option=TaskSortOption.TITLE)

        items = view.configure(priority=TaskPriority.HIGH)

        assert [t.id for t in items] == [high.id]
        assert view.priority == TaskPriority.HIGH

    def test_configure_rejects_unknown_field(self, engine: AggregationEngine) -> None:
        """Test only declared selection fields can be set."""
        view = TaskListView(engine)
        with pytest.raises(AttributeError):
            view.configure(role=TeamRole.OWNER)

    def test_close_stops_following(self, engine: AggregationEngine) -> None:
        """Test a closed view keeps its last items."""
        view = TaskListView(engine)
        view.close()

        engine.add_task(TaskFactory.create())

        assert view.items == []

    def test_ignores_unrelated_collections(self, engine: AggregationEngine) -> None:
        """Test team changes do not trigger a task refresh."""
        view = TaskListView(engine)
        calls: list[int] = []
        original = view._compute

        def counting_compute():
            calls.append(1)
            return original()

        view._compute = counting_compute  # type: ignore[method-assign]
        engine.add_team_member(TeamMemberFactory.create())

        assert calls == []


class TestProjectListView:
    """Tests for ProjectListView."""

    def test_metric_changes_reach_view(self, engine: AggregationEngine) -> None:
        """Test completion recomputed by a task change is visible in the view."""
        project = engine.add_project(ProjectFactory.create(status=ProjectStatus.ACTIVE))
        view = ProjectListView(engine, status=ProjectStatus.ACTIVE)

        engine.add_task(TaskFactory.completed(project_id=project.id))

        assert view.items[0].metrics.completion_percentage == 100.0


class TestTeamListView:
    """Tests for TeamListView."""

    def test_inactive_filter_and_sort(self, engine: AggregationEngine) -> None:
        """Test the team view hides inactive members until asked."""
        engine.add_team_member(TeamMemberFactory.create(name="Zoe"))
        engine.add_team_member(TeamMemberFactory.create(name="Adam"))
        gone = engine.add_team_member(TeamMemberFactory.create(name="Gone", is_active=False))
        view = TeamListView(engine, sort_option=TeamSortOption.NAME)

        assert [m.name for m in view.items] == ["Adam", "Zoe"]

        view.configure(show_inactive=True)
        assert gone.id in [m.id for m in view.items]


class TestPackageExports:
    """Views are importable from the core package."""

    def test_views_exported_from_core(self) -> None:
        """Test the list views are part of the core package surface."""
        import taskvantage.core as core

        assert core.TaskListView is TaskListView
        assert core.ProjectListView is ProjectListView
        assert core.TeamListView is TeamListView
        assert {"TaskListView", "ProjectListView", "TeamListView"} <= set(core.__all__)

    def test_view_items_are_detached(self, engine: AggregationEngine) -> None:
        """Test editing a listed task does not reach the engine."""
        task = engine.add_task(TaskFactory.create(title="Write docs"))
        view = TaskListView(engine)

        view.items[0].title = "Edited elsewhere"

        assert engine.get_task(task.id).title == "Write docs"
