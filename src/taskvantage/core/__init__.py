"""Core engine, queries and views."""

from taskvantage.core.engine import AggregationEngine
from taskvantage.core.events import ChangeNotifier, CollectionsChanged
from taskvantage.core.views import ProjectListView, TaskListView, TeamListView

__all__ = [
    "AggregationEngine",
    "ChangeNotifier",
    "CollectionsChanged",
    "ProjectListView",
    "TaskListView",
    "TeamListView",
]
