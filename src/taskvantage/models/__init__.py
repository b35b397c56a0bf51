"""Data models for tasks, projects and team members."""

from taskvantage.models.base import Entity, as_utc, utc_now
from taskvantage.models.insight import (
    Insight,
    InsightCategory,
    InsightImpact,
    ProjectInsight,
    TeamInsight,
    insight_content,
)
from taskvantage.models.project import Project, ProjectMetrics, ProjectStatus
from taskvantage.models.task import Task, TaskPriority, TaskStatus
from taskvantage.models.team_member import TeamMember, TeamMemberStats, TeamRole

__all__ = [
    # Base
    "Entity",
    "as_utc",
    "utc_now",
    # Entities
    "Task",
    "TaskPriority",
    "TaskStatus",
    "Project",
    "ProjectMetrics",
    "ProjectStatus",
    "TeamMember",
    "TeamMemberStats",
    "TeamRole",
    # Insights
    "Insight",
    "InsightCategory",
    "InsightImpact",
    "ProjectInsight",
    "TeamInsight",
    "insight_content",
]
