"""Project model, status enum and derived metrics."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from taskvantage.models.base import Entity, UtcDatetime, as_utc, utc_now
from taskvantage.models.insight import ProjectInsight


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    PLANNING = "Planning"
    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def ordinal(self) -> int:
        """Position in the status sort order."""
        return PROJECT_STATUS_ORDER[self]


PROJECT_STATUS_ORDER: dict[ProjectStatus, int] = {
    ProjectStatus.PLANNING: 1,
    ProjectStatus.ACTIVE: 2,
    ProjectStatus.ON_HOLD: 3,
    ProjectStatus.COMPLETED: 4,
    ProjectStatus.CANCELLED: 5,
}


class ProjectMetrics(BaseModel):
    """Aggregate statistics derived from a project's tasks."""

    model_config = ConfigDict(validate_assignment=True)

    total_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0
    average_task_completion_time: float = Field(default=0.0, description="Mean hours from creation to completion")
    budget_spent: float = 0.0
    time_spent: float = Field(default=0.0, description="Sum of actual hours across tasks")
    team_productivity_score: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def completion_percentage(self) -> float:
        if self.total_tasks == 0:
            return 0.0
        return self.completed_tasks / self.total_tasks * 100.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def on_time_performance(self) -> float:
        if self.total_tasks == 0:
            return 100.0
        return (self.total_tasks - self.overdue_tasks) / self.total_tasks * 100.0


class Project(Entity):
    """A project grouping tasks and a team.

    Metrics and insights are derived data owned by the aggregation engine;
    they are recomputed from the task collection, never edited directly.
    """

    name: str = Field(..., min_length=1, description="Project name")
    description: str = ""
    status: ProjectStatus = Field(default=ProjectStatus.PLANNING)
    start_date: UtcDatetime = Field(default_factory=utc_now)
    end_date: UtcDatetime | None = Field(default=None, description="Actual end date")
    estimated_end_date: UtcDatetime | None = Field(default=None, description="Planned end date")
    created_date: UtcDatetime = Field(default_factory=utc_now)
    owner_id: UUID | None = None
    team_member_ids: list[UUID] = Field(default_factory=list)
    budget: float | None = None
    color: str = Field(default="#3cc45b", description="Hex colour chosen by the user")
    tags: list[str] = Field(default_factory=list)
    metrics: ProjectMetrics = Field(default_factory=ProjectMetrics)
    insights: list[ProjectInsight] = Field(default_factory=list)
    notes: str = ""

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Whether the estimated end date has passed and the project is not completed.

        Args:
            now: Reference time (defaults to the current UTC time)
        """
        if self.estimated_end_date is None:
            return False
        now = as_utc(now) if now else utc_now()
        return self.estimated_end_date < now and self.status != ProjectStatus.COMPLETED

    def days_remaining(self, now: datetime | None = None) -> int:
        """Whole days until the estimated end date, negative once past it."""
        if self.estimated_end_date is None:
            return 0
        now = as_utc(now) if now else utc_now()
        # Truncate toward zero like a calendar day difference
        return int((self.estimated_end_date - now).total_seconds() / 86400)

    @property
    def team_size(self) -> int:
        return len(self.team_member_ids)
