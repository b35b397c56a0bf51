"""Task model with priority and status enums."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field

from taskvantage.models.base import Entity, UtcDatetime, as_utc, utc_now


class TaskPriority(str, Enum):
    """Task priority levels, ordered low < medium < high < critical."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        """Severity rank, 1 (low) to 4 (critical)."""
        return PRIORITY_RANK[self]


class TaskStatus(str, Enum):
    """Task workflow status."""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"

    @property
    def ordinal(self) -> int:
        """Position in the status sort order."""
        return STATUS_ORDER[self]

    @property
    def progress_fraction(self) -> float:
        """Rough progress implied by the status (0.0-1.0)."""
        return STATUS_PROGRESS[self]


PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
    TaskPriority.CRITICAL: 4,
}

STATUS_ORDER: dict[TaskStatus, int] = {
    TaskStatus.TODO: 1,
    TaskStatus.IN_PROGRESS: 2,
    TaskStatus.ON_HOLD: 3,
    TaskStatus.COMPLETED: 4,
}

STATUS_PROGRESS: dict[TaskStatus, float] = {
    TaskStatus.TODO: 0.0,
    TaskStatus.IN_PROGRESS: 0.5,
    TaskStatus.COMPLETED: 1.0,
    TaskStatus.ON_HOLD: 0.25,
}


class Task(Entity):
    """A unit of work, optionally belonging to a project and assigned to a member.

    The task references its project and member by id; it does not own them.
    """

    title: str = Field(..., min_length=1, description="Short task title")
    description: str = Field(default="", description="Longer description")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    status: TaskStatus = Field(default=TaskStatus.TODO)
    due_date: UtcDatetime | None = Field(default=None, description="Deadline (UTC)")
    created_date: UtcDatetime = Field(default_factory=utc_now)
    completed_date: UtcDatetime | None = Field(default=None, description="When the task was completed")
    project_id: UUID | None = Field(default=None, description="Owning project reference")
    assigned_to_member_id: UUID | None = Field(default=None, description="Assigned team member reference")
    tags: list[str] = Field(default_factory=list)
    attachments: list[str] = Field(default_factory=list, description="File paths or URLs")
    estimated_hours: float | None = None
    actual_hours: float | None = None
    notes: str = ""

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Whether the due date has passed and the task is not completed.

        Args:
            now: Reference time (defaults to the current UTC time)
        """
        if self.due_date is None:
            return False
        now = as_utc(now) if now else utc_now()
        return self.due_date < now and self.status != TaskStatus.COMPLETED

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def progress_percentage(self) -> float:
        return self.status.progress_fraction

    def completion_hours(self) -> float | None:
        """Hours between creation and completion, or None when not completed."""
        if self.status != TaskStatus.COMPLETED or self.completed_date is None:
            return None
        return (self.completed_date - self.created_date).total_seconds() / 3600
