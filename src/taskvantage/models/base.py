"""Base entity model and common types."""

from datetime import datetime, timezone
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so comparisons never mix naive and aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class Entity(BaseModel):
    """Base model shared by tasks, projects and team members.

    Provides a stable UUID identity and the validation settings every
    entity uses. Entities reference each other by id only.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    id: UUID = Field(default_factory=uuid4, description="Stable unique identifier (UUID v4)")

    def copy_entity(self):
        """Return a deep copy that shares no mutable state with this entity."""
        return self.model_copy(deep=True)
