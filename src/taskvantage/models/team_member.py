"""Team member model, role enum and derived stats."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from taskvantage.models.base import Entity, UtcDatetime, utc_now


class TeamRole(str, Enum):
    """Team roles, ordered from owner down to member."""

    OWNER = "Owner"
    PROJECT_MANAGER = "Project Manager"
    DEVELOPER = "Developer"
    DESIGNER = "Designer"
    ANALYST = "Analyst"
    TESTER = "Tester"
    MEMBER = "Member"

    @property
    def ordinal(self) -> int:
        """Position in the role sort order."""
        return ROLE_ORDER[self]


ROLE_ORDER: dict[TeamRole, int] = {role: index for index, role in enumerate(TeamRole, start=1)}


class TeamMemberStats(BaseModel):
    """Statistics derived from the tasks assigned to a member."""

    model_config = ConfigDict(validate_assignment=True)

    tasks_assigned: int = 0
    tasks_completed: int = 0
    average_completion_time: float = Field(default=0.0, description="Mean hours from creation to completion")
    productivity_score: float = 0.0
    projects_involved: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def completion_rate(self) -> float:
        if self.tasks_assigned == 0:
            return 0.0
        return self.tasks_completed / self.tasks_assigned * 100.0


class TeamMember(Entity):
    """A person who can be assigned tasks and join projects."""

    name: str = Field(..., min_length=1, description="Full name")
    email: str = Field(..., description="Email address")
    role: TeamRole = Field(default=TeamRole.MEMBER)
    avatar_image_name: str | None = None
    join_date: UtcDatetime = Field(default_factory=utc_now)
    is_active: bool = True
    skills: list[str] = Field(default_factory=list)
    stats: TeamMemberStats = Field(default_factory=TeamMemberStats)
    notes: str = ""
    phone_number: str | None = None
    department: str | None = None

    @property
    def initials(self) -> str:
        parts = self.name.split()
        first = parts[0][:1].upper()
        last = parts[-1][:1].upper() if len(parts) > 1 else ""
        return first + last
