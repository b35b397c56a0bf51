"""Generated insight models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from taskvantage.models.base import UtcDatetime, utc_now


class InsightCategory(str, Enum):
    """Area an insight is about."""

    PERFORMANCE = "Performance"
    TEAM = "Team"
    TIMELINE = "Timeline"
    QUALITY = "Quality"
    WORKLOAD = "Workload"
    SKILLS = "Skills"


class InsightImpact(str, Enum):
    """How much an insight matters."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Insight(BaseModel):
    """A human-readable observation derived from current data.

    Insights have no identity: two insights with the same content and
    generation time are equal.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    category: InsightCategory
    impact: InsightImpact
    recommendation: str
    date_generated: UtcDatetime = Field(default_factory=utc_now)


class ProjectInsight(Insight):
    """Insight attached to a project."""


class TeamInsight(Insight):
    """Insight about the team as a whole."""


def insight_content(insights: list[Insight]) -> list[tuple[str, str, str, str, str]]:
    """Content of an insight list without generation timestamps."""
    return [
        (i.title, i.description, i.category.value, i.impact.value, i.recommendation)
        for i in insights
    ]
