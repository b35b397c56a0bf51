"""Built-in project templates."""

from pydantic import BaseModel, Field

from taskvantage.models import TaskPriority


class TaskTemplate(BaseModel):
    """Task skeleton included in a project template."""

    title: str
    priority: TaskPriority
    estimated_hours: float | None = None


class ProjectTemplate(BaseModel):
    """Starting point for a new project.

    Attributes:
        name: Project name
        description: Project description
        estimated_duration: Planned length in days
        tags: Tags copied onto the project
        color: Hex colour copied onto the project
        task_templates: Suggested tasks
    """

    name: str
    description: str
    estimated_duration: int = Field(..., ge=0, description="Planned duration in days")
    tags: list[str] = Field(default_factory=list)
    color: str = "#3cc45b"
    task_templates: list[TaskTemplate] = Field(default_factory=list)


DEFAULT_TEMPLATES: list[ProjectTemplate] = [
    ProjectTemplate(
        name="Mobile App Development",
        description="Complete mobile application development project",
        estimated_duration=90,
        tags=["Mobile", "Development", "iOS"],
        color="#3cc45b",
        task_templates=[
            TaskTemplate(title="UI/UX Design", priority=TaskPriority.HIGH),
            TaskTemplate(title="Backend API Development", priority=TaskPriority.HIGH),
            TaskTemplate(title="Frontend Implementation", priority=TaskPriority.MEDIUM),
            TaskTemplate(title="Testing & QA", priority=TaskPriority.MEDIUM),
            TaskTemplate(title="App Store Submission", priority=TaskPriority.LOW),
        ],
    ),
    ProjectTemplate(
        name="Website Redesign",
        description="Complete website redesign and development",
        estimated_duration=60,
        tags=["Web", "Design", "Frontend"],
        color="#fcc418",
        task_templates=[
            TaskTemplate(title="Design Mockups", priority=TaskPriority.HIGH),
            TaskTemplate(title="Frontend Development", priority=TaskPriority.HIGH),
            TaskTemplate(title="Content Migration", priority=TaskPriority.MEDIUM),
            TaskTemplate(title="SEO Optimization", priority=TaskPriority.MEDIUM),
            TaskTemplate(title="Launch & Testing", priority=TaskPriority.LOW),
        ],
    ),
]


def get_template(name: str) -> ProjectTemplate | None:
    """Look up a built-in template by name (case-insensitive)."""
    for template in DEFAULT_TEMPLATES:
        if template.name.lower() == name.lower():
            return template
    return None
