"""CLI entry point for taskvantage.

Drives the aggregation engine against the local store. Every command loads
the persisted collections, applies its change (if any) and prints JSON.

Usage:
    taskvantage tasks --sort Priority          # List tasks
    taskvantage add-task --title "Write docs"  # Add a task
    taskvantage capture notes.txt              # Turn text lines into tasks
    taskvantage insights                       # Project and team insights
    taskvantage init-config                    # Create config file
    taskvantage --help                         # Show help
"""

import contextlib
import json
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any, NoReturn

import click
from dateutil import parser as date_parser
from pydantic import BaseModel, ValidationError

from taskvantage import __version__
from taskvantage.config import (
    get_config_path,
    get_default_config,
    load_settings_with_toml,
)
from taskvantage.core import analytics
from taskvantage.core.engine import AggregationEngine
from taskvantage.core.insights import generate_team_insights, review_project_insights
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
from taskvantage.models import (
    Project,
    ProjectStatus,
    Task,
    TaskPriority,
    TaskStatus,
    TeamMember,
    TeamRole,
    as_utc,
)
from taskvantage.services.app import TaskVantageApp
from taskvantage.services.text_capture import capture_text_into_engine
from taskvantage.storage.kv_store import StorageError
from taskvantage.utils.logging import setup_logging


class ErrorCategory:
    """Error categories for clear error messages."""

    CONFIGURATION = "configuration"
    STORAGE = "storage"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


def format_error(category: str, message: str, remediation: str) -> str:
    """Format error with category and remediation.

    Args:
        category: Error category
        message: Error message
        remediation: Suggested fix

    Returns:
        Formatted error string
    """
    return f"""
Error [{category.upper()}]: {message}

Remediation: {remediation}
"""


def fail(category: str, message: str, remediation: str) -> NoReturn:
    click.echo(format_error(category, message, remediation), err=True)
    sys.exit(1)


def emit(data: Any) -> None:
    """Print data as indented JSON."""
    click.echo(json.dumps(data, indent=2, default=str))


def dump(items: list[BaseModel]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


def _choice(enum_cls: type) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


def _enum_value(enum_cls: type, value: str | None) -> Any:
    """Map a case-insensitive choice back to its enum member."""
    if value is None:
        return None
    for member in enum_cls:
        if member.value.casefold() == value.casefold():
            return member
    raise click.BadParameter(f"Unknown value: {value}")


@contextlib.contextmanager
def open_engine(ctx: click.Context) -> Iterator[tuple[TaskVantageApp, AggregationEngine]]:
    """Load settings, configure logging and start the app for one command."""
    options = ctx.obj
    config_path = options.get("config_path")
    try:
        settings = load_settings_with_toml(
            Path(config_path) if config_path else None,
            data_dir=options.get("data_dir"),
            log_level=options.get("log_level"),
        )
    except ValidationError as e:
        fail(
            ErrorCategory.CONFIGURATION,
            "Invalid configuration",
            f"Check the config file and TASKVANTAGE_* environment variables.\n\nDetails: {e}",
        )

    # Logs go to stderr so stdout stays valid JSON
    setup_logging(settings, use_stderr=True)

    app = TaskVantageApp(settings)
    try:
        engine = app.start()
    except StorageError as e:
        fail(
            ErrorCategory.STORAGE,
            f"Cannot open the data store at {settings.store_path}",
            f"Check that the data directory is writable or pass --data-dir.\n\nDetails: {e}",
        )

    try:
        yield app, engine
    finally:
        app.close()


def find_task(engine: AggregationEngine, task_id: str) -> Task:
    """Resolve a task by full id or unique id prefix."""
    matches = [t for t in engine.tasks if str(t.id).startswith(task_id.lower())]
    if len(matches) != 1:
        fail(
            ErrorCategory.NOT_FOUND,
            f"No unique task matches '{task_id}'",
            "List task ids with: taskvantage tasks",
        )
    return matches[0]


def find_project(engine: AggregationEngine, ref: str) -> Project:
    """Resolve a project by id or case-insensitive name."""
    for project in engine.projects:
        if str(project.id) == ref.lower() or project.name.casefold() == ref.casefold():
            return project
    fail(ErrorCategory.NOT_FOUND, f"No project named '{ref}'", "List projects with: taskvantage projects")


def find_member(engine: AggregationEngine, ref: str) -> TeamMember:
    """Resolve a team member by id, name or email."""
    for member in engine.team_members:
        if ref.lower() == str(member.id) or ref.casefold() in (member.name.casefold(), member.email.casefold()):
            return member
    fail(ErrorCategory.NOT_FOUND, f"No team member named '{ref}'", "List members with: taskvantage team")


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=False),
    help="Override global config file path",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Override the data directory holding the store",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Override log level",
)
@click.version_option(version=__version__, prog_name="taskvantage")
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    data_dir: str | None,
    log_level: str | None,
) -> None:
    """TaskVantage task, project and team manager.

    Configuration is loaded from (in priority order):
    1. CLI arguments
    2. Environment variables (TASKVANTAGE_*)
    3. Global config file (~/.config/taskvantage/config.toml)
    4. Built-in defaults
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["data_dir"] = data_dir
    ctx.obj["log_level"] = log_level


@main.command()
@click.pass_context
def init_config(ctx: click.Context) -> None:
    """Create global configuration file with defaults.

    The file is created with restrictive permissions (600).
    """
    import tomli_w

    config_path = Path(ctx.obj.get("config_path") or get_config_path())

    if config_path.exists():
        click.echo(f"Config file already exists: {config_path}")
        if not click.confirm("Overwrite?"):
            sys.exit(0)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(get_default_config(), f)

    # chmod may not be supported on Windows
    with contextlib.suppress(OSError):
        config_path.chmod(0o600)

    click.echo(f"Created config file: {config_path}")


# =============================================================================
# Listing
# =============================================================================


@main.command()
@click.option("--search", default="", help="Match title, description or tags")
@click.option("--priority", type=_choice(TaskPriority), help="Only this priority")
@click.option("--status", type=_choice(TaskStatus), help="Only this status")
@click.option("--project", "project_ref", help="Only tasks of this project (name or id)")
@click.option("--hide-completed", is_flag=True, help="Hide completed tasks")
@click.option("--sort", "sort_by", type=_choice(TaskSortOption), default=TaskSortOption.DUE_DATE.value)
@click.pass_context
def tasks(
    ctx: click.Context,
    search: str,
    priority: str | None,
    status: str | None,
    project_ref: str | None,
    hide_completed: bool,
    sort_by: str,
) -> None:
    """List tasks."""
    with open_engine(ctx) as (_, engine):
        project_id = find_project(engine, project_ref).id if project_ref else None
        selected = filter_tasks(
            engine.tasks,
            query=search,
            priority=_enum_value(TaskPriority, priority),
            status=_enum_value(TaskStatus, status),
            project_id=project_id,
            show_completed=not hide_completed,
        )
        emit(dump(sort_tasks(selected, _enum_value(TaskSortOption, sort_by))))


@main.command()
@click.option("--search", default="", help="Match name, description or tags")
@click.option("--status", type=_choice(ProjectStatus), help="Only this status")
@click.option("--sort", "sort_by", type=_choice(ProjectSortOption), default=ProjectSortOption.DUE_DATE.value)
@click.pass_context
def projects(ctx: click.Context, search: str, status: str | None, sort_by: str) -> None:
    """List projects with their metrics."""
    with open_engine(ctx) as (_, engine):
        selected = filter_projects(engine.projects, query=search, status=_enum_value(ProjectStatus, status))
        emit(dump(sort_projects(selected, _enum_value(ProjectSortOption, sort_by))))


@main.command()
@click.option("--search", default="", help="Match name, email, skills or department")
@click.option("--role", type=_choice(TeamRole), help="Only this role")
@click.option("--show-inactive", is_flag=True, help="Include inactive members")
@click.option("--sort", "sort_by", type=_choice(TeamSortOption), default=TeamSortOption.NAME.value)
@click.pass_context
def team(ctx: click.Context, search: str, role: str | None, show_inactive: bool, sort_by: str) -> None:
    """List team members with their stats."""
    with open_engine(ctx) as (_, engine):
        selected = filter_members(
            engine.team_members,
            query=search,
            role=_enum_value(TeamRole, role),
            show_inactive=show_inactive,
        )
        emit(dump(sort_members(selected, _enum_value(TeamSortOption, sort_by))))


@main.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Summary statistics for tasks, projects and the team."""
    with open_engine(ctx) as (_, engine):
        now = engine.now()
        emit(
            {
                "tasks": analytics.summarize_tasks(engine.tasks, now).model_dump(),
                "projects": analytics.summarize_projects(engine.projects, now).model_dump(),
                "team": analytics.summarize_team(engine.team_members).model_dump(),
            }
        )


@main.command()
@click.pass_context
def insights(ctx: click.Context) -> None:
    """Stored project insights, project reviews and team insights."""
    with open_engine(ctx) as (_, engine):
        now = engine.now()
        emit(
            {
                "projects": [
                    {
                        "project": project.name,
                        "insights": dump(project.insights),
                        "review": dump(review_project_insights(project, engine.get_tasks_for_project(project.id), now)),
                    }
                    for project in engine.projects
                ],
                "team": dump(generate_team_insights(engine.team_members, now)),
            }
        )


# =============================================================================
# Mutations
# =============================================================================


@main.command()
@click.option("--title", required=True, help="Task title")
@click.option("--description", default="", help="Task description")
@click.option("--priority", type=_choice(TaskPriority), default=TaskPriority.MEDIUM.value)
@click.option("--project", "project_ref", help="Project name or id")
@click.option("--assignee", help="Team member name, email or id")
@click.option("--due", help="Due date, e.g. 2026-11-30")
@click.option("--estimate", type=float, help="Estimated hours")
@click.pass_context
def add_task(
    ctx: click.Context,
    title: str,
    description: str,
    priority: str,
    project_ref: str | None,
    assignee: str | None,
    due: str | None,
    estimate: float | None,
) -> None:
    """Add a task and recompute its project and assignee."""
    with open_engine(ctx) as (_, engine):
        try:
            due_date = as_utc(date_parser.parse(due)) if due else None
        except (ValueError, OverflowError):
            fail(ErrorCategory.VALIDATION, f"Cannot parse due date '{due}'", "Use a date such as 2026-11-30")

        try:
            task = Task(
                title=title,
                description=description,
                priority=_enum_value(TaskPriority, priority),
                project_id=find_project(engine, project_ref).id if project_ref else None,
                assigned_to_member_id=find_member(engine, assignee).id if assignee else None,
                due_date=due_date,
                created_date=engine.now(),
                estimated_hours=estimate,
            )
        except ValidationError as e:
            fail(ErrorCategory.VALIDATION, "Invalid task", f"Details: {e}")

        emit(engine.add_task(task).model_dump(mode="json"))


@main.command()
@click.argument("task_id")
@click.pass_context
def complete_task(ctx: click.Context, task_id: str) -> None:
    """Mark a task completed (TASK_ID may be a unique prefix)."""
    with open_engine(ctx) as (_, engine):
        task = find_task(engine, task_id)
        if task.is_completed:
            click.echo(f"Task already completed: {task.title}", err=True)
            emit(task.model_dump(mode="json"))
            return
        updated = engine.toggle_task_completion(task)
        emit(updated.model_dump(mode="json") if updated else None)


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@click.pass_context
def capture(ctx: click.Context, source: Any) -> None:
    """Create tasks from the lines of a text file (or stdin)."""
    text = source.read()
    with open_engine(ctx) as (_, engine):
        emit(dump(capture_text_into_engine(engine, text)))


# =============================================================================
# Data management
# =============================================================================


@main.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file instead of stdout")
@click.pass_context
def export(ctx: click.Context, output: str | None) -> None:
    """Export tasks, projects and team members as JSON."""
    with open_engine(ctx) as (app, _):
        data = app.export_data()
    if output:
        Path(output).write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        click.echo(f"Exported to {output}", err=True)
    else:
        emit(data)


@main.command()
@click.confirmation_option(prompt="Remove all tasks, projects and team members?")
@click.pass_context
def clear_data(ctx: click.Context) -> None:
    """Remove all tasks, projects and team members, keeping the account."""
    with open_engine(ctx) as (app, _):
        app.clear_all_data()
    click.echo("All data cleared")


@main.command()
@click.confirmation_option(prompt="Permanently delete your account and all data?")
@click.pass_context
def delete_account(ctx: click.Context) -> None:
    """Delete all data and the user profile, resetting to first run."""
    with open_engine(ctx) as (app, _):
        app.delete_account()
    click.echo("Account deleted")


if __name__ == "__main__":
    main()
