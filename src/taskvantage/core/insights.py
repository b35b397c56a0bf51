"""Insight generation rules.

Three rule sets exist:

- ``generate_project_insights``: stored on the project, rebuilt on every
  metrics recompute.
- ``review_project_insights``: an on-demand project review with its own
  thresholds (tasks per member > 15 rather than > 10).
- ``generate_team_insights``: observations about the whole team.

Each call builds its list from scratch; triggers are independent of one
another and of input order.
"""

from collections.abc import Sequence
from datetime import datetime

from taskvantage.models import (
    InsightCategory,
    InsightImpact,
    Project,
    ProjectInsight,
    ProjectStatus,
    Task,
    TeamInsight,
    TeamMember,
)

# Project-level rule thresholds
LOW_COMPLETION_THRESHOLD = 50.0
PROJECT_TASK_LOAD_THRESHOLD = 10.0

# Review thresholds
REVIEW_TASK_LOAD_THRESHOLD = 15.0
LOW_PROGRESS_THRESHOLD = 25.0
APPROACHING_DEADLINE_DAYS = 7
MANY_OVERDUE_TASKS = 5

# Team thresholds
LOW_PRODUCTIVITY_THRESHOLD = 50.0
MEMBER_OVERLOAD_THRESHOLD = 15
MIN_SKILLS_PER_MEMBER = 2.0
SMALL_TEAM_SIZE = 3


def tasks_per_member(task_count: int, team_size: int) -> float:
    return task_count / max(team_size, 1)


def generate_project_insights(project: Project, now: datetime) -> list[ProjectInsight]:
    """Build the insight list stored on a project from its current metrics.

    Args:
        project: Project with freshly recomputed metrics
        now: Reference time for the overdue check and generation timestamp

    Returns:
        New list of insights
    """
    insights: list[ProjectInsight] = []

    completion_rate = project.metrics.completion_percentage
    if completion_rate < LOW_COMPLETION_THRESHOLD:
        insights.append(
            ProjectInsight(
                title="Low Completion Rate",
                description=f"Project completion rate is {completion_rate:.1f}%",
                category=InsightCategory.PERFORMANCE,
                impact=InsightImpact.HIGH,
                recommendation="Consider redistributing tasks or extending timeline",
                date_generated=now,
            )
        )

    if project.is_overdue(now):
        insights.append(
            ProjectInsight(
                title="Project Overdue",
                description="Project has exceeded its estimated completion date",
                category=InsightCategory.TIMELINE,
                impact=InsightImpact.HIGH,
                recommendation="Review timeline and adjust scope or resources",
                date_generated=now,
            )
        )

    load = tasks_per_member(project.metrics.total_tasks, project.team_size)
    if load > PROJECT_TASK_LOAD_THRESHOLD:
        insights.append(
            ProjectInsight(
                title="High Task Load",
                description=f"Average of {load:.1f} tasks per team member",
                category=InsightCategory.TEAM,
                impact=InsightImpact.MEDIUM,
                recommendation="Consider adding more team members or reducing scope",
                date_generated=now,
            )
        )

    return insights


def review_project_insights(
    project: Project,
    tasks: Sequence[Task],
    now: datetime,
) -> list[ProjectInsight]:
    """Produce the on-demand project review shown in project analytics.

    Not stored on the project.

    Args:
        project: Project under review
        tasks: Tasks referencing the project
        now: Reference time

    Returns:
        New list of insights
    """
    insights: list[ProjectInsight] = []
    days_remaining = project.days_remaining(now)

    if project.is_overdue(now):
        insights.append(
            ProjectInsight(
                title="Project Overdue",
                description=(
                    f"This project has exceeded its estimated completion date by {-days_remaining} days"
                ),
                category=InsightCategory.TIMELINE,
                impact=InsightImpact.HIGH,
                recommendation="Consider extending the timeline or reducing scope to get back on track",
                date_generated=now,
            )
        )
    elif 0 < days_remaining <= APPROACHING_DEADLINE_DAYS:
        insights.append(
            ProjectInsight(
                title="Approaching Deadline",
                description=f"Project deadline is in {days_remaining} days",
                category=InsightCategory.TIMELINE,
                impact=InsightImpact.MEDIUM,
                recommendation="Focus on critical tasks and ensure team is aware of approaching deadline",
                date_generated=now,
            )
        )

    completion_rate = project.metrics.completion_percentage
    if completion_rate < LOW_PROGRESS_THRESHOLD and project.status == ProjectStatus.ACTIVE:
        insights.append(
            ProjectInsight(
                title="Low Progress",
                description=f"Project completion is only {completion_rate:.1f}%",
                category=InsightCategory.PERFORMANCE,
                impact=InsightImpact.HIGH,
                recommendation=(
                    "Review project scope and team allocation. Consider breaking down tasks further"
                ),
                date_generated=now,
            )
        )

    load = tasks_per_member(len(tasks), project.team_size)
    if load > REVIEW_TASK_LOAD_THRESHOLD:
        insights.append(
            ProjectInsight(
                title="High Task Load",
                description=f"Average of {load:.1f} tasks per team member",
                category=InsightCategory.TEAM,
                impact=InsightImpact.MEDIUM,
                recommendation="Consider adding more team members or redistributing tasks",
                date_generated=now,
            )
        )

    overdue = sum(1 for t in tasks if t.is_overdue(now))
    if overdue > 0:
        insights.append(
            ProjectInsight(
                title="Overdue Tasks",
                description=f"{overdue} tasks are overdue",
                category=InsightCategory.QUALITY,
                impact=InsightImpact.HIGH if overdue > MANY_OVERDUE_TASKS else InsightImpact.MEDIUM,
                recommendation="Address overdue tasks immediately and review task estimation process",
                date_generated=now,
            )
        )

    return insights


def generate_team_insights(members: Sequence[TeamMember], now: datetime) -> list[TeamInsight]:
    """Produce observations about the whole team.

    Args:
        members: All team members
        now: Generation timestamp

    Returns:
        New list of insights
    """
    insights: list[TeamInsight] = []

    low_performers = [m for m in members if m.is_active and m.stats.productivity_score < LOW_PRODUCTIVITY_THRESHOLD]
    if low_performers:
        insights.append(
            TeamInsight(
                title="Low Productivity Alert",
                description=f"{len(low_performers)} team members have productivity scores below 50%",
                category=InsightCategory.PERFORMANCE,
                impact=InsightImpact.MEDIUM,
                recommendation="Consider one-on-one meetings to identify blockers and provide support",
                date_generated=now,
            )
        )

    overloaded = [m for m in members if m.is_active and m.stats.tasks_assigned > MEMBER_OVERLOAD_THRESHOLD]
    if overloaded:
        insights.append(
            TeamInsight(
                title="Workload Imbalance",
                description=f"{len(overloaded)} team members have more than 15 assigned tasks",
                category=InsightCategory.WORKLOAD,
                impact=InsightImpact.HIGH,
                recommendation="Redistribute tasks or consider hiring additional team members",
                date_generated=now,
            )
        )

    distinct_skills = {skill for m in members for skill in m.skills}
    skill_coverage = len(distinct_skills) / max(len(members), 1)
    if skill_coverage < MIN_SKILLS_PER_MEMBER:
        insights.append(
            TeamInsight(
                title="Limited Skill Diversity",
                description=f"Team has limited skill diversity with {skill_coverage:.1f} skills per member",
                category=InsightCategory.SKILLS,
                impact=InsightImpact.MEDIUM,
                recommendation="Consider cross-training or hiring members with complementary skills",
                date_generated=now,
            )
        )

    if len(members) < SMALL_TEAM_SIZE:
        insights.append(
            TeamInsight(
                title="Small Team Size",
                description=f"Team has only {len(members)} members",
                category=InsightCategory.TEAM,
                impact=InsightImpact.LOW,
                recommendation="Consider expanding the team for better project coverage",
                date_generated=now,
            )
        )

    return insights
