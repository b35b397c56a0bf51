"""First-run sample data: a small team with two projects and four tasks."""

from datetime import datetime, timedelta
from typing import NamedTuple

from dateutil.relativedelta import relativedelta

from taskvantage.models import (
    Project,
    ProjectStatus,
    Task,
    TaskPriority,
    TaskStatus,
    TeamMember,
    TeamRole,
)


class SampleData(NamedTuple):
    tasks: list[Task]
    projects: list[Project]
    team_members: list[TeamMember]


def build_sample_data(now: datetime) -> SampleData:
    """Build the sample set relative to now.

    Metrics and stats are left at their defaults; the caller recomputes them
    once the entities are in the engine.
    """
    john = TeamMember(name="John Smith", email="john@company.com", role=TeamRole.PROJECT_MANAGER, join_date=now)
    sarah = TeamMember(name="Sarah Johnson", email="sarah@company.com", role=TeamRole.DEVELOPER, join_date=now)
    mike = TeamMember(name="Mike Wilson", email="mike@company.com", role=TeamRole.DESIGNER, join_date=now)
    lisa = TeamMember(name="Lisa Chen", email="lisa@company.com", role=TeamRole.ANALYST, join_date=now)

    mobile_app = Project(
        name="Mobile App Redesign",
        description="Complete redesign of the company mobile application with modern UI/UX",
        status=ProjectStatus.ACTIVE,
        start_date=now,
        created_date=now,
        estimated_end_date=now + relativedelta(months=3),
        team_member_ids=[john.id, sarah.id, mike.id],
        budget=50000,
    )
    web_platform = Project(
        name="Web Platform Integration",
        description="Integration of new analytics platform with existing web services",
        status=ProjectStatus.PLANNING,
        start_date=now,
        created_date=now,
        estimated_end_date=now + relativedelta(months=2),
        team_member_ids=[john.id, lisa.id],
        budget=30000,
    )

    tasks = [
        Task(
            title="Design new user interface",
            description="Create modern, intuitive interface designs for mobile app",
            priority=TaskPriority.HIGH,
            project_id=mobile_app.id,
            assigned_to_member_id=mike.id,
            created_date=now,
            due_date=now + timedelta(days=7),
            estimated_hours=40,
        ),
        Task(
            title="Implement user authentication",
            description="Develop secure authentication system with biometric support",
            priority=TaskPriority.CRITICAL,
            status=TaskStatus.IN_PROGRESS,
            project_id=mobile_app.id,
            assigned_to_member_id=sarah.id,
            created_date=now,
            due_date=now + timedelta(days=14),
            estimated_hours=32,
        ),
        Task(
            title="Analytics integration research",
            description="Research and document analytics platform integration requirements",
            priority=TaskPriority.MEDIUM,
            project_id=web_platform.id,
            assigned_to_member_id=lisa.id,
            created_date=now,
            due_date=now + timedelta(days=5),
            estimated_hours=16,
        ),
        Task(
            title="Database optimization",
            description="Optimize database queries for better performance",
            priority=TaskPriority.MEDIUM,
            status=TaskStatus.COMPLETED,
            project_id=web_platform.id,
            assigned_to_member_id=sarah.id,
            # Created a week back so the completion time is positive
            created_date=now - timedelta(days=7),
            completed_date=now - timedelta(days=2),
            due_date=now + timedelta(days=10),
            estimated_hours=24,
            actual_hours=20,
        ),
    ]

    return SampleData(tasks=tasks, projects=[mobile_app, web_platform], team_members=[john, sarah, mike, lisa])
