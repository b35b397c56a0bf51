"""Test fixtures: entity factories."""

from tests.fixtures.factories import (
    EntityFactory,
    ProjectFactory,
    TaskFactory,
    TeamMemberFactory,
)

__all__ = [
    "EntityFactory",
    "ProjectFactory",
    "TaskFactory",
    "TeamMemberFactory",
]
