"""Persistence of the three collections and app flags in the key-value store.

Collections are stored as JSON arrays under fixed keys. Decode failures are
treated as "no prior data"; encode or write failures are logged and counted
but never raised, so an in-memory mutation is never blocked by storage.
"""

import json
import sqlite3
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from taskvantage.models import Project, Task, TeamMember
from taskvantage.storage.kv_store import KeyValueStore
from taskvantage.utils.logging import get_logger
from taskvantage.utils.metrics import Metrics

logger = get_logger(__name__)

TASKS_KEY = "TaskVantage_Tasks"
PROJECTS_KEY = "TaskVantage_Projects"
TEAM_MEMBERS_KEY = "TaskVantage_TeamMembers"
ONBOARDING_KEY = "TaskVantage_HasCompletedOnboarding"
USER_NAME_KEY = "TaskVantage_UserName"
USER_EMAIL_KEY = "TaskVantage_UserEmail"
USER_ROLE_KEY = "TaskVantage_UserRole"

COLLECTION_KEYS = (TASKS_KEY, PROJECTS_KEY, TEAM_MEMBERS_KEY)
PROFILE_KEYS = (USER_NAME_KEY, USER_EMAIL_KEY, USER_ROLE_KEY)

M = TypeVar("M", bound=BaseModel)

_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    TASKS_KEY: TypeAdapter(list[Task]),
    PROJECTS_KEY: TypeAdapter(list[Project]),
    TEAM_MEMBERS_KEY: TypeAdapter(list[TeamMember]),
}


class DataRepository:
    """Loads and saves tasks, projects and team members.

    Also keeps the onboarding flag and the user profile, and implements the
    "clear data" and "delete account" resets.
    """

    def __init__(self, store: KeyValueStore, metrics: Metrics | None = None) -> None:
        """Initialize repository.

        Args:
            store: Backing key-value store
            metrics: Optional metrics collector
        """
        self.store = store
        self._metrics = metrics

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def load_tasks(self) -> list[Task]:
        return self._load(TASKS_KEY)

    def load_projects(self) -> list[Project]:
        return self._load(PROJECTS_KEY)

    def load_team_members(self) -> list[TeamMember]:
        return self._load(TEAM_MEMBERS_KEY)

    def save_tasks(self, tasks: list[Task]) -> bool:
        return self._save(TASKS_KEY, tasks)

    def save_projects(self, projects: list[Project]) -> bool:
        return self._save(PROJECTS_KEY, projects)

    def save_team_members(self, members: list[TeamMember]) -> bool:
        return self._save(TEAM_MEMBERS_KEY, members)

    def save_all(self, tasks: list[Task], projects: list[Project], members: list[TeamMember]) -> bool:
        """Save all three collections. Returns False if any save failed."""
        results = [
            self.save_tasks(tasks),
            self.save_projects(projects),
            self.save_team_members(members),
        ]
        return all(results)

    def _load(self, key: str) -> list[Any]:
        try:
            raw = self.store.get(key)
        except sqlite3.Error as e:
            logger.warning("collection_read_failed", key=key, error=str(e))
            self._record("load", "error")
            return []

        if raw is None:
            return []

        try:
            items = _ADAPTERS[key].validate_json(raw)
        except ValidationError as e:
            # Undecodable data is treated as no prior data
            logger.warning("collection_decode_failed", key=key, errors=e.error_count())
            self._record("load", "error")
            return []

        self._record("load", "success")
        logger.debug("collection_loaded", key=key, count=len(items))
        return items

    def _save(self, key: str, items: list[M]) -> bool:
        try:
            payload = _ADAPTERS[key].dump_json(items).decode("utf-8")
            self.store.set(key, payload)
        except (sqlite3.Error, ValueError, TypeError) as e:
            logger.error("collection_save_failed", key=key, error=str(e))
            self._record("save", "error")
            return False

        self._record("save", "success")
        return True

    # ------------------------------------------------------------------
    # Flags and profile
    # ------------------------------------------------------------------

    def has_completed_onboarding(self) -> bool:
        return self.store.get(ONBOARDING_KEY) == "true"

    def set_onboarding_completed(self, completed: bool = True) -> None:
        self.store.set(ONBOARDING_KEY, "true" if completed else "false")

    def save_user_profile(self, name: str, email: str, role: str) -> None:
        self.store.set(USER_NAME_KEY, name)
        self.store.set(USER_EMAIL_KEY, email)
        self.store.set(USER_ROLE_KEY, role)

    def load_user_profile(self) -> dict[str, str | None]:
        return {
            "name": self.store.get(USER_NAME_KEY),
            "email": self.store.get(USER_EMAIL_KEY),
            "role": self.store.get(USER_ROLE_KEY),
        }

    # ------------------------------------------------------------------
    # Resets and export
    # ------------------------------------------------------------------

    def clear_all_data(self) -> None:
        """Remove the three collections, keeping the account."""
        for key in COLLECTION_KEYS:
            self.store.delete(key)
        self._record("delete", "success")
        logger.info("all_data_cleared")

    def delete_account(self) -> None:
        """Remove collections and profile and reset the first-run state."""
        for key in (*COLLECTION_KEYS, *PROFILE_KEYS, ONBOARDING_KEY):
            self.store.delete(key)
        self._record("delete", "success")
        logger.info("account_deleted")

    def export_data(self, tasks: list[Task], projects: list[Project], members: list[TeamMember]) -> dict[str, Any]:
        """JSON-ready snapshot of the three collections."""
        return {
            "tasks": json.loads(_ADAPTERS[TASKS_KEY].dump_json(tasks)),
            "projects": json.loads(_ADAPTERS[PROJECTS_KEY].dump_json(projects)),
            "team_members": json.loads(_ADAPTERS[TEAM_MEMBERS_KEY].dump_json(members)),
        }

    def _record(self, operation: str, status: str) -> None:
        if self._metrics:
            self._metrics.record_storage(operation, status)
