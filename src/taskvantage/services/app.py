"""Application wiring: store, repository, engine and the persist-on-change hook."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from taskvantage.config import Settings, get_settings
from taskvantage.core.engine import AggregationEngine
from taskvantage.core.events import PROJECTS, TASKS, TEAM_MEMBERS, CollectionsChanged
from taskvantage.services.sample_data import build_sample_data
from taskvantage.storage.kv_store import KeyValueStore
from taskvantage.storage.repository import DataRepository
from taskvantage.utils.logging import get_logger
from taskvantage.utils.metrics import Metrics, get_metrics

logger = get_logger(__name__)


class TaskVantageApp:
    """Owns the store and the engine for one data directory.

    Startup loads the persisted collections, seeds the sample set on first
    run (no data and onboarding not completed), recomputes every derived
    value and then persists. From then on each engine change is written back
    to the store.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
        metrics: Metrics | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        """Initialize the app.

        Args:
            settings: Settings (defaults to the cached global settings)
            clock: Clock passed to the engine
            metrics: Metrics collector (defaults to the global one when enabled)
            store: Key-value store (defaults to the file under data_dir)
        """
        self.settings = settings or get_settings()
        if metrics is None and self.settings.metrics_enabled:
            metrics = get_metrics()
        self._metrics = metrics
        self._clock = clock
        self.store = store or KeyValueStore(self.settings.store_path)
        self.repository = DataRepository(self.store, metrics)
        self._engine: AggregationEngine | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def engine(self) -> AggregationEngine:
        if self._engine is None:
            self.start()
        assert self._engine is not None
        return self._engine

    def start(self) -> AggregationEngine:
        """Open the store, load data and build the engine.

        Raises:
            StorageError: If the store cannot be opened
        """
        if self._engine is not None:
            return self._engine

        self.store.initialize()
        tasks = self.repository.load_tasks()
        projects = self.repository.load_projects()
        members = self.repository.load_team_members()

        engine = AggregationEngine(
            tasks=tasks,
            projects=projects,
            team_members=members,
            clock=self._clock,
            metrics=self._metrics,
        )

        first_run = not (tasks or projects or members) and not self.repository.has_completed_onboarding()
        seeded = False
        if first_run and self.settings.seed_sample_data:
            sample = build_sample_data(engine.now())
            engine.replace_all(sample.tasks, sample.projects, sample.team_members)
            seeded = True
        else:
            engine.recompute_all()

        self._unsubscribe = engine.subscribe(self._persist)
        self._engine = engine
        self.repository.save_all(engine.tasks, engine.projects, engine.team_members)
        if first_run:
            self.repository.set_onboarding_completed()

        logger.info(
            "app_started",
            store=str(self.store.path),
            seeded=seeded,
            tasks=len(engine.tasks),
            projects=len(engine.projects),
            team_members=len(engine.team_members),
        )
        return engine

    def _persist(self, event: CollectionsChanged) -> None:
        engine = self._engine
        if engine is None:
            return
        if event.touches(TASKS):
            self.repository.save_tasks(engine.tasks)
        if event.touches(PROJECTS):
            self.repository.save_projects(engine.projects)
        if event.touches(TEAM_MEMBERS):
            self.repository.save_team_members(engine.team_members)

    def export_data(self) -> dict[str, Any]:
        engine = self.engine
        return self.repository.export_data(engine.tasks, engine.projects, engine.team_members)

    def clear_all_data(self) -> None:
        """Empty the collections, keeping the account profile."""
        self.engine.clear()
        self.repository.clear_all_data()

    def delete_account(self) -> None:
        """Empty the collections and reset the account to its first-run state."""
        self.engine.clear()
        self.repository.delete_account()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._engine = None
        self.store.close()
        logger.debug("app_closed")

    def __enter__(self) -> "TaskVantageApp":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
