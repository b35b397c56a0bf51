"""Integration test fixtures backed by a real SQLite file store.

Each test gets its own data directory under tmp_path. Apps built by
``make_app`` share that directory, so closing one and building another
simulates a restart.
"""

from collections.abc import Callable, Generator
from datetime import datetime

import pytest

from taskvantage.config import Settings
from taskvantage.services.app import TaskVantageApp


@pytest.fixture
def file_settings(tmp_path) -> Settings:
    """Settings for a file store in a temporary data directory."""
    return Settings(
        data_dir=str(tmp_path / "data"),
        seed_sample_data=True,
        log_level="WARNING",
        log_format="json",
        metrics_enabled=False,
    )


@pytest.fixture
def make_app(
    file_settings: Settings,
    clock: Callable[[], datetime],
) -> Generator[Callable[[], TaskVantageApp], None, None]:
    """Factory for started apps on the shared data directory; all are closed on teardown."""
    apps: list[TaskVantageApp] = []

    def _make() -> TaskVantageApp:
        app = TaskVantageApp(file_settings, clock=clock)
        app.start()
        apps.append(app)
        return app

    yield _make

    for app in apps:
        app.close()
