"""Pytest fixtures for the taskvantage tests."""

import logging
from collections.abc import Callable, Generator
from datetime import datetime, timezone

import pytest
from prometheus_client import CollectorRegistry

from taskvantage.config import Settings
from taskvantage.core.engine import AggregationEngine
from taskvantage.storage.kv_store import KeyValueStore
from taskvantage.storage.repository import DataRepository
from taskvantage.utils.metrics import Metrics
from tests.fixtures.factories import EntityFactory

FIXED_NOW = datetime(2026, 3, 16, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_factories() -> None:
    """Restart factory sequence numbers for every test."""
    EntityFactory.reset()


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used by the engine clock."""
    return FIXED_NOW


@pytest.fixture
def clock(now: datetime) -> Callable[[], datetime]:
    """Clock returning the fixed reference time."""
    return lambda: now


@pytest.fixture
def engine(clock: Callable[[], datetime]) -> AggregationEngine:
    """Empty engine with a fixed clock."""
    return AggregationEngine(clock=clock)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> Metrics:
    """Metrics bound to an isolated registry."""
    return Metrics(registry=registry)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a temporary data directory."""
    return Settings(
        data_dir=str(tmp_path / "data"),
        seed_sample_data=True,
        log_level="DEBUG",
        log_format="console",
        metrics_enabled=False,
    )


@pytest.fixture
def store() -> Generator[KeyValueStore, None, None]:
    """Initialized in-memory key-value store."""
    kv = KeyValueStore(":memory:")
    kv.initialize()
    yield kv
    kv.close()


@pytest.fixture
def repository(store: KeyValueStore, metrics: Metrics) -> DataRepository:
    """Repository over the in-memory store."""
    return DataRepository(store, metrics)


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Undo handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
