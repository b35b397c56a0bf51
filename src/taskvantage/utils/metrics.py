"""Prometheus metrics for engine and storage operations."""

from functools import lru_cache

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, Info

from taskvantage import __version__


class Metrics:
    """Prometheus metrics for the task engine."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize all metrics.

        Args:
            registry: Collector registry (defaults to the global registry)
        """
        registry = registry or REGISTRY

        self.info = Info(
            "taskvantage",
            "TaskVantage engine information",
            registry=registry,
        )
        self.info.info({"version": __version__})

        # Engine mutations
        self.engine_operations_total = Counter(
            "engine_operations_total",
            "Total number of engine mutations",
            ["operation", "entity"],
            registry=registry,
        )

        self.recompute_duration_seconds = Histogram(
            "recompute_duration_seconds",
            "Duration of metrics/stats recomputation in seconds",
            ["target"],
            buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
            registry=registry,
        )

        self.entity_count = Gauge(
            "entity_count",
            "Current number of entities by collection",
            ["entity"],
            registry=registry,
        )

        # Storage
        self.storage_operations_total = Counter(
            "storage_operations_total",
            "Total number of key-value store operations",
            ["operation", "status"],
            registry=registry,
        )

    def record_operation(self, operation: str, entity: str) -> None:
        """Record an engine mutation.

        Args:
            operation: Operation name (add, update, delete)
            entity: Entity kind (task, project, team_member)
        """
        self.engine_operations_total.labels(operation=operation, entity=entity).inc()

    def record_recompute(self, target: str, duration: float) -> None:
        """Record a recompute duration.

        Args:
            target: What was recomputed (project, member)
            duration: Duration in seconds
        """
        self.recompute_duration_seconds.labels(target=target).observe(duration)

    def set_entity_counts(self, tasks: int, projects: int, team_members: int) -> None:
        """Update the collection size gauges."""
        self.entity_count.labels(entity="task").set(tasks)
        self.entity_count.labels(entity="project").set(projects)
        self.entity_count.labels(entity="team_member").set(team_members)

    def record_storage(self, operation: str, status: str) -> None:
        """Record a storage operation.

        Args:
            operation: Operation name (load, save, delete)
            status: Operation status (success, error)
        """
        self.storage_operations_total.labels(operation=operation, status=status).inc()


@lru_cache
def get_metrics() -> Metrics:
    """Get cached metrics instance."""
    return Metrics()
