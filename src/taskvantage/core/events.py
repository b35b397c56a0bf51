"""Change notification for the aggregation engine."""

import contextlib
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from taskvantage.models import utc_now
from taskvantage.utils.logging import get_logger

logger = get_logger(__name__)

TASKS = "tasks"
PROJECTS = "projects"
TEAM_MEMBERS = "team_members"
ALL_COLLECTIONS = frozenset({TASKS, PROJECTS, TEAM_MEMBERS})


@dataclass(frozen=True)
class CollectionsChanged:
    """Published after a mutation and all of its recomputation have completed.

    Attributes:
        operation: Engine operation that caused the change (e.g. "add_task")
        collections: Names of the collections whose contents changed
        timestamp: When the change was published
    """

    operation: str
    collections: frozenset[str]
    timestamp: datetime = field(default_factory=utc_now)

    def touches(self, collection: str) -> bool:
        return collection in self.collections


ChangeHandler = Callable[[CollectionsChanged], None]


class ChangeNotifier:
    """Synchronous observer list.

    Handlers are called in subscription order. A failing handler is logged and
    skipped so the remaining handlers still see the change.
    """

    def __init__(self) -> None:
        self._handlers: list[ChangeHandler] = []

    def subscribe(self, handler: ChangeHandler) -> Callable[[], None]:
        """Register a handler.

        Args:
            handler: Called with each CollectionsChanged event

        Returns:
            Callable that removes the handler again
        """
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, event: CollectionsChanged) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "change_handler_failed",
                    operation=event.operation,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
                )

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
