"""Change notifications emitted after successful writes"""
from collections import defaultdict
from enum import Enum
from typing import Any, Callable

from app.logging_setup import get_logger

logger = get_logger(__name__)


class Event(str, Enum):
    """Named change events"""
    MERCHANTS_CHANGED = "merchantsChanged"
    TRANSACTION_ADDED = "transactionAdded"
    TRANSACTION_UPDATED = "transactionUpdated"
    TRANSACTION_DELETED = "transactionDeleted"
    CATEGORIES_CHANGED = "categoriesChanged"


Handler = Callable[[Event, Any], None]


class EventEmitter:
    """
    In-process emitter owned by the service container.

    Services emit, presentation layers subscribe. Handlers run synchronously in
    registration order; a handler that raises is logged and skipped so the
    already persisted write is still reported as successful.
    """

    def __init__(self) -> None:
        self._handlers: dict[Event, list[Handler]] = defaultdict(list)

    def subscribe(self, event: Event, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` for ``event``. Returns an unsubscribe callable."""
        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return unsubscribe

    def emit(self, event: Event, payload: Any = None) -> None:
        for handler in list(self._handlers[event]):
            try:
                handler(event, payload)
            except Exception:
                logger.exception("Handler %r failed for %s", handler, event.value)
