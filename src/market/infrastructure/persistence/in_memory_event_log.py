"""In-memory implementation of EventLog.

Events are kept in commit order.  Delivery to subscribers is
fire-and-forget: a failing listener is logged and skipped, it never
reaches the code that appended the event.
"""

from __future__ import annotations

import threading

import structlog

from market.domain.model.events import DomainEvent
from market.domain.repository.event_log import EventListener, EventLog

logger = structlog.get_logger(component="event_log")


class InMemoryEventLog(EventLog):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: list[DomainEvent] = []
        self._listeners: list[EventListener] = []

    def append(self, event: DomainEvent) -> None:
        with self._lock:
            self._events.append(event)
            listeners = list(self._listeners)

        logger.info("event_emitted", event_type=type(event).__name__, product_id=event.id)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("listener_failed", event_type=type(event).__name__, product_id=event.id)

    def list_all(self) -> list[DomainEvent]:
        with self._lock:
            return list(self._events)

    def subscribe(self, listener: EventListener) -> None:
        with self._lock:
            self._listeners.append(listener)
