"""Abstract append-only event log."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from market.domain.model.events import DomainEvent

EventListener = Callable[[DomainEvent], None]


class EventLog(ABC):

    @abstractmethod
    def append(self, event: DomainEvent) -> None:
        """Record an event and notify subscribers."""

    @abstractmethod
    def list_all(self) -> list[DomainEvent]:
        """Return every recorded event in commit order."""

    @abstractmethod
    def subscribe(self, listener: EventListener) -> None:
        """Register a listener notified after each append."""
