"""Entity capabilities.

Capabilities are expressed as runtime-checkable protocols so an entity opts
in by exposing the attribute or methods, not by inheriting a concrete base.
DomainEventsMixin is a convenience implementation of HasDomainEvents.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .events import DomainEvent


@runtime_checkable
class Entity(Protocol):
    """A record with a stable identity."""

    id: Any


@runtime_checkable
class SoftDeletable(Protocol):
    """An entity whose deletion is recorded as a flag instead of a removal."""

    is_soft_deleted: bool


@runtime_checkable
class HasDomainEvents(Protocol):
    """An entity carrying a buffer of pending domain events."""

    @property
    def domain_events(self) -> tuple[DomainEvent, ...]: ...

    def add_domain_event(self, event: DomainEvent) -> None: ...

    def clear_domain_events(self) -> None: ...


class DomainEventsMixin:
    """Append-only event buffer, drained by the dispatcher after commit.

    The buffer is created lazily: ORM instances loaded from the store are
    built without calling __init__.
    """

    def _event_buffer(self) -> list[DomainEvent]:
        buffer = self.__dict__.get("_domain_events")
        if buffer is None:
            buffer = []
            self.__dict__["_domain_events"] = buffer
        return buffer

    @property
    def domain_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._event_buffer())

    def add_domain_event(self, event: DomainEvent) -> None:
        self._event_buffer().append(event)

    def remove_domain_event(self, event: DomainEvent) -> None:
        self._event_buffer().remove(event)

    def clear_domain_events(self) -> None:
        self._event_buffer().clear()
