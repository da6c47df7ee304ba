"""Post-commit domain event dispatch.

The dispatcher runs once per successful commit:

  1. visit the touched entities in first-touch order and collect the events of
     every entity exposing a non-empty buffer (per-entity order preserved);
  2. clear every visited buffer, so a handler that touches the same entity
     again starts from an empty buffer;
  3. publish the collected events one at a time, awaiting each publish.

Handler failures are not swallowed.  They surface as DispatchError to the
caller of commit, after the write has already been applied: the write is
durable, the notifications are best effort.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from repokit.domain.exceptions import DispatchError
from repokit.domain.models.entities import HasDomainEvents
from repokit.domain.models.events import DomainEvent

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """Publishes a single event to its registered handlers."""

    async def publish(self, event: DomainEvent) -> None: ...


class DomainEventDispatcher:
    def __init__(self, publisher: EventPublisher) -> None:
        self._publisher = publisher

    @staticmethod
    def collect(entities: Iterable[object]) -> list[DomainEvent]:
        """Drain the event buffers of the given entities, in order."""
        sources = [
            entity
            for entity in entities
            if isinstance(entity, HasDomainEvents) and entity.domain_events
        ]
        events = [event for entity in sources for event in entity.domain_events]
        for entity in sources:
            entity.clear_domain_events()
        return events

    async def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            logger.debug("Publishing %s (%s)", type(event).__name__, event.event_id)
            try:
                await self._publisher.publish(event)
            except Exception as exc:
                raise DispatchError(event) from exc

    async def dispatch(self, entities: Iterable[object]) -> int:
        """Collect and publish; returns the number of events published."""
        events = self.collect(entities)
        await self.publish_all(events)
        return len(events)
