"""In-process event publisher.

Handlers subscribe to an event type and receive every published event that
is an instance of it (subclasses included).  Handlers run sequentially in
subscription order and their exceptions propagate to the publisher's caller;
the dispatcher turns them into DispatchError.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from repokit.domain.models.events import DomainEvent

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT", bound=DomainEvent)
Handler = Callable[[Any], Coroutine[Any, Any, None]]


class InMemoryEventPublisher:
    def __init__(self) -> None:
        self._handlers: list[tuple[type[DomainEvent], Handler]] = []
        self._history: list[DomainEvent] = []

    def subscribe(
        self,
        event_type: type[EventT],
        handler: Callable[[EventT], Coroutine[Any, Any, None]],
    ) -> None:
        self._handlers.append((event_type, handler))

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        self._handlers.remove((event_type, handler))

    async def publish(self, event: DomainEvent) -> None:
        """Deliver event to every matching handler, one at a time."""
        self._history.append(event)
        handlers = [h for event_type, h in self._handlers if isinstance(event, event_type)]
        if not handlers:
            logger.debug("No handler for %s", type(event).__name__)
        for handler in handlers:
            await handler(event)

    @property
    def history(self) -> list[DomainEvent]:
        """Every event published so far, in publish order."""
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
