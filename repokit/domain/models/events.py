"""Domain event base model.

Events are immutable values buffered on an entity during business logic and
published only after the owning unit of work commits.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel):
    """Immutable base for every domain event.

    event_id is generated at creation time and can be used by handlers as an
    idempotency key.
    """

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
