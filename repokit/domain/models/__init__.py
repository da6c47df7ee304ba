"""Domain model package.

Entity capabilities, domain events and tracking states.  Nothing here depends
on the ORM; import from this package rather than individual modules.
"""

from .entities import DomainEventsMixin, Entity, HasDomainEvents, SoftDeletable
from .enums import EntityState
from .events import DomainEvent

__all__ = [
    "DomainEvent",
    "DomainEventsMixin",
    "Entity",
    "EntityState",
    "HasDomainEvents",
    "SoftDeletable",
]
