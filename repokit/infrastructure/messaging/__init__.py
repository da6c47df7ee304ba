"""Event publishers consumed by the domain event dispatcher."""

from .memory_publisher import InMemoryEventPublisher

__all__ = ["InMemoryEventPublisher"]
