"""Domain services package."""

from .data_filter import FilterScope, SoftDeleteFilter
from .dispatcher import DomainEventDispatcher, EventPublisher

__all__ = ["DomainEventDispatcher", "EventPublisher", "FilterScope", "SoftDeleteFilter"]
