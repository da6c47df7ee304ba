"""Domain enumerations.

String-valued so they log and compare cleanly.
"""

from enum import Enum


class EntityState(str, Enum):
    """Change-tracking state of an entity within a unit of work."""

    UNMODIFIED = "unmodified"
    ADDED = "added"
    MODIFIED = "modified"
    MARKED_FOR_REMOVAL = "marked_for_removal"
    DETACHED = "detached"
