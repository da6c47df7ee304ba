"""Repository-layer exception taxonomy.

NotFound and InvalidSort are deterministic and surface to the immediate
caller.  PersistenceError means the store rejected the commit and the
transaction was rolled back.  DispatchError means the write has already
committed and only the post-commit notifications are uncertain.
"""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base class for all errors raised by this package."""


class EntityNotFoundError(RepositoryError):
    """A required-result lookup matched no rows."""

    def __init__(self, entity_type: type, entity_id: Any = None) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        if entity_id is None:
            message = f"Entity not found: {entity_type.__name__}"
        else:
            message = f"Entity not found: {entity_type.__name__}({entity_id!r})"
        super().__init__(message)


class InvalidSortError(RepositoryError, ValueError):
    """A sort specification names an unknown field or direction."""


class PersistenceError(RepositoryError):
    """The store rejected a staged write (connectivity, constraint, conflict)."""


class DispatchError(RepositoryError):
    """A domain event handler failed after the write was committed."""

    def __init__(self, event: Any) -> None:
        self.event = event
        super().__init__(
            f"Handler failed for {type(event).__name__}; the write was committed"
        )


class UnitOfWorkError(RepositoryError):
    """The unit of work was used outside of (or re-entered during) its scope."""


class RepositoryNotRegisteredError(RepositoryError, KeyError):
    """No repository is registered for the requested entity type."""

    def __init__(self, entity_type: type) -> None:
        self.entity_type = entity_type
        super().__init__(f"No repository registered for {entity_type.__name__}")

    def __str__(self) -> str:
        return self.args[0]
