"""Unit of Work interface.

The unit of work is the transaction boundary: it owns the items bag, the
soft-delete filter and the single commit operation, and it is the only place
that triggers domain event dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeVar

from repokit.domain.models.enums import EntityState
from repokit.domain.services.data_filter import SoftDeleteFilter

if TYPE_CHECKING:
    from .base import Repository

E = TypeVar("E")

# Items bag keys.  Each cross-cutting marker reserves its own key.
HARD_DELETED_ENTITIES = "hard_deleted_entities"


class UnitOfWork(ABC):
    """Abstract transaction scope shared by all repositories of one request."""

    @abstractmethod
    async def __aenter__(self) -> UnitOfWork:
        """Begin a new scope with an empty items bag."""

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Discard anything not committed and close the scope."""

    @property
    @abstractmethod
    def items(self) -> MutableMapping[str, Any]:
        """Scope-local key/value bag for cross-cutting markers."""

    @property
    @abstractmethod
    def soft_delete_filter(self) -> SoftDeleteFilter:
        """The filter consulted by every query issued within this scope."""

    @abstractmethod
    async def commit(self) -> None:
        """Flush staged changes, commit, then dispatch buffered domain events.

        Raises PersistenceError if the store rejects the write and
        DispatchError if a handler fails after the write committed.
        """

    @abstractmethod
    async def rollback(self) -> None:
        """Discard staged changes and clear the items bag."""

    @abstractmethod
    def repository(self, entity_type: type[E]) -> Repository[E]:
        """Return the repository bound to this scope for entity_type."""

    @abstractmethod
    def state_of(self, entity: object) -> EntityState:
        """Report the change-tracking state of an entity."""
