"""Generic repository interfaces.

Repository[E] is the CRUD/query surface for any entity type; KeyedRepository
[E, K] adds the by-identity operations for entities with a single-column key.
Concrete implementations live in repokit/infrastructure/persistence/.

Design notes:
  - All methods are async; suspension points are store I/O and, on commit,
    event publishing.
  - Criteria are store-specific boolean expressions (SQLAlchemy column
    expressions in the shipped implementation) and are AND-ed together.
  - delete* is a soft delete for soft-deletable entities; hard_delete* always
    removes the row.
  - With auto_commit=True the unit of work is committed once, after all
    entities of the call have been staged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from repokit.domain.exceptions import EntityNotFoundError

from .unit_of_work import UnitOfWork

E = TypeVar("E")
K = TypeVar("K")


class Repository(ABC, Generic[E]):
    """Abstract CRUD interface for one entity type."""

    entity_type: type[E]

    @property
    @abstractmethod
    def unit_of_work(self) -> UnitOfWork:
        """The unit of work this repository stages changes on."""

    # --- read ---

    @abstractmethod
    async def get_all(self) -> list[E]:
        """Return every entity visible through the soft-delete filter."""

    @abstractmethod
    async def get_many(self, *criteria: Any) -> list[E]:
        """Return all entities matching the criteria."""

    @abstractmethod
    async def find(self, *criteria: Any) -> E | None:
        """Return the single matching entity, or None."""

    async def get(self, *criteria: Any) -> E:
        """Like find(), but raise EntityNotFoundError when nothing matches."""
        entity = await self.find(*criteria)
        if entity is None:
            raise EntityNotFoundError(self.entity_type)
        return entity

    @abstractmethod
    async def count(self, *criteria: Any) -> int:
        """Count matching entities (all entities when no criteria are given)."""

    @abstractmethod
    async def get_page(self, skip: int, take: int, sorting: str | None = None) -> list[E]:
        """Return a page ordered by a "field [asc|desc], ..." specification."""

    # --- create / update ---

    @abstractmethod
    async def insert(self, entity: E, auto_commit: bool = False) -> E:
        """Stage an insert and return the instance the store will track."""

    @abstractmethod
    async def insert_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        """Stage inserts in input order."""

    @abstractmethod
    async def update(self, entity: E, auto_commit: bool = False) -> E:
        """Stage an update and return the tracked instance."""

    @abstractmethod
    async def update_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        """Stage updates in input order."""

    # --- delete ---

    @abstractmethod
    async def delete(self, entity: E, auto_commit: bool = False) -> None:
        """Stage a delete (soft for soft-deletable entities)."""

    @abstractmethod
    async def delete_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        """Stage deletes for several entities."""

    @abstractmethod
    async def delete_where(self, *criteria: Any, auto_commit: bool = False) -> None:
        """Stage deletes for every entity matching the criteria."""

    @abstractmethod
    async def hard_delete(self, entity: E, auto_commit: bool = False) -> None:
        """Stage a physical removal, bypassing soft-delete rewriting."""

    @abstractmethod
    async def hard_delete_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        """Stage physical removals for several entities."""

    @abstractmethod
    async def hard_delete_where(self, *criteria: Any, auto_commit: bool = False) -> None:
        """Stage physical removals for every entity matching the criteria."""


class KeyedRepository(Repository[E], Generic[E, K]):
    """Repository for entities identified by a single key of type K."""

    @abstractmethod
    async def find_by_id(self, id: K) -> E | None:
        """Return the entity with the given key, or None."""

    async def get_by_id(self, id: K) -> E:
        """Like find_by_id(), but raise EntityNotFoundError when absent."""
        entity = await self.find_by_id(id)
        if entity is None:
            raise EntityNotFoundError(self.entity_type, id)
        return entity

    @abstractmethod
    async def delete_by_id(self, id: K, auto_commit: bool = False) -> None:
        """Delete the entity with the given key; a missing key is a no-op."""

    @abstractmethod
    async def delete_many_by_ids(self, ids: Iterable[K], auto_commit: bool = False) -> None:
        """Delete every entity whose key is in ids."""

    @abstractmethod
    async def hard_delete_by_id(self, id: K, auto_commit: bool = False) -> None:
        """Physically remove the entity with the given key, soft-deleted or not."""

    @abstractmethod
    async def hard_delete_many_by_ids(self, ids: Iterable[K], auto_commit: bool = False) -> None:
        """Physically remove every entity whose key is in ids, soft-deleted or not."""
