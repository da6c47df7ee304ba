"""SQLAlchemy implementations of Repository and KeyedRepository.

Repositories stage changes on the unit of work's AsyncSession and never
commit on their own unless auto_commit is requested.  Queries go through the
session, so the soft-delete criteria and the first-touch registry installed
by SqlUnitOfWork apply to everything loaded here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from repokit.domain.exceptions import EntityNotFoundError
from repokit.domain.repositories.base import KeyedRepository, Repository
from repokit.infrastructure.persistence.interception import mark_hard_deleted
from repokit.infrastructure.persistence.sorting import parse_sorting
from repokit.infrastructure.persistence.unit_of_work import SqlUnitOfWork

logger = logging.getLogger(__name__)

E = TypeVar("E")
K = TypeVar("K")


class SqlRepository(Repository[E], Generic[E]):
    def __init__(self, entity_type: type[E], unit_of_work: SqlUnitOfWork) -> None:
        self.entity_type = entity_type
        self._uow = unit_of_work

    @property
    def unit_of_work(self) -> SqlUnitOfWork:
        return self._uow

    @property
    def _session(self) -> AsyncSession:
        return self._uow.session

    def _select(self, *criteria: Any) -> Select[tuple[E]]:
        stmt = select(self.entity_type)
        if criteria:
            stmt = stmt.where(*criteria)
        return stmt

    async def _commit_if(self, auto_commit: bool) -> None:
        if auto_commit:
            await self._uow.commit()

    async def _resolve(self, entity: E) -> E | None:
        """Return the tracked instance for entity's row, or None.

        Pending (not yet flushed) instances are unstaged and yield None.
        Untracked instances are looked up by primary key.
        """
        if entity in self._session:
            if inspect(entity).pending:
                self._session.expunge(entity)
                return None
            return entity
        ident = self._identity(entity)
        if ident is None:
            return None
        return await self._session.get(self.entity_type, ident)

    def _identity(self, entity: E) -> Any:
        """Primary key value (a tuple for composite keys), or None if incomplete."""
        key = inspect(self.entity_type).primary_key_from_instance(entity)
        if any(value is None for value in key):
            return None
        return key[0] if len(key) == 1 else tuple(key)

    # --- read ---

    async def get_all(self) -> list[E]:
        return await self.get_many()

    async def get_many(self, *criteria: Any) -> list[E]:
        result = await self._session.execute(self._select(*criteria))
        return list(result.scalars())

    async def find(self, *criteria: Any) -> E | None:
        result = await self._session.execute(self._select(*criteria))
        return result.scalar_one_or_none()

    async def count(self, *criteria: Any) -> int:
        stmt = select(func.count()).select_from(self.entity_type)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def get_page(self, skip: int, take: int, sorting: str | None = None) -> list[E]:
        if skip < 0 or take < 0:
            raise ValueError("skip and take must be non-negative")
        stmt = (
            self._select()
            .order_by(*parse_sorting(self.entity_type, sorting))
            .offset(skip)
            .limit(take)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    # --- create / update ---

    async def insert(self, entity: E, auto_commit: bool = False) -> E:
        self._session.add(entity)
        await self._commit_if(auto_commit)
        return entity

    async def insert_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        self._session.add_all(list(entities))
        await self._commit_if(auto_commit)

    async def _attach_for_update(self, entity: E) -> E:
        if entity in self._session:
            return entity
        # The row may be soft-deleted; merge must still find it.
        with self._uow.soft_delete_filter.disable():
            tracked = await self._session.merge(entity)
        if inspect(tracked).pending:
            # No stored row to update; merge would otherwise stage an insert.
            self._session.expunge(tracked)
            raise EntityNotFoundError(self.entity_type, self._identity(entity))
        return tracked

    async def update(self, entity: E, auto_commit: bool = False) -> E:
        tracked = await self._attach_for_update(entity)
        await self._commit_if(auto_commit)
        return tracked

    async def update_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        for entity in entities:
            await self._attach_for_update(entity)
        await self._commit_if(auto_commit)

    # --- delete ---

    async def _stage_delete(self, entity: E) -> None:
        target = await self._resolve(entity)
        if target is not None:
            await self._session.delete(target)

    async def delete(self, entity: E, auto_commit: bool = False) -> None:
        await self._stage_delete(entity)
        await self._commit_if(auto_commit)

    async def delete_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        for entity in list(entities):
            await self._stage_delete(entity)
        await self._commit_if(auto_commit)

    async def delete_where(self, *criteria: Any, auto_commit: bool = False) -> None:
        await self.delete_many(await self.get_many(*criteria), auto_commit=auto_commit)

    async def _stage_hard_delete(self, entities: Iterable[E]) -> None:
        targets: list[E] = []
        with self._uow.soft_delete_filter.disable():
            for entity in entities:
                target = await self._resolve(entity)
                if target is not None:
                    targets.append(target)
        # Mark before staging: autoflush may run the interception hook.
        mark_hard_deleted(self._uow.items, targets)
        for target in targets:
            await self._session.delete(target)
        logger.debug("Staged hard delete of %d %s", len(targets), self.entity_type.__name__)

    async def hard_delete(self, entity: E, auto_commit: bool = False) -> None:
        await self._stage_hard_delete([entity])
        await self._commit_if(auto_commit)

    async def hard_delete_many(self, entities: Iterable[E], auto_commit: bool = False) -> None:
        await self._stage_hard_delete(list(entities))
        await self._commit_if(auto_commit)

    async def hard_delete_where(self, *criteria: Any, auto_commit: bool = False) -> None:
        await self.hard_delete_many(await self.get_many(*criteria), auto_commit=auto_commit)


class SqlKeyedRepository(SqlRepository[E], KeyedRepository[E, K], Generic[E, K]):
    """Repository for entities with a single-column primary key."""

    def __init__(self, entity_type: type[E], unit_of_work: SqlUnitOfWork) -> None:
        super().__init__(entity_type, unit_of_work)
        primary_key = inspect(entity_type).primary_key
        if len(primary_key) != 1:
            raise TypeError(
                f"{entity_type.__name__} has a composite primary key; use SqlRepository"
            )
        self._key_column = primary_key[0]

    async def find_by_id(self, id: K) -> E | None:
        return await self.find(self._key_column == id)

    async def delete_by_id(self, id: K, auto_commit: bool = False) -> None:
        entity = await self.find_by_id(id)
        if entity is None:
            return
        await self.delete(entity, auto_commit=auto_commit)

    async def delete_many_by_ids(self, ids: Iterable[K], auto_commit: bool = False) -> None:
        entities = await self.get_many(self._key_column.in_(list(ids)))
        await self.delete_many(entities, auto_commit=auto_commit)

    async def hard_delete_by_id(self, id: K, auto_commit: bool = False) -> None:
        with self._uow.soft_delete_filter.disable():
            entity = await self.find_by_id(id)
            if entity is None:
                return
            await self._stage_hard_delete([entity])
        await self._commit_if(auto_commit)

    async def hard_delete_many_by_ids(self, ids: Iterable[K], auto_commit: bool = False) -> None:
        with self._uow.soft_delete_filter.disable():
            entities = await self.get_many(self._key_column.in_(list(ids)))
            await self._stage_hard_delete(entities)
        await self._commit_if(auto_commit)
