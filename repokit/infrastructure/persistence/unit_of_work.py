"""SQLAlchemy async Unit of Work.

One SqlUnitOfWork scope owns one AsyncSession.  The session's info dict is
the items bag, and three session listeners carry the cross-cutting policies:

  before_flush         -> delete interception (see interception.py)
  do_orm_execute       -> soft-delete criteria on every ORM SELECT while the
                          filter is enabled
  after_attach /
  loaded_as_persistent -> first-touch registry consulted by the dispatcher

Usage:

    async with SqlUnitOfWork(AsyncSessionLocal, publisher=bus) as uow:
        books = uow.repository(Book)
        await books.insert(Book(title="X", author="Y"), auto_commit=True)

Leaving the scope rolls back whatever was not committed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import MutableMapping
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from repokit.domain.exceptions import PersistenceError, UnitOfWorkError
from repokit.domain.models.enums import EntityState
from repokit.domain.repositories.base import Repository
from repokit.domain.repositories.unit_of_work import UnitOfWork
from repokit.domain.services.data_filter import SoftDeleteFilter
from repokit.domain.services.dispatcher import DomainEventDispatcher, EventPublisher
from repokit.infrastructure.persistence.interception import apply_soft_delete, entity_state
from repokit.infrastructure.persistence.models.mixins import SoftDeleteMixin

if TYPE_CHECKING:
    from repokit.infrastructure.persistence.repositories import RepositoryRegistry

logger = logging.getLogger(__name__)

E = TypeVar("E")


class SqlUnitOfWork(UnitOfWork):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        publisher: EventPublisher | None = None,
        registry: RepositoryRegistry | None = None,
        soft_delete_filter_enabled: bool = True,
    ) -> None:
        self._session_factory = session_factory
        self._dispatcher = DomainEventDispatcher(publisher) if publisher is not None else None
        self._registry = registry
        self._filter_default = soft_delete_filter_enabled
        self._filter = SoftDeleteFilter(soft_delete_filter_enabled)
        self._session: AsyncSession | None = None
        self._repositories: dict[type, Repository[Any]] = {}
        # id(entity) -> entity, in first-touch order
        self._touched: dict[int, object] = {}
        self._dispatching: set[asyncio.Future[None]] = set()

    async def __aenter__(self) -> SqlUnitOfWork:
        if self._session is not None:
            raise UnitOfWorkError("Unit of work is already active")
        self._session = self._session_factory()
        self._filter = SoftDeleteFilter(self._filter_default)
        self._repositories = {}
        self._touched = {}
        self._register_listeners(self._session.sync_session)
        logger.debug("UoW %s: scope opened", id(self))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        session = self._session
        if session is None:
            return
        if exc_type is not None:
            logger.info("UoW %s: discarding changes after %s", id(self), exc_type.__name__)
        # close() rolls back the connection without expiring loaded instances.
        try:
            session.info.clear()
            await session.close()
        finally:
            self._session = None
            self._repositories = {}
            self._touched = {}
            logger.debug("UoW %s: scope closed", id(self))

    # --- accessors ---

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise UnitOfWorkError("No active session. Use 'async with unit_of_work:'.")
        return self._session

    @property
    def items(self) -> MutableMapping[str, Any]:
        return self.session.info

    @property
    def soft_delete_filter(self) -> SoftDeleteFilter:
        return self._filter

    def repository(self, entity_type: type[E]) -> Repository[E]:
        if self._session is None:
            raise UnitOfWorkError("No active session. Use 'async with unit_of_work:'.")
        if self._registry is None:
            raise UnitOfWorkError("No repository registry configured")
        if entity_type not in self._repositories:
            self._repositories[entity_type] = self._registry.create(entity_type, self)
        return self._repositories[entity_type]

    def state_of(self, entity: object) -> EntityState:
        return entity_state(self.session.sync_session, entity)

    @property
    def touched(self) -> list[object]:
        """Entities staged or loaded in this scope, in first-touch order."""
        return list(self._touched.values())

    # --- transaction ---

    async def commit(self) -> None:
        session = self.session
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("UoW %s: commit failed, rolling back: %s", id(self), exc)
            await session.rollback()
            session.info.clear()
            raise PersistenceError(f"Failed to commit unit of work: {exc}") from exc
        session.info.clear()
        logger.debug("UoW %s: committed", id(self))

        if self._dispatcher is None:
            return
        events = self._dispatcher.collect(self.touched)
        if events:
            # The write is durable; cancelling the caller must not drop delivery.
            task = asyncio.ensure_future(self._dispatcher.publish_all(events))
            self._dispatching.add(task)
            task.add_done_callback(self._dispatching.discard)
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                task.add_done_callback(self._log_unawaited_failure)
                raise

    def _log_unawaited_failure(self, task: asyncio.Future[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(
                "UoW %s: event dispatch failed after the caller was cancelled: %s", id(self), exc
            )

    async def rollback(self) -> None:
        session = self.session
        try:
            await session.rollback()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to roll back unit of work: {exc}") from exc
        finally:
            session.info.clear()

    # --- session listeners ---

    def _register_listeners(self, sync_session: Session) -> None:
        event.listen(sync_session, "before_flush", apply_soft_delete)
        event.listen(sync_session, "do_orm_execute", self._apply_soft_delete_filter)
        event.listen(sync_session, "after_attach", self._touch)
        event.listen(sync_session, "loaded_as_persistent", self._touch)

    def _touch(self, session: Session, instance: object) -> None:
        self._touched.setdefault(id(instance), instance)

    def _apply_soft_delete_filter(self, execute_state: ORMExecuteState) -> None:
        if (
            execute_state.is_select
            and not execute_state.is_column_load
            and not execute_state.is_relationship_load
            and self._filter.is_enabled
        ):
            execute_state.statement = execute_state.statement.options(
                with_loader_criteria(
                    SoftDeleteMixin,
                    lambda cls: cls.is_soft_deleted.is_(False),
                    include_aliases=True,
                )
            )
