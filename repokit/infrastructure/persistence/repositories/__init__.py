"""Concrete SQLAlchemy repositories and the registry that wires them.

RepositoryRegistry maps entity classes to repository classes.  It is
populated once at start-up, either explicitly or by enumerating the mappers
of a declarative base:

    registry = RepositoryRegistry.from_base(Base)
    registry.register(Book, BookRepository)  # custom implementation

SqlUnitOfWork.repository() asks the registry for one instance per scope.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase

from repokit.domain.exceptions import RepositoryNotRegisteredError
from repokit.infrastructure.persistence.unit_of_work import SqlUnitOfWork

from .base import SqlKeyedRepository, SqlRepository


class RepositoryRegistry:
    def __init__(self) -> None:
        self._repository_types: dict[type, type[SqlRepository[Any]]] = {}

    @classmethod
    def from_base(cls, base: type[DeclarativeBase]) -> RepositoryRegistry:
        """Register the default repository for every class mapped on base."""
        registry = cls()
        registry.register_all(mapper.class_ for mapper in base.registry.mappers)
        return registry

    def register(
        self,
        entity_type: type,
        repository_type: type[SqlRepository[Any]] | None = None,
    ) -> None:
        """Map entity_type to repository_type.

        Without an explicit repository_type, entities with a single-column
        primary key get SqlKeyedRepository and the rest get SqlRepository.
        """
        if repository_type is None:
            if len(inspect(entity_type).primary_key) == 1:
                repository_type = SqlKeyedRepository
            else:
                repository_type = SqlRepository
        self._repository_types[entity_type] = repository_type

    def register_all(self, entity_types: Iterable[type]) -> None:
        for entity_type in entity_types:
            self.register(entity_type)

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._repository_types

    def __len__(self) -> int:
        return len(self._repository_types)

    def repository_type(self, entity_type: type) -> type[SqlRepository[Any]]:
        try:
            return self._repository_types[entity_type]
        except KeyError:
            raise RepositoryNotRegisteredError(entity_type) from None

    def create(self, entity_type: type, unit_of_work: SqlUnitOfWork) -> SqlRepository[Any]:
        return self.repository_type(entity_type)(entity_type, unit_of_work)


__all__ = [
    "RepositoryRegistry",
    "SqlKeyedRepository",
    "SqlRepository",
]
