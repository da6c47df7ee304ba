"""Persistence package.

Exports the SQLAlchemy unit of work, the repository implementations, the
registry and the ORM mixins.
"""

from repokit.infrastructure.persistence.models import DomainEventsMixin, SoftDeleteMixin
from repokit.infrastructure.persistence.repositories import (
    RepositoryRegistry,
    SqlKeyedRepository,
    SqlRepository,
)
from repokit.infrastructure.persistence.unit_of_work import SqlUnitOfWork

__all__ = [
    "DomainEventsMixin",
    "RepositoryRegistry",
    "SoftDeleteMixin",
    "SqlKeyedRepository",
    "SqlRepository",
    "SqlUnitOfWork",
]
