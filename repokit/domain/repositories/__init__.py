"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in repokit/infrastructure/persistence/ and are
wired through the RepositoryRegistry.
"""

from .base import KeyedRepository, Repository
from .unit_of_work import HARD_DELETED_ENTITIES, UnitOfWork

__all__ = [
    "HARD_DELETED_ENTITIES",
    "KeyedRepository",
    "Repository",
    "UnitOfWork",
]
