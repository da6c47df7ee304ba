"""ORM building blocks shared by application entities."""

from repokit.domain.models.entities import DomainEventsMixin
from repokit.infrastructure.persistence.models.mixins import SoftDeleteMixin

__all__ = ["DomainEventsMixin", "SoftDeleteMixin"]
