"""Declarative mixins for soft-deletable entities.

SoftDeleteMixin is the class the soft-delete query criteria are attached to:
every mapped subclass gets an is_soft_deleted column and is hidden from
queries while the unit of work's filter is enabled.
"""

from __future__ import annotations

from sqlalchemy import Boolean, false
from sqlalchemy.orm import Mapped, mapped_column


class SoftDeleteMixin:
    """Adds the is_soft_deleted flag (False on insert)."""

    is_soft_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
