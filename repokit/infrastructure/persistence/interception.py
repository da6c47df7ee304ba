"""Delete interception: rewrites soft deletes into updates before each flush.

SqlUnitOfWork registers apply_soft_delete() as a before_flush listener on its
session, so it runs over every staged removal before the store sees it (on
commit and on autoflush alike).  For each instance marked for removal:

  - not soft-deletable           -> removed;
  - identity in the hard-delete set  -> removed;
  - otherwise                    -> pending column edits are reverted to their
                                    loaded values, the removal is revoked and
                                    is_soft_deleted is set, so the flush issues
                                    an UPDATE instead of a DELETE.

The hard-delete set holds SQLAlchemy identity keys rather than instances, so
a re-fetched instance or a caller-built copy of the same row matches.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, MutableMapping
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.orm.util import identity_key

from repokit.domain.models.enums import EntityState
from repokit.domain.repositories.unit_of_work import HARD_DELETED_ENTITIES
from repokit.infrastructure.persistence.models.mixins import SoftDeleteMixin

logger = logging.getLogger(__name__)


def identity_of(entity: object) -> Hashable:
    """(class, primary-key tuple, token) key identifying entity's row."""
    return identity_key(instance=entity)


def mark_hard_deleted(items: MutableMapping[str, Any], entities: list[object]) -> None:
    """Record entities in the items bag so the flush hook removes them."""
    if not entities:
        return
    hard_deleted: set[Hashable] = items.setdefault(HARD_DELETED_ENTITIES, set())
    hard_deleted.update(identity_of(entity) for entity in entities)


def is_hard_deleted(session: Session, entity: object) -> bool:
    hard_deleted = session.info.get(HARD_DELETED_ENTITIES)
    if not hard_deleted:
        return False
    return identity_of(entity) in hard_deleted


def revert_pending_changes(entity: object) -> None:
    """Drop unflushed column edits, restoring the values loaded from the store."""
    state = inspect(entity)
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue
        if history.deleted:
            set_committed_value(entity, attr.key, history.deleted[0])
        else:
            # No loaded value to go back to; reload it on next access.
            state.session.expire(entity, [attr.key])


def apply_soft_delete(session: Session, flush_context: Any, instances: Any) -> None:
    for entity in list(session.deleted):
        if not isinstance(entity, SoftDeleteMixin):
            continue
        if is_hard_deleted(session, entity):
            logger.debug("Hard delete of %r passes through", identity_of(entity))
            continue
        revert_pending_changes(entity)
        # add() on an instance pending removal revokes the removal.
        session.add(entity)
        entity.is_soft_deleted = True
        logger.debug("Rewrote delete of %r into a soft delete", identity_of(entity))


def entity_state(session: Session, entity: object) -> EntityState:
    state = inspect(entity)
    if state.session_id != session.hash_key:
        return EntityState.DETACHED
    if state.pending:
        return EntityState.ADDED
    if entity in session.deleted:
        return EntityState.MARKED_FOR_REMOVAL
    if session.is_modified(entity, include_collections=False):
        return EntityState.MODIFIED
    return EntityState.UNMODIFIED
