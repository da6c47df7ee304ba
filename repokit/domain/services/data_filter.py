"""Scoped soft-delete filter.

Each unit of work owns one SoftDeleteFilter, so toggling it never leaks into
another request.  disable()/enable() push a FilterScope onto the filter's
stack of active scopes; the most recently acquired live scope decides the
state, and the constructor default applies once every scope is released.
Scopes may be released in any order:

    with uow.soft_delete_filter.disable():
        ...  # soft-deleted rows are visible here
"""

from __future__ import annotations

from types import TracebackType


class FilterScope:
    """Handle returned by SoftDeleteFilter.disable() / enable()."""

    def __init__(self, data_filter: SoftDeleteFilter, enabled: bool) -> None:
        self._filter = data_filter
        self.enabled = enabled
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Withdraw this scope from the filter; idempotent."""
        if self._released:
            return
        self._released = True
        self._filter._scopes.remove(self)

    def __enter__(self) -> FilterScope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()


class SoftDeleteFilter:
    """Controls whether soft-deleted entities are excluded from queries."""

    def __init__(self, enabled: bool = True) -> None:
        self._default = enabled
        self._scopes: list[FilterScope] = []

    @property
    def is_enabled(self) -> bool:
        if self._scopes:
            return self._scopes[-1].enabled
        return self._default

    def disable(self) -> FilterScope:
        return self._switch(False)

    def enable(self) -> FilterScope:
        return self._switch(True)

    def _switch(self, enabled: bool) -> FilterScope:
        scope = FilterScope(self, enabled)
        self._scopes.append(scope)
        return scope

    def __repr__(self) -> str:
        return f"SoftDeleteFilter(enabled={self.is_enabled})"
