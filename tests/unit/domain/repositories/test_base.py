"""Tests for repokit/domain/repositories/base.py."""

import pytest

from repokit.domain.exceptions import EntityNotFoundError
from repokit.domain.repositories.base import KeyedRepository, Repository


class _Thing:
    pass


async def _none(self, *args, **kwargs):
    return None


def _fake(base, **overrides):
    namespace = {name: _none for name in base.__abstractmethods__}
    namespace.update(overrides)
    namespace["entity_type"] = _Thing
    return type(f"_Fake{base.__name__}", (base,), namespace)()


def test_repository_cannot_be_instantiated_directly():
    with pytest.raises(TypeError):
        Repository()  # type: ignore[abstract]


def test_keyed_repository_cannot_be_instantiated_directly():
    with pytest.raises(TypeError):
        KeyedRepository()  # type: ignore[abstract]


def test_repository_concrete_subclass_must_implement_all_methods():
    class _Partial(Repository):
        async def get_all(self): return []
        # everything else missing

    with pytest.raises(TypeError):
        _Partial()  # type: ignore[abstract]


def test_keyed_repository_declares_by_id_operations():
    assert {
        "find_by_id",
        "delete_by_id",
        "delete_many_by_ids",
        "hard_delete_by_id",
        "hard_delete_many_by_ids",
    } <= KeyedRepository.__abstractmethods__


async def test_get_raises_not_found_when_find_returns_none():
    with pytest.raises(EntityNotFoundError):
        await _fake(Repository).get()


async def test_get_returns_found_entity():
    thing = _Thing()

    async def find(self, *criteria):
        return thing

    assert await _fake(Repository, find=find).get() is thing


async def test_get_by_id_raises_not_found_with_id():
    with pytest.raises(EntityNotFoundError) as excinfo:
        await _fake(KeyedRepository).get_by_id(3)
    assert excinfo.value.entity_id == 3
    assert excinfo.value.entity_type is _Thing
