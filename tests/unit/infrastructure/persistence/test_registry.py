"""Tests for RepositoryRegistry wiring."""

from unittest.mock import MagicMock

import pytest

from repokit.domain.exceptions import RepositoryNotRegisteredError
from repokit.infrastructure.persistence.repositories import (
    RepositoryRegistry,
    SqlKeyedRepository,
    SqlRepository,
)
from sample_entities import Article, Base, Book, BookTag, Tag


class BookRepository(SqlKeyedRepository[Book, int]):
    async def by_author(self, author: str) -> list[Book]:
        return await self.get_many(Book.author == author)


def test_from_base_registers_every_mapped_entity():
    registry = RepositoryRegistry.from_base(Base)
    assert len(registry) == 4
    for entity_type in (Article, Book, BookTag, Tag):
        assert entity_type in registry


def test_single_column_key_gets_keyed_repository():
    registry = RepositoryRegistry.from_base(Base)
    assert registry.repository_type(Book) is SqlKeyedRepository


def test_composite_key_gets_set_based_repository():
    registry = RepositoryRegistry.from_base(Base)
    assert registry.repository_type(BookTag) is SqlRepository


def test_explicit_registration_overrides_default():
    registry = RepositoryRegistry.from_base(Base)
    registry.register(Book, BookRepository)
    repo = registry.create(Book, MagicMock())
    assert isinstance(repo, BookRepository)
    assert repo.entity_type is Book


def test_unregistered_entity_raises():
    with pytest.raises(RepositoryNotRegisteredError):
        RepositoryRegistry().create(Book, MagicMock())


def test_unregistered_error_is_a_key_error():
    with pytest.raises(KeyError):
        RepositoryRegistry().repository_type(Book)


def test_keyed_repository_rejects_composite_key():
    with pytest.raises(TypeError):
        SqlKeyedRepository(BookTag, MagicMock())


async def test_custom_repository_is_served_by_unit_of_work(make_uow, registry):
    registry.register(Book, BookRepository)
    async with make_uow() as uow:
        books = uow.repository(Book)
        await books.insert_many(
            [Book(title="A", author="P"), Book(title="B", author="Q")], auto_commit=True
        )
        assert [b.title for b in await books.by_author("Q")] == ["B"]


async def test_composite_key_repository_supports_set_operations(make_uow):
    async with make_uow() as uow:
        book = await uow.repository(Book).insert(Book(title="A", author="P"))
        tag = await uow.repository(Tag).insert(Tag(name="t"), auto_commit=True)
        links = uow.repository(BookTag)
        await links.insert(BookTag(book_id=book.id, tag_id=tag.id), auto_commit=True)
        assert await links.count() == 1
        await links.delete_where(BookTag.tag_id == tag.id, auto_commit=True)
        assert await links.count() == 0
