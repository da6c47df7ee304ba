"""Fixtures for store-backed tests: a SQLite database per test (aiosqlite)."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from repokit.infrastructure.messaging import InMemoryEventPublisher
from repokit.infrastructure.persistence import RepositoryRegistry, SqlUnitOfWork
from sample_entities import Base


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'repokit.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def registry():
    return RepositoryRegistry.from_base(Base)


@pytest.fixture
def make_uow(session_factory, publisher, registry):
    def _make(**overrides) -> SqlUnitOfWork:
        kwargs = {"publisher": publisher, "registry": registry}
        kwargs.update(overrides)
        return SqlUnitOfWork(session_factory, **kwargs)

    return _make
