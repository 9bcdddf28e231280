"""Fixtures for route tests.

Routes run against a file-backed sqlite database so that the TestClient's
event loop and the seeding helpers can each open their own connections.
"""

from __future__ import annotations

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from surveydisco.db.connection import get_db
from surveydisco.db.models import Base
from surveydisco.web.routes import health, onedrive, projects, settings, todos


async def _create_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'routes.db'}", poolclass=NullPool)
    asyncio.run(_create_tables(engine))
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(session)`` to completion outside the app, e.g. for seeding."""

    def run(fn):
        async def _run():
            async with session_factory() as session:
                return await fn(session)

        return asyncio.run(_run())

    return run


@pytest.fixture
def app(session_factory):
    """Bare app with every router and the test database."""
    test_app = FastAPI()
    for module in (health, projects, todos, settings, onedrive):
        test_app.include_router(module.router)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = override_get_db
    return test_app


@pytest.fixture
def client(app):
    return TestClient(app)
