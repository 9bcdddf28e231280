"""Engine, sessions and schema bootstrap for the SurveyDisco tables.

One engine per process, created lazily from ``DATABASE_URL``. Routes get a
request-scoped session through ``get_db``; scripts use ``get_session``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import inspect, select, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from surveydisco.config import get_config
from surveydisco.db.models import Base, SettingModel

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "webdevtxt": "Each field in Job Cards below are editable. TODO card holds enhancement ideas.",
}

# Process-wide, created on first use and reset by close_db()
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create singleton async engine."""
    global _engine

    if _engine is None:
        db_config = get_config().db

        engine_kwargs: dict = {"echo": db_config.echo}

        # Pool sizing applies to PostgreSQL only
        if "sqlite" not in db_config.url.lower():
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.pool_max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_pre_ping": True,
                    "pool_recycle": 3600,
                }
            )

        _engine = create_async_engine(db_config.url, **engine_kwargs)

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create session factory."""
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )

    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session (context manager).

    Usage:
        async with get_session() as session:
            result = await session.execute(query)

    The session is committed on clean exit and rolled back on error.
    """
    session = get_session_factory()()

    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async with get_session() as session:
        yield session


def _add_missing_columns(conn: Connection) -> list[str]:
    """Add model columns absent from existing tables. Never drops anything."""
    inspector = inspect(conn)
    existing_tables = set(inspector.get_table_names())
    added = []

    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            continue
        present = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in present or column.primary_key:
                continue
            if not column.nullable and column.server_default is None:
                logger.warning("schema_column_skipped: %s.%s is NOT NULL", table.name, column.name)
                continue
            col_type = column.type.compile(dialect=conn.dialect)
            conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {column.name} {col_type}"))
            added.append(f"{table.name}.{column.name}")

    return added


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create missing tables, add missing columns and seed default settings.

    Safe to run on every startup: existing rows, columns and settings are
    left untouched.
    """
    engine = engine or get_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        added = await conn.run_sync(_add_missing_columns)
        if added:
            logger.info("schema_columns_added: %s", ", ".join(added))

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        for key, value in DEFAULT_SETTINGS.items():
            existing = await session.execute(
                select(SettingModel.id).where(SettingModel.setting_key == key)
            )
            if existing.scalar_one_or_none() is None:
                session.add(SettingModel(setting_key=key, setting_value=value))
        await session.commit()


async def close_db() -> None:
    """Dispose the engine; the next get_engine() call builds a fresh one."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
