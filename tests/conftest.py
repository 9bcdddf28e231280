"""Pytest configuration and fixtures for SurveyDisco tests.

Provides common fixtures for testing.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from surveydisco.config import AdminConfig, LLMConfig, MapsConfig, OneDriveConfig, reset_config
from surveydisco.db.models import Base
from surveydisco.models import ParsedProject, ProjectStatus


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Isolate every test from real credentials in the environment."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    for name in (
        "OPENAI_API_KEY",
        "GOOGLE_MAPS_API_KEY",
        "TRAVEL_ORIGIN_ADDRESS",
        "MICROSOFT_CLIENT_ID",
        "MICROSOFT_CLIENT_SECRET",
        "ADMIN_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest_asyncio.fixture()
async def db_session() -> AsyncSession:
    """Create in-memory database for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture
def llm_config() -> LLMConfig:
    """LLM disabled (no API key)."""
    return LLMConfig()


@pytest.fixture
def maps_config() -> MapsConfig:
    return MapsConfig(api_key="maps-key", origin_address="1 Office Park, Atlanta, GA")


@pytest.fixture
def onedrive_config() -> OneDriveConfig:
    return OneDriveConfig(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://testserver/api/onedrive/callback",
        template_path="_Templates/Job Template.xlsx",
    )


@pytest.fixture
def admin_config() -> AdminConfig:
    return AdminConfig(password="s3cret")


@pytest.fixture
def parsed_project() -> ParsedProject:
    """A parsed inquiry ready to insert."""
    return ParsedProject(
        job_number="250901",
        client="John Smith",
        email="john@test.com",
        phone="404-555-1212",
        address="123 Main Street",
        geo_address="123 Main St, Atlanta, GA 30303, USA",
        contact="404-555-1212, john@test.com",
        service_type="Boundary Survey",
        cost_estimate="$2,500",
        status=ProjectStatus.REGEX,
        notes="John Smith needs a boundary survey for 123 Main Street",
    )
