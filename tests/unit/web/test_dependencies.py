"""Tests for surveydisco.web.dependencies - service container wiring."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from surveydisco.config import AdminConfig, AppConfig, DBConfig
from surveydisco.web.dependencies import (
    build_services,
    get_app_config,
    get_file_gateway,
    get_folder_manager,
    get_project_service,
)


@pytest.fixture
def app_config(onedrive_config, maps_config):
    return AppConfig(
        db=DBConfig(url="sqlite+aiosqlite://"),
        onedrive=onedrive_config,
        maps=maps_config,
        admin=AdminConfig(password="s3cret"),
    )


@pytest.mark.asyncio
async def test_build_services_shares_clients(app_config):
    services = build_services(app_config)
    try:
        assert services.folders.graph is services.graph
        assert services.gateway.graph is services.graph
        assert services.folders.oauth is services.oauth
        assert services.projects.maps is services.maps
        assert services.projects.admin_guard.configured is True
    finally:
        await services.aclose()


@pytest.mark.asyncio
async def test_getters_read_app_state(app_config):
    services = build_services(app_config)
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(services=services)))
    try:
        assert get_app_config(request) is app_config
        assert get_project_service(request) is services.projects
        assert get_folder_manager(request) is services.folders
        assert get_file_gateway(request) is services.gateway
    finally:
        await services.aclose()
