"""Shared dependencies for SurveyDisco web routes.

Service objects are constructed once at startup (``build_services``) and
stored on ``app.state``; route handlers receive them through ``Depends``.
Tests replace them with ``app.dependency_overrides``.

Usage:
    from fastapi import Depends
    from surveydisco.web.dependencies import get_project_service

    @router.get("/api/thing")
    async def handler(service: ProjectService = Depends(get_project_service)):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from surveydisco.config import AppConfig
from surveydisco.core.security import AdminGuard
from surveydisco.enrichment import MapsClient
from surveydisco.extraction import FieldExtractor, LLMExtractor
from surveydisco.onedrive import FolderManager, GraphClient, OAuthClient, PublicFileGateway
from surveydisco.projects import ProjectService


@dataclass
class Services:
    config: AppConfig
    projects: ProjectService
    folders: FolderManager
    gateway: PublicFileGateway
    oauth: OAuthClient
    maps: MapsClient
    graph: GraphClient

    async def aclose(self) -> None:
        await self.maps.aclose()
        await self.graph.aclose()
        await self.oauth.aclose()


def build_services(config: AppConfig) -> Services:
    maps = MapsClient(config.maps)
    graph = GraphClient(config.onedrive)
    oauth = OAuthClient(config.onedrive)
    projects = ProjectService(
        extractor=FieldExtractor(LLMExtractor(config.llm)),
        maps=maps,
        admin_guard=AdminGuard(config.admin),
    )
    return Services(
        config=config,
        projects=projects,
        folders=FolderManager(config.onedrive, graph, oauth),
        gateway=PublicFileGateway(config.onedrive, graph),
        oauth=oauth,
        maps=maps,
        graph=graph,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_app_config(request: Request) -> AppConfig:
    return get_services(request).config


def get_project_service(request: Request) -> ProjectService:
    return get_services(request).projects


def get_folder_manager(request: Request) -> FolderManager:
    return get_services(request).folders


def get_file_gateway(request: Request) -> PublicFileGateway:
    return get_services(request).gateway
