"""Parse-and-create flow plus the project operations that need collaborators."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.core.security import AdminGuard
from surveydisco.enrichment import MapsClient
from surveydisco.exceptions import InvalidInputError, ServiceUnavailableError
from surveydisco.extraction import FieldExtractor
from surveydisco.models import ParsedProject, Project
from surveydisco.projects import repository
from surveydisco.projects.fields import translate_updates
from surveydisco.projects.job_numbers import generate_job_number

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, extractor: FieldExtractor, maps: MapsClient, admin_guard: AdminGuard):
        self.extractor = extractor
        self.maps = maps
        self.admin_guard = admin_guard

    async def parse_text(self, session: AsyncSession, text: str | None) -> ParsedProject:
        """Extract, number and enrich an inquiry without storing it.

        Enrichment failures only leave fields empty. ``notes`` keeps the
        input exactly as received.
        """
        if not text or not text.strip():
            raise InvalidInputError("Text is required")

        extraction = await self.extractor.extract(text)
        job_number = await generate_job_number(session)

        fields = extraction.fields
        geo_address = None
        travel = None
        if fields.address:
            geo_address = await self.maps.validate_address(fields.address)
            travel = await self.maps.calculate_travel(geo_address or fields.address)

        return ParsedProject(
            **fields.model_dump(),
            job_number=job_number,
            geo_address=geo_address or "",
            contact=extraction.contact,
            status=extraction.status,
            notes=text,
            travel_time=travel.duration if travel else None,
            travel_distance=travel.distance if travel else None,
        )

    async def create_from_text(self, session: AsyncSession, text: str | None) -> Project:
        parsed = await self.parse_text(session, text)
        return await repository.insert_project(session, parsed)

    async def update(
        self, session: AsyncSession, project_id: int, updates: Mapping[str, Any]
    ) -> Project:
        columns = translate_updates(updates)
        if not columns:
            raise InvalidInputError("No valid fields to update")
        return await repository.update_project(session, project_id, columns)

    async def refresh_travel(self, session: AsyncSession, project_id: int) -> Project:
        """Recompute travel from the stored address; touches travel fields only."""
        project = await repository.get_project(session, project_id)
        destination = project.geo_address or project.address
        if not destination:
            raise InvalidInputError("Project has no address to calculate travel time")

        travel = await self.maps.calculate_travel(destination)
        if travel is None:
            logger.warning("travel_refresh_failed: project_id=%s", project_id)
            raise ServiceUnavailableError("Failed to calculate travel time")

        return await repository.update_travel(session, project_id, travel)

    async def delete(self, session: AsyncSession, project_id: int, secret: str | None) -> Project:
        """Privileged delete. The secret is checked before the row is looked up."""
        self.admin_guard.verify(secret)
        return await repository.delete_project(session, project_id)
