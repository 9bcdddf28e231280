"""Database queries for projects.

Every mutation commits and re-reads the row so server-side timestamps are
returned to the caller.
"""

from __future__ import annotations

import logging
from typing import Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.models import ProjectModel
from surveydisco.enrichment import TravelInfo
from surveydisco.exceptions import NotFoundError
from surveydisco.models import ParsedProject, Project

logger = logging.getLogger(__name__)


async def _load(session: AsyncSession, project_id: int) -> ProjectModel:
    project = await session.get(ProjectModel, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


async def _commit(session: AsyncSession, project: ProjectModel) -> Project:
    await session.commit()
    await session.refresh(project)
    return Project.model_validate(project)


async def list_projects(session: AsyncSession) -> list[Project]:
    """All projects, newest first."""
    stmt = select(ProjectModel).order_by(ProjectModel.created.desc(), ProjectModel.id.desc())
    rows = await session.execute(stmt)
    return [Project.model_validate(row) for row in rows.scalars().all()]


async def get_project(session: AsyncSession, project_id: int) -> Project:
    return Project.model_validate(await _load(session, project_id))


async def project_exists(session: AsyncSession, project_id: int) -> bool:
    return await session.get(ProjectModel, project_id) is not None


async def insert_project(session: AsyncSession, parsed: ParsedProject) -> Project:
    project = ProjectModel(
        job_number=parsed.job_number,
        client=parsed.client,
        email=parsed.email,
        phone=parsed.phone,
        prepared_for=parsed.prepared_for,
        contact=parsed.contact,
        address=parsed.address,
        geo_address=parsed.geo_address,
        parcel=parsed.parcel,
        area=parsed.area,
        service_type=parsed.service_type,
        cost_estimate=parsed.cost_estimate,
        status=parsed.status.value,
        notes=parsed.notes,
        travel_time=parsed.travel_time,
        travel_distance=parsed.travel_distance,
    )
    session.add(project)
    created = await _commit(session, project)
    logger.info("project_created: id=%s job_number=%s", created.id, created.job_number)
    return created


async def update_project(
    session: AsyncSession, project_id: int, columns: Mapping[str, str | None]
) -> Project:
    """Apply already-translated column values and advance ``modified``."""
    project = await _load(session, project_id)
    for column, value in columns.items():
        setattr(project, column, value)
    project.modified = func.now()
    updated = await _commit(session, project)
    logger.info("project_updated: id=%s columns=%s", project_id, sorted(columns))
    return updated


async def update_travel(session: AsyncSession, project_id: int, travel: TravelInfo) -> Project:
    project = await _load(session, project_id)
    project.travel_time = travel.duration
    project.travel_distance = travel.distance
    project.modified = func.now()
    return await _commit(session, project)


async def set_folder_url(session: AsyncSession, project_id: int, folder_url: str) -> Project:
    project = await _load(session, project_id)
    project.onedrive_folder_url = folder_url
    project.modified = func.now()
    return await _commit(session, project)


async def get_folder_url(session: AsyncSession, project_id: int) -> str | None:
    project = await _load(session, project_id)
    return project.onedrive_folder_url


async def delete_project(session: AsyncSession, project_id: int) -> Project:
    """Delete and return a snapshot of the removed row."""
    project = await _load(session, project_id)
    snapshot = Project.model_validate(project)
    await session.delete(project)
    await session.commit()
    logger.info("project_deleted: id=%s job_number=%s", project_id, snapshot.job_number)
    return snapshot
