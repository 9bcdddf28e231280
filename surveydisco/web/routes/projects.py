"""Project card routes.

Routes:
- GET    /api/projects                         - List projects, newest first
- GET    /api/projects/{project_id}            - Single project
- POST   /api/projects/parse                   - Parse inquiry text and store it
- PATCH  /api/projects/{project_id}            - Partial field update
- POST   /api/projects/{project_id}/refresh-travel - Recompute travel time
- DELETE /api/projects/{project_id}            - Admin-password protected delete
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.connection import get_db
from surveydisco.exceptions import SurveyDiscoError
from surveydisco.models import Project
from surveydisco.projects import ProjectService, repository
from surveydisco.web.dependencies import get_project_service
from surveydisco.web.errors import http_error
from surveydisco.web.models import DeleteProjectRequest, ParseRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(db: AsyncSession = Depends(get_db)):
    return await repository.list_projects(db)


@router.get("/{project_id}", response_model=Project)
async def get_project(project_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await repository.get_project(db, project_id)
    except SurveyDiscoError as e:
        logger.warning("project_lookup_rejected: project_id=%s error=%s", project_id, e)
        raise http_error(e) from e


@router.post("/parse", response_model=Project)
async def parse_project(
    request: ParseRequest,
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
):
    """Extract fields from free text and create a project card.

    Extraction and enrichment failures degrade the record; only empty
    input or an exhausted job-number sequence fail the request.
    """
    try:
        return await service.create_from_text(db, request.text)
    except SurveyDiscoError as e:
        logger.warning("project_parse_rejected: %s", e)
        raise http_error(e) from e


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: int,
    updates: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
):
    try:
        return await service.update(db, project_id, updates)
    except SurveyDiscoError as e:
        logger.warning("project_update_rejected: project_id=%s error=%s", project_id, e)
        raise http_error(e) from e


@router.post("/{project_id}/refresh-travel", response_model=Project)
async def refresh_travel(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
):
    try:
        return await service.refresh_travel(db, project_id)
    except SurveyDiscoError as e:
        logger.warning("travel_refresh_rejected: project_id=%s error=%s", project_id, e)
        raise http_error(e) from e


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    request: DeleteProjectRequest | None = None,
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
):
    """Requires ``{"password": ...}`` matching ADMIN_PASSWORD."""
    try:
        deleted = await service.delete(db, project_id, request.password if request else None)
    except SurveyDiscoError as e:
        logger.warning("project_delete_rejected: project_id=%s error=%s", project_id, e)
        raise http_error(e) from e

    return {
        "message": "Project deleted successfully",
        "deleted": deleted.model_dump(mode="json", by_alias=True),
    }
