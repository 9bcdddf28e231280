"""OneDrive routes.

Provisioning needs the owner's token (``onedrive_token`` cookie, set by the
OAuth callback). The ``public-*`` routes use only the share link stored on
the project and never look at caller credentials.

Routes:
- POST /api/onedrive/folder-url                               - Provision folder or ask for auth
- GET  /api/onedrive/callback                                 - OAuth code exchange
- GET  /api/onedrive/public-files/{project_id}                - List shared folder
- POST /api/onedrive/public-thumbnails/{project_id}           - Thumbnail URL for a file
- GET  /api/onedrive/public-file-content/{project_id}/{file_id} - Raw file bytes
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.config import AppConfig
from surveydisco.db.connection import get_db
from surveydisco.exceptions import SurveyDiscoError
from surveydisco.models import FolderRequest
from surveydisco.onedrive import FolderManager, PublicFileGateway
from surveydisco.onedrive.gateway import NOT_INITIALIZED_MESSAGE
from surveydisco.projects import repository
from surveydisco.web.dependencies import get_app_config, get_file_gateway, get_folder_manager
from surveydisco.web.errors import http_error
from surveydisco.web.models import ThumbnailRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/onedrive", tags=["onedrive"])

TOKEN_COOKIE = "onedrive_token"


@router.post("/folder-url")
async def folder_url(
    body: FolderRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    folders: FolderManager = Depends(get_folder_manager),
):
    """Ensure the project's folder exists and return its share link.

    Without a token the request is parked and ``{"requiresAuth": true,
    "authUrl": ...}`` is returned instead; the callback resumes it.
    """
    try:
        folders.validate_request(body)
        token = request.cookies.get(TOKEN_COOKIE)
        if not token:
            auth = await folders.request_authorization(db, body)
            return auth.model_dump(by_alias=True)

        result = await folders.provision(db, body, token)
    except SurveyDiscoError as e:
        logger.error(
            "folder_provision_failed: project_id=%s job_number=%s error=%s",
            body.project_id,
            body.job_number,
            e,
        )
        raise http_error(e) from e

    return result.model_dump(by_alias=True)


@router.get("/callback")
async def oauth_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    folders: FolderManager = Depends(get_folder_manager),
    config: AppConfig = Depends(get_app_config),
):
    """Exchange the code, store the token cookie and resume the parked request."""
    if error:
        logger.warning("oauth_callback_denied: error=%s", error)
        return RedirectResponse(f"{config.frontend_url}?onedrive_auth=error")
    if not code:
        raise HTTPException(status_code=400, detail="Authorization code required")

    try:
        token = await folders.oauth.exchange_code(code)
    except SurveyDiscoError as e:
        logger.error("oauth_callback_failed: %s", e)
        return RedirectResponse(f"{config.frontend_url}?onedrive_auth=error")

    try:
        resumed = await folders.resume(db, state, token)
    except SurveyDiscoError as e:
        logger.error("pending_folder_resume_failed: %s", e)
        resumed = None
    if resumed is not None:
        logger.info("pending_folder_resumed: path=%s", resumed.folder_path)

    response = RedirectResponse(f"{config.frontend_url}?onedrive_auth=success")
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=config.onedrive.token_cookie_max_age,
        httponly=True,
        secure=config.environment == "production",
    )
    return response


@router.get("/public-files/{project_id}")
async def public_files(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    gateway: PublicFileGateway = Depends(get_file_gateway),
):
    try:
        share_url = await repository.get_folder_url(db, project_id)
        listing = await gateway.list_files(share_url)
    except SurveyDiscoError as e:
        logger.error("public_files_failed: project_id=%s error=%s", project_id, e)
        raise http_error(e) from e

    return listing.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/public-thumbnails/{project_id}")
async def public_thumbnail(
    project_id: int,
    body: ThumbnailRequest,
    db: AsyncSession = Depends(get_db),
    gateway: PublicFileGateway = Depends(get_file_gateway),
):
    if not body.file_id:
        raise HTTPException(status_code=400, detail="File ID required")

    try:
        share_url = await repository.get_folder_url(db, project_id)
    except SurveyDiscoError as e:
        raise http_error(e) from e

    return {"thumbnailUrl": await gateway.get_thumbnail(share_url, body.file_id)}


@router.get("/public-file-content/{project_id}/{file_id}")
async def public_file_content(
    project_id: int,
    file_id: str,
    max_size: Optional[int] = Query(default=None, alias="maxSize", ge=1),
    db: AsyncSession = Depends(get_db),
    gateway: PublicFileGateway = Depends(get_file_gateway),
):
    try:
        share_url = await repository.get_folder_url(db, project_id)
        if not share_url:
            raise HTTPException(status_code=404, detail=NOT_INITIALIZED_MESSAGE)
        _, content = await gateway.get_file_content(share_url, file_id, max_size)
    except SurveyDiscoError as e:
        logger.error(
            "public_file_content_failed: project_id=%s file_id=%s error=%s", project_id, file_id, e
        )
        raise http_error(e) from e

    return Response(content=content, media_type="application/octet-stream")
