"""Project folder provisioning on the owner's OneDrive.

Provisioning is additive only: each path level is looked up before it is
created, nothing is ever deleted or overwritten, and name conflicts are
resolved by Graph's ``rename`` conflict behaviour. The template file is
copied only into a folder this call created.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.config import OneDriveConfig
from surveydisco.exceptions import (
    InvalidInputError,
    NotFoundError,
    OneDriveError,
    OneDriveErrorCategory,
)
from surveydisco.models import AuthRequired, FolderRequest, FolderResult
from surveydisco.onedrive.graph import GraphClient
from surveydisco.onedrive.naming import derive_folder_name, folder_path, template_file_name
from surveydisco.onedrive.oauth import OAuthClient
from surveydisco.onedrive.pending import PROVISION_FOLDER, consume_pending, save_pending
from surveydisco.projects import repository

logger = logging.getLogger(__name__)


class FolderManager:
    def __init__(self, config: OneDriveConfig, graph: GraphClient, oauth: OAuthClient):
        self.config = config
        self.graph = graph
        self.oauth = oauth
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, path: str) -> asyncio.Lock:
        lock = self._locks.get(path)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[path] = lock
        return lock

    def resolve_path(self, request: FolderRequest) -> str:
        name = derive_folder_name(
            job_number=request.job_number,
            client_name=request.client_name,
            geo_address=request.geo_address,
            project_id=request.project_id,
        )
        return folder_path(self.config.root_folder, name)

    @staticmethod
    def validate_request(request: FolderRequest) -> None:
        if not (
            request.job_number or request.client_name or request.geo_address or request.project_id
        ):
            raise InvalidInputError("Project information required")

    async def request_authorization(
        self, session: AsyncSession, request: FolderRequest
    ) -> AuthRequired:
        """Park ``request`` and return the URL the user must visit first."""
        if not self.config.configured:
            raise OneDriveError(OneDriveErrorCategory.SERVICE_UNAVAILABLE)

        state = await save_pending(
            session,
            PROVISION_FOLDER,
            request.model_dump(mode="json"),
            ttl_minutes=self.config.pending_ttl_minutes,
        )
        return AuthRequired(auth_url=self.oauth.get_auth_url(state))

    async def resume(self, session: AsyncSession, state: str | None, token: str) -> FolderResult | None:
        """Finish a provisioning request parked before the OAuth redirect."""
        parameters = await consume_pending(session, state, PROVISION_FOLDER)
        if parameters is None:
            return None
        return await self.provision(session, FolderRequest.model_validate(parameters), token)

    async def provision(
        self, session: AsyncSession, request: FolderRequest, token: str
    ) -> FolderResult:
        self.validate_request(request)
        if not self.config.configured:
            raise OneDriveError(OneDriveErrorCategory.SERVICE_UNAVAILABLE)
        if request.project_id is not None and not await repository.project_exists(
            session, request.project_id
        ):
            raise NotFoundError("Project not found")

        path = self.resolve_path(request)
        async with self._lock_for(path):
            item, created = await self._ensure_path(token, path)
            folder_url = await self.graph.create_share_link(token, item["id"])

            template_copied = False
            if created:
                template_copied = await self._copy_template(token, item["id"], request)

        if request.project_id is not None:
            await repository.set_folder_url(session, request.project_id, folder_url)

        logger.info(
            "folder_provisioned: path=%s project_id=%s existed=%s template_copied=%s",
            path,
            request.project_id,
            not created,
            template_copied,
        )
        return FolderResult(
            folder_url=folder_url,
            folder_path=path,
            folder_exists=not created,
            template_copied=template_copied,
        )

    async def _ensure_path(self, token: str, path: str) -> tuple[dict[str, Any], bool]:
        """Walk ``path`` level by level. Returns the leaf and whether it was created."""
        parent_id: str | None = None
        current = ""
        item: dict[str, Any] = {}
        created = False

        for part in (p for p in path.split("/") if p):
            current = f"{current}/{part}" if current else part
            existing = await self.graph.get_item_by_path(token, current)
            if existing is not None:
                item, created = existing, False
            else:
                logger.info("folder_creating: path=%s", current)
                item, created = await self.graph.create_folder(token, parent_id, part), True
            parent_id = item["id"]

        return item, created

    async def _copy_template(self, token: str, folder_id: str, request: FolderRequest) -> bool:
        if not self.config.template_path:
            logger.info("template_copy_skipped: ONEDRIVE_TEMPLATE_PATH not set")
            return False

        name = template_file_name(
            request.job_number, request.geo_address, self.config.template_extension
        )
        try:
            content = await self.graph.get_content_by_path(token, self.config.template_path)
            await self.graph.upload_content(token, folder_id, name, content)
        except OneDriveError as e:
            logger.warning(
                "template_copy_failed: folder_id=%s name=%s category=%s detail=%s",
                folder_id,
                name,
                e.category.value,
                e.detail,
            )
            return False

        logger.info("template_copied: folder_id=%s name=%s", folder_id, name)
        return True
