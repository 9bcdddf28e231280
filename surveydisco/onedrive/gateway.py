"""Credential-free access to a project's shared folder.

Only the anonymous share link stored on the project is used; no user
token is required or accepted here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from surveydisco.config import OneDriveConfig
from surveydisco.core.cache import BoundedCache
from surveydisco.exceptions import FileTooLargeError, InvalidShareUrlError, OneDriveError
from surveydisco.models import DriveFile, FileListing
from surveydisco.onedrive.graph import GraphClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 10 * 1024 * 1024  # 10 MiB

PREVIEWABLE_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/webp",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)

THUMBNAIL_SIZE_PREFERENCE = ("medium", "small", "large")

NOT_INITIALIZED_MESSAGE = "OneDrive folder not initialized"


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def to_drive_file(item: dict[str, Any]) -> DriveFile:
    mime_type = (item.get("file") or {}).get("mimeType") or "application/octet-stream"
    return DriveFile(
        id=item["id"],
        name=item.get("name", ""),
        size=item.get("size") or 0,
        last_modified=_parse_timestamp(item.get("lastModifiedDateTime")),
        mime_type=mime_type,
        web_url=item.get("webUrl"),
        download_url=item.get("@microsoft.graph.downloadUrl"),
        is_previewable=mime_type in PREVIEWABLE_MIME_TYPES,
    )


def pick_thumbnail(thumbnail_sets: list[dict[str, Any]]) -> str | None:
    """Medium, else small, else large URL from the first thumbnail set."""
    if not thumbnail_sets or not isinstance(thumbnail_sets[0], dict):
        return None
    first = thumbnail_sets[0]
    for size in THUMBNAIL_SIZE_PREFERENCE:
        entry = first.get(size)
        url = entry.get("url") if isinstance(entry, dict) else None
        if isinstance(url, str) and url:
            return url
    return None


class PublicFileGateway:
    def __init__(self, config: OneDriveConfig, graph: GraphClient, cache: BoundedCache | None = None):
        self.config = config
        self.graph = graph
        self.thumbnails = cache or BoundedCache(
            capacity=config.thumbnail_cache_size,
            ttl_seconds=config.thumbnail_cache_ttl_seconds,
        )

    async def list_files(self, share_url: str | None) -> FileListing:
        """Files in the shared folder; an unset link is not an error."""
        if not share_url:
            return FileListing(files=[], folder_initialized=False, message=NOT_INITIALIZED_MESSAGE)

        items = await self.graph.list_shared_children(share_url)
        files = [to_drive_file(item) for item in items if "file" in item]
        return FileListing(files=files, folder_initialized=True, share_url=share_url)

    async def get_thumbnail(self, share_url: str | None, file_id: str) -> str | None:
        """Thumbnail URL or ``None``. Never raises."""
        if not share_url or not file_id:
            return None

        key = (share_url, file_id)
        cached = self.thumbnails.get(key)
        if cached is not None:
            return cached

        try:
            thumbnail_sets = await self.graph.get_shared_thumbnails(share_url, file_id)
        except (OneDriveError, InvalidShareUrlError) as e:
            logger.info("thumbnail_unavailable: file_id=%s error=%s", file_id, e)
            return None

        url = pick_thumbnail(thumbnail_sets)
        if url is not None:
            self.thumbnails.set(key, url)
        return url

    async def get_file_content(
        self, share_url: str | None, file_id: str, max_size: int | None = None
    ) -> tuple[DriveFile, bytes]:
        """Metadata and raw bytes, refusing files larger than ``max_size``.

        The declared size is checked before any content is fetched.
        """
        if not share_url:
            raise InvalidShareUrlError(share_url)

        limit = max_size if max_size is not None else DEFAULT_MAX_SIZE
        metadata = to_drive_file(await self.graph.get_shared_item(share_url, file_id))
        if metadata.size > limit:
            logger.warning(
                "file_too_large: file_id=%s size=%s max_size=%s", file_id, metadata.size, limit
            )
            raise FileTooLargeError(metadata.size, limit)

        content = await self.graph.get_shared_content(share_url, file_id)
        return metadata, content
