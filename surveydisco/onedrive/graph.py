"""Microsoft Graph drive-item calls over httpx.

Two families of calls:

* owner calls carry the user's bearer token and act on ``/me/drive``;
* public calls carry no credentials and resolve items through a
  previously minted anonymous share link (``/shares/{token}``).

Every non-2xx response is classified into an ``OneDriveErrorCategory``
and raised as ``OneDriveError``. Nothing is retried here.
"""

from __future__ import annotations

import base64
import logging
from typing import Any
from urllib.parse import quote, urlparse

import httpx

from surveydisco.config import OneDriveConfig
from surveydisco.exceptions import (
    InvalidShareUrlError,
    OneDriveError,
    OneDriveErrorCategory,
)

logger = logging.getLogger(__name__)

THROTTLE_STATUS_CODES = {429, 503, 504}


def classify_graph_error(status_code: int, error_code: str | None = None) -> OneDriveErrorCategory:
    """Map a Graph HTTP status and ``error.code`` onto a stable category."""
    code = (error_code or "").lower()
    if status_code in (401, 403) or code in ("unauthenticated", "accessdenied", "forbidden"):
        return OneDriveErrorCategory.AUTHENTICATION_FAILED
    if status_code in THROTTLE_STATUS_CODES or code in ("throttledrequest", "activitylimitreached"):
        return OneDriveErrorCategory.THROTTLED
    if status_code == 404 or code == "itemnotfound":
        return OneDriveErrorCategory.NOT_FOUND
    return OneDriveErrorCategory.FAILED


def _error_code(response: httpx.Response) -> tuple[str | None, str | None]:
    try:
        error = response.json().get("error") or {}
    except (ValueError, AttributeError):
        return None, None
    if not isinstance(error, dict):
        return None, None
    return error.get("code"), error.get("message")


def encode_share_url(share_url: str | None) -> str:
    """Graph sharing token: ``u!`` + unpadded base64url of the link."""
    if not share_url or not isinstance(share_url, str):
        raise InvalidShareUrlError(share_url)

    parsed = urlparse(share_url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidShareUrlError(share_url)

    encoded = base64.urlsafe_b64encode(share_url.strip().encode("utf-8")).decode("ascii")
    return "u!" + encoded.rstrip("=")


class GraphClient:
    def __init__(self, config: OneDriveConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self.base_url = config.graph_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_seconds, follow_redirects=True
        )

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        """Decoded body of a successful response; anything but a JSON object is a failure."""
        try:
            data = response.json()
        except ValueError as e:
            logger.error("graph_invalid_body: url=%s error=%s", response.request.url, e)
            raise OneDriveError(OneDriveErrorCategory.FAILED, "Graph returned a non-JSON body") from e
        if not isinstance(data, dict):
            logger.error("graph_invalid_body: url=%s type=%s", response.request.url, type(data).__name__)
            raise OneDriveError(OneDriveErrorCategory.FAILED, "Graph returned an unexpected body")
        return data

    @staticmethod
    def _items(data: dict[str, Any]) -> list[dict[str, Any]]:
        value = data.get("value")
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    async def _send(
        self,
        method: str,
        url: str,
        token: str | None = None,
        share_url: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if not url.startswith("http"):
            url = f"{self.base_url}{url}"

        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error("graph_request_failed: %s %s error=%s", method, url, e)
            raise OneDriveError(OneDriveErrorCategory.FAILED, str(e)) from e

        if response.is_success:
            return response

        code, message = _error_code(response)
        # Graph rejects an undecodable sharing token with a 400
        if share_url is not None and response.status_code == 400:
            logger.warning("graph_share_rejected: code=%s message=%s", code, message)
            raise InvalidShareUrlError(share_url)

        category = classify_graph_error(response.status_code, code)
        logger.error(
            "graph_error: %s %s status=%s code=%s category=%s message=%s",
            method,
            url,
            response.status_code,
            code,
            category.value,
            message,
        )
        raise OneDriveError(category, f"{response.status_code} {code}: {message}")

    # ---- owner drive ------------------------------------------------------

    async def get_item_by_path(self, token: str, path: str) -> dict[str, Any] | None:
        """Drive item at ``path`` under the drive root, or ``None`` if absent."""
        try:
            response = await self._send("GET", f"/me/drive/root:/{quote(path)}", token=token)
        except OneDriveError as e:
            if e.category is OneDriveErrorCategory.NOT_FOUND:
                return None
            raise
        return self._json(response)

    async def create_folder(self, token: str, parent_id: str | None, name: str) -> dict[str, Any]:
        """Create ``name`` under ``parent_id`` (root when ``None``); conflicts are auto-renamed."""
        url = f"/me/drive/items/{parent_id}/children" if parent_id else "/me/drive/root/children"
        body = {
            "name": name,
            "folder": {},
            "@microsoft.graph.conflictBehavior": "rename",
        }
        response = await self._send("POST", url, token=token, json=body)
        return self._json(response)

    async def create_share_link(self, token: str, item_id: str) -> str:
        """Anonymous view link; Graph returns the existing one when already minted."""
        response = await self._send(
            "POST",
            f"/me/drive/items/{item_id}/createLink",
            token=token,
            json={"type": "view", "scope": "anonymous"},
        )
        link = self._json(response).get("link")
        web_url = link.get("webUrl") if isinstance(link, dict) else None
        if not web_url:
            raise OneDriveError(OneDriveErrorCategory.FAILED, "createLink returned no webUrl")
        return web_url

    async def get_content_by_path(self, token: str, path: str) -> bytes:
        response = await self._send("GET", f"/me/drive/root:/{quote(path)}:/content", token=token)
        return response.content

    async def upload_content(
        self, token: str, parent_id: str, name: str, content: bytes
    ) -> dict[str, Any]:
        """Simple upload into ``parent_id``; an existing file of that name is never replaced."""
        response = await self._send(
            "PUT",
            f"/me/drive/items/{parent_id}:/{quote(name)}:/content",
            token=token,
            params={"@microsoft.graph.conflictBehavior": "rename"},
            content=content,
            headers={"Content-Type": "application/octet-stream"},
        )
        return self._json(response)

    # ---- public share access ---------------------------------------------

    async def list_shared_children(self, share_url: str) -> list[dict[str, Any]]:
        token = encode_share_url(share_url)
        url = f"/shares/{token}/driveItem/children"
        items: list[dict[str, Any]] = []
        while url:
            data = self._json(await self._send("GET", url, share_url=share_url))
            items.extend(self._items(data))
            url = data.get("@odata.nextLink")
        return items

    async def get_shared_item(self, share_url: str, item_id: str) -> dict[str, Any]:
        token = encode_share_url(share_url)
        response = await self._send(
            "GET", f"/shares/{token}/items/{quote(item_id)}", share_url=share_url
        )
        return self._json(response)

    async def get_shared_thumbnails(self, share_url: str, item_id: str) -> list[dict[str, Any]]:
        token = encode_share_url(share_url)
        response = await self._send(
            "GET", f"/shares/{token}/items/{quote(item_id)}/thumbnails", share_url=share_url
        )
        return self._items(self._json(response))

    async def get_shared_content(self, share_url: str, item_id: str) -> bytes:
        token = encode_share_url(share_url)
        response = await self._send(
            "GET", f"/shares/{token}/items/{quote(item_id)}/content", share_url=share_url
        )
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()
