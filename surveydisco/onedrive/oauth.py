"""Microsoft identity platform authorization-code flow."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from surveydisco.config import OneDriveConfig
from surveydisco.exceptions import OneDriveError, OneDriveErrorCategory

logger = logging.getLogger(__name__)


class OAuthClient:
    def __init__(self, config: OneDriveConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_seconds)

    @property
    def _endpoint(self) -> str:
        return f"{self.config.authority_url.rstrip('/')}/{self.config.tenant_id}/oauth2/v2.0"

    def _require_credentials(self) -> None:
        if not self.config.configured:
            raise OneDriveError(
                OneDriveErrorCategory.SERVICE_UNAVAILABLE,
                "MICROSOFT_CLIENT_ID / MICROSOFT_CLIENT_SECRET not set",
            )

    def get_auth_url(self, state: str) -> str:
        """Authorization URL that returns to the callback with ``code`` and ``state``."""
        self._require_credentials()
        params = {
            "client_id": self.config.client_id,
            "response_type": "code",
            "redirect_uri": self.config.redirect_uri,
            "response_mode": "query",
            "scope": " ".join(self.config.scopes),
            "state": state,
        }
        return f"{self._endpoint}/authorize?{urlencode(params)}"

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token."""
        self._require_credentials()
        data = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": code,
            "redirect_uri": self.config.redirect_uri,
            "grant_type": "authorization_code",
            "scope": " ".join(self.config.scopes),
        }

        try:
            response = await self._client.post(f"{self._endpoint}/token", data=data)
            payload: dict[str, Any] = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("oauth_token_request_failed: %s", e)
            raise OneDriveError(OneDriveErrorCategory.FAILED, str(e)) from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if response.is_error or not token:
            error = payload.get("error") if isinstance(payload, dict) else None
            logger.error(
                "oauth_code_exchange_failed: status=%s error=%s", response.status_code, error
            )
            raise OneDriveError(OneDriveErrorCategory.AUTHENTICATION_FAILED, str(error))

        return token

    async def aclose(self) -> None:
        await self._client.aclose()
