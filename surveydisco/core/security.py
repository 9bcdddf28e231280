"""Shared-secret check for destructive operations.

The configured admin password is hashed once with bcrypt and cached; each
caller-supplied secret is verified against that hash. Both sides are
SHA-256 digested first so secrets longer than bcrypt's 72-byte input limit
are still compared in full.
"""

from __future__ import annotations

import base64
import hashlib
import logging

import bcrypt

from surveydisco.config import AdminConfig
from surveydisco.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


def _digest(secret: str) -> bytes:
    return base64.b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class AdminGuard:
    def __init__(self, config: AdminConfig):
        self._configured = bool(config.password)
        # Cache for bcrypt password hash (expensive to compute)
        self._password_hash: bytes | None = (
            bcrypt.hashpw(_digest(config.password), bcrypt.gensalt(rounds=12))
            if config.password
            else None
        )
        if not self._configured:
            logger.warning("ADMIN_PASSWORD not set; privileged operations are disabled")

    @property
    def configured(self) -> bool:
        return self._configured

    def check(self, secret: str | None) -> bool:
        if self._password_hash is None or not secret:
            return False
        return bcrypt.checkpw(_digest(secret), self._password_hash)

    def verify(self, secret: str | None) -> None:
        """Raise ``UnauthorizedError`` unless ``secret`` matches the admin password."""
        if not self.check(secret):
            logger.warning("admin_secret_rejected")
            raise UnauthorizedError("Invalid password")
