"""Operations parked across the OAuth redirect, keyed by the ``state`` value."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.models import PendingOperationModel

logger = logging.getLogger(__name__)

PROVISION_FOLDER = "provision_folder"


def _utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _expired(now: datetime):
    return delete(PendingOperationModel).where(PendingOperationModel.expires_at <= now)


def new_state() -> str:
    return secrets.token_urlsafe(32)


async def save_pending(
    session: AsyncSession,
    operation: str,
    parameters: dict[str, Any],
    ttl_minutes: int,
    state: str | None = None,
    now: datetime | None = None,
) -> str:
    """Persist ``parameters`` and return the state token that resumes them.

    Rows whose redirect was abandoned are cleared in the same commit.
    """
    state = state or new_state()
    now = now or datetime.now(timezone.utc)
    purged = await session.execute(_expired(now))
    if purged.rowcount:
        logger.info("pending_operations_purged: count=%s", purged.rowcount)
    session.add(
        PendingOperationModel(
            state=state,
            operation=operation,
            parameters=parameters,
            expires_at=now + timedelta(minutes=ttl_minutes),
        )
    )
    await session.commit()
    logger.info("pending_operation_saved: operation=%s", operation)
    return state


async def consume_pending(
    session: AsyncSession,
    state: str | None,
    operation: str,
    now: datetime | None = None,
) -> dict[str, Any] | None:
    """Return and delete the parked parameters.

    Unknown, expired or mismatched states yield ``None``; a state can be
    consumed at most once.
    """
    if not state:
        return None

    pending = await session.get(PendingOperationModel, state)
    if pending is None:
        logger.warning("pending_operation_unknown")
        return None

    expired = _utc(pending.expires_at) <= (now or datetime.now(timezone.utc))
    matches = pending.operation == operation
    parameters = dict(pending.parameters or {})

    await session.delete(pending)
    await session.commit()

    if expired:
        logger.warning("pending_operation_expired: operation=%s", pending.operation)
        return None
    if not matches:
        logger.warning("pending_operation_mismatch: expected=%s got=%s", operation, pending.operation)
        return None
    return parameters


async def purge_expired(session: AsyncSession, now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)
    result = await session.execute(_expired(now))
    await session.commit()
    return result.rowcount or 0
