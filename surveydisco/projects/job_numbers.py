"""Per-month job numbers: ``YYMM`` plus a two-digit sequence (``250901``)."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.models import ProjectModel
from surveydisco.exceptions import JobNumberExhaustedError

logger = logging.getLogger(__name__)

MAX_SEQUENCE = 99


def job_number_prefix(now: datetime) -> str:
    return now.strftime("%y%m")


async def generate_job_number(session: AsyncSession, now: datetime | None = None) -> str:
    """Next job number for the current month.

    A storage error degrades to sequence ``01`` rather than failing the
    caller. Raises ``JobNumberExhaustedError`` once ``99`` is taken.
    """
    prefix = job_number_prefix(now or datetime.now())

    stmt = (
        select(ProjectModel.job_number)
        .where(ProjectModel.job_number.like(f"{prefix}%"))
        .order_by(ProjectModel.job_number.desc())
        .limit(1)
    )
    try:
        latest = (await session.execute(stmt)).scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error("job_number_lookup_failed: prefix=%s error=%s", prefix, e)
        # A failed statement aborts the transaction on PostgreSQL
        await session.rollback()
        return f"{prefix}01"

    sequence = 1
    if latest:
        try:
            sequence = int(latest[len(prefix):]) + 1
        except ValueError:
            logger.warning("job_number_unparseable: %s", latest)

    if sequence > MAX_SEQUENCE:
        raise JobNumberExhaustedError(f"All job numbers for {prefix} are in use")

    return f"{prefix}{sequence:02d}"
