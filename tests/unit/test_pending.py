"""Tests for surveydisco.onedrive.pending - parked OAuth operations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from surveydisco.db.models import PendingOperationModel
from surveydisco.onedrive.pending import (
    PROVISION_FOLDER,
    consume_pending,
    purge_expired,
    save_pending,
)

NOW = datetime(2025, 9, 14, 12, 0, tzinfo=timezone.utc)


class TestPendingOperations:
    @pytest.mark.asyncio
    async def test_round_trip_consumed_once(self, db_session):
        params = {"jobNumber": "250901", "projectId": 3}
        state = await save_pending(db_session, PROVISION_FOLDER, params, ttl_minutes=15, now=NOW)

        assert await consume_pending(db_session, state, PROVISION_FOLDER, now=NOW) == params
        assert await consume_pending(db_session, state, PROVISION_FOLDER, now=NOW) is None

    @pytest.mark.asyncio
    async def test_expired_rejected(self, db_session):
        state = await save_pending(db_session, PROVISION_FOLDER, {}, ttl_minutes=15, now=NOW)

        later = NOW + timedelta(minutes=16)

        assert await consume_pending(db_session, state, PROVISION_FOLDER, now=later) is None

    @pytest.mark.asyncio
    async def test_unknown_and_missing_state(self, db_session):
        assert await consume_pending(db_session, "nope", PROVISION_FOLDER) is None
        assert await consume_pending(db_session, None, PROVISION_FOLDER) is None

    @pytest.mark.asyncio
    async def test_operation_mismatch(self, db_session):
        state = await save_pending(db_session, "other", {}, ttl_minutes=15, now=NOW)

        assert await consume_pending(db_session, state, PROVISION_FOLDER, now=NOW) is None

    @pytest.mark.asyncio
    async def test_purge_expired(self, db_session):
        await save_pending(db_session, PROVISION_FOLDER, {}, ttl_minutes=15, now=NOW)
        fresh = await save_pending(
            db_session, PROVISION_FOLDER, {"a": 1}, ttl_minutes=60, now=NOW + timedelta(minutes=10)
        )

        removed = await purge_expired(db_session, now=NOW + timedelta(minutes=30))

        assert removed == 1
        assert await consume_pending(
            db_session, fresh, PROVISION_FOLDER, now=NOW + timedelta(minutes=30)
        ) == {"a": 1}

    @pytest.mark.asyncio
    async def test_saving_clears_abandoned_rows(self, db_session):
        abandoned = await save_pending(db_session, PROVISION_FOLDER, {}, ttl_minutes=15, now=NOW)
        live = await save_pending(
            db_session, PROVISION_FOLDER, {}, ttl_minutes=15, now=NOW + timedelta(minutes=5)
        )

        current = await save_pending(
            db_session, PROVISION_FOLDER, {}, ttl_minutes=15, now=NOW + timedelta(minutes=16)
        )

        states = set((await db_session.execute(select(PendingOperationModel.state))).scalars())
        assert states == {live, current}
        assert abandoned not in states
