"""Tests for surveydisco.store - TODO items and settings."""

from __future__ import annotations

import pytest

from surveydisco.exceptions import InvalidInputError, NotFoundError
from surveydisco.store import settings, todos


class TestTodos:
    @pytest.mark.asyncio
    async def test_item_numbers_increase(self, db_session):
        first = await todos.create_todo(db_session, "  Add map view  ")
        second = await todos.create_todo(db_session, "Export CSV")

        assert first.item_number == 1
        assert first.description == "Add map view"
        assert first.completed is False
        assert second.item_number == 2

    @pytest.mark.asyncio
    async def test_numbers_not_recompacted_after_delete(self, db_session):
        first = await todos.create_todo(db_session, "one")
        second = await todos.create_todo(db_session, "two")
        await todos.delete_todo(db_session, first.id)

        third = await todos.create_todo(db_session, "three")

        assert third.item_number == 3
        assert [t.item_number for t in await todos.list_todos(db_session)] == [
            second.item_number,
            3,
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("description", [None, "", "   "])
    async def test_description_required(self, db_session, description):
        with pytest.raises(InvalidInputError, match="Description is required"):
            await todos.create_todo(db_session, description)

    @pytest.mark.asyncio
    async def test_partial_update(self, db_session):
        item = await todos.create_todo(db_session, "one")

        done = await todos.update_todo(db_session, item.id, completed=True)
        renamed = await todos.update_todo(db_session, item.id, description="uno")

        assert done.completed is True
        assert done.description == "one"
        assert renamed.description == "uno"
        assert renamed.completed is True

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, db_session):
        item = await todos.create_todo(db_session, "one")

        with pytest.raises(InvalidInputError, match="No fields to update"):
            await todos.update_todo(db_session, item.id)

    @pytest.mark.asyncio
    async def test_missing_item(self, db_session):
        with pytest.raises(NotFoundError):
            await todos.update_todo(db_session, 42, completed=True)
        with pytest.raises(NotFoundError):
            await todos.delete_todo(db_session, 42)


class TestSettings:
    @pytest.mark.asyncio
    async def test_upsert_inserts_then_updates(self, db_session):
        created = await settings.upsert_setting(db_session, "banner", "hello")
        updated = await settings.upsert_setting(db_session, "banner", "goodbye")

        assert created.setting_value == "hello"
        assert updated.setting_value == "goodbye"
        assert len(await settings.list_settings(db_session)) == 1

    @pytest.mark.asyncio
    async def test_get_and_delete(self, db_session):
        await settings.upsert_setting(db_session, "banner", "hello")

        assert (await settings.get_setting(db_session, "banner")).setting_value == "hello"

        await settings.delete_setting(db_session, "banner")

        with pytest.raises(NotFoundError):
            await settings.get_setting(db_session, "banner")

    @pytest.mark.asyncio
    async def test_blank_key_rejected(self, db_session):
        with pytest.raises(InvalidInputError):
            await settings.upsert_setting(db_session, " ", "x")
