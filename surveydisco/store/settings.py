"""Key/value application settings."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.models import SettingModel
from surveydisco.exceptions import InvalidInputError, NotFoundError
from surveydisco.models import Setting


async def _find(session: AsyncSession, key: str) -> SettingModel | None:
    stmt = select(SettingModel).where(SettingModel.setting_key == key)
    return (await session.execute(stmt)).scalar_one_or_none()


async def list_settings(session: AsyncSession) -> list[Setting]:
    rows = await session.execute(select(SettingModel).order_by(SettingModel.setting_key))
    return [Setting.model_validate(row) for row in rows.scalars().all()]


async def get_setting(session: AsyncSession, key: str) -> Setting:
    setting = await _find(session, key)
    if setting is None:
        raise NotFoundError("Setting not found")
    return Setting.model_validate(setting)


async def upsert_setting(session: AsyncSession, key: str, value: str | None) -> Setting:
    if not key or not key.strip():
        raise InvalidInputError("Setting key is required")

    setting = await _find(session, key)
    if setting is None:
        setting = SettingModel(setting_key=key, setting_value=value)
        session.add(setting)
    else:
        setting.setting_value = value
        setting.modified = func.now()

    await session.commit()
    await session.refresh(setting)
    return Setting.model_validate(setting)


async def delete_setting(session: AsyncSession, key: str) -> Setting:
    setting = await _find(session, key)
    if setting is None:
        raise NotFoundError("Setting not found")
    snapshot = Setting.model_validate(setting)
    await session.delete(setting)
    await session.commit()
    return snapshot
