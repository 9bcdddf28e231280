"""Application settings routes.

Routes:
- GET    /api/settings       - All settings
- GET    /api/settings/{key} - One setting
- PUT    /api/settings/{key} - Insert or update
- DELETE /api/settings/{key} - Remove
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.connection import get_db
from surveydisco.exceptions import SurveyDiscoError
from surveydisco.models import Setting
from surveydisco.store import settings
from surveydisco.web.errors import http_error
from surveydisco.web.models import SettingWriteRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=list[Setting])
async def list_settings(db: AsyncSession = Depends(get_db)):
    return await settings.list_settings(db)


@router.get("/{key}", response_model=Setting)
async def get_setting(key: str, db: AsyncSession = Depends(get_db)):
    try:
        return await settings.get_setting(db, key)
    except SurveyDiscoError as e:
        logger.warning("setting_lookup_rejected: key=%s error=%s", key, e)
        raise http_error(e) from e


@router.put("/{key}", response_model=Setting)
async def put_setting(key: str, request: SettingWriteRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await settings.upsert_setting(db, key, request.value)
    except SurveyDiscoError as e:
        logger.warning("setting_write_rejected: key=%s error=%s", key, e)
        raise http_error(e) from e


@router.delete("/{key}")
async def delete_setting(key: str, db: AsyncSession = Depends(get_db)):
    try:
        await settings.delete_setting(db, key)
    except SurveyDiscoError as e:
        logger.warning("setting_delete_rejected: key=%s error=%s", key, e)
        raise http_error(e) from e
    return {"message": "Setting deleted successfully"}
