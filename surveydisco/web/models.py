"""Request bodies for the SurveyDisco web API.

Usage:
    from surveydisco.web.models import ParseRequest

    @router.post("/api/projects/parse")
    async def parse(request: ParseRequest):
        ...
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    """Used by: POST /api/projects/parse"""

    text: Optional[str] = None


class DeleteProjectRequest(BaseModel):
    """Used by: DELETE /api/projects/{project_id}"""

    password: Optional[str] = None


class TodoCreateRequest(BaseModel):
    description: Optional[str] = None


class TodoUpdateRequest(BaseModel):
    description: Optional[str] = None
    completed: Optional[bool] = None


class SettingWriteRequest(BaseModel):
    """Used by: PUT /api/settings/{key}"""

    value: Optional[str] = None


class ThumbnailRequest(BaseModel):
    """Used by: POST /api/onedrive/public-thumbnails/{project_id}"""

    file_id: Optional[str] = Field(default=None, alias="fileId")
