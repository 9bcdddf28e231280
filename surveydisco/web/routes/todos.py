"""TODO card routes.

Routes:
- GET    /api/todos           - Items ordered by item number
- POST   /api/todos           - Append an item
- PATCH  /api/todos/{todo_id} - Update description and/or completed
- DELETE /api/todos/{todo_id} - Remove an item (numbers are not recompacted)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.connection import get_db
from surveydisco.exceptions import SurveyDiscoError
from surveydisco.models import TodoItem
from surveydisco.store import todos
from surveydisco.web.errors import http_error
from surveydisco.web.models import TodoCreateRequest, TodoUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("", response_model=list[TodoItem])
async def list_todos(db: AsyncSession = Depends(get_db)):
    return await todos.list_todos(db)


@router.post("", response_model=TodoItem)
async def create_todo(request: TodoCreateRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await todos.create_todo(db, request.description)
    except SurveyDiscoError as e:
        logger.warning("todo_create_rejected: error=%s", e)
        raise http_error(e) from e


@router.patch("/{todo_id}", response_model=TodoItem)
async def update_todo(
    todo_id: int, request: TodoUpdateRequest, db: AsyncSession = Depends(get_db)
):
    try:
        return await todos.update_todo(
            db, todo_id, description=request.description, completed=request.completed
        )
    except SurveyDiscoError as e:
        logger.warning("todo_update_rejected: todo_id=%s error=%s", todo_id, e)
        raise http_error(e) from e


@router.delete("/{todo_id}")
async def delete_todo(todo_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await todos.delete_todo(db, todo_id)
    except SurveyDiscoError as e:
        logger.warning("todo_delete_rejected: todo_id=%s error=%s", todo_id, e)
        raise http_error(e) from e
    return {"message": "Todo deleted successfully"}
