"""TODO card items. Item numbers are assigned max+1 and never recompacted."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.models import TodoItemModel
from surveydisco.exceptions import InvalidInputError, NotFoundError
from surveydisco.models import TodoItem

logger = logging.getLogger(__name__)


async def _load(session: AsyncSession, todo_id: int) -> TodoItemModel:
    item = await session.get(TodoItemModel, todo_id)
    if item is None:
        raise NotFoundError("Todo not found")
    return item


def _clean_description(description: str | None) -> str:
    if not isinstance(description, str) or not description.strip():
        raise InvalidInputError("Description is required")
    return description.strip()


async def list_todos(session: AsyncSession) -> list[TodoItem]:
    stmt = select(TodoItemModel).order_by(TodoItemModel.item_number.asc())
    rows = await session.execute(stmt)
    return [TodoItem.model_validate(row) for row in rows.scalars().all()]


async def create_todo(session: AsyncSession, description: str | None) -> TodoItem:
    text = _clean_description(description)

    result = await session.execute(select(func.coalesce(func.max(TodoItemModel.item_number), 0)))
    item = TodoItemModel(item_number=result.scalar_one() + 1, description=text, completed=False)
    session.add(item)
    await session.commit()
    await session.refresh(item)

    logger.info("todo_created: id=%s item_number=%s", item.id, item.item_number)
    return TodoItem.model_validate(item)


async def update_todo(
    session: AsyncSession,
    todo_id: int,
    description: str | None = None,
    completed: bool | None = None,
) -> TodoItem:
    """Partial update; at least one of ``description``/``completed`` is required."""
    if description is None and completed is None:
        raise InvalidInputError("No fields to update")

    item = await _load(session, todo_id)
    if description is not None:
        item.description = _clean_description(description)
    if completed is not None:
        item.completed = completed
    item.modified = func.now()

    await session.commit()
    await session.refresh(item)
    return TodoItem.model_validate(item)


async def delete_todo(session: AsyncSession, todo_id: int) -> TodoItem:
    item = await _load(session, todo_id)
    snapshot = TodoItem.model_validate(item)
    await session.delete(item)
    await session.commit()
    logger.info("todo_deleted: id=%s", todo_id)
    return snapshot
