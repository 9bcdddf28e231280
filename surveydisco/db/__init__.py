"""Database layer for SurveyDisco with async SQLAlchemy."""

from surveydisco.db.connection import get_db, get_session, init_db
from surveydisco.db.models import (
    Base,
    PendingOperationModel,
    ProjectModel,
    SettingModel,
    TodoItemModel,
)

__all__ = [
    "Base",
    "ProjectModel",
    "TodoItemModel",
    "SettingModel",
    "PendingOperationModel",
    "get_db",
    "get_session",
    "init_db",
]
