"""SQLAlchemy async database models for SurveyDisco.

Table names keep the ``surveydisco_`` prefix so the schema can share a
database with other applications.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ProjectModel(Base):
    """Survey job parsed from an inquiry."""

    __tablename__ = "surveydisco_projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_number: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)

    # Client
    client: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    prepared_for: Mapped[str | None] = mapped_column(String(255))
    contact: Mapped[str | None] = mapped_column(Text)

    # Site
    address: Mapped[str | None] = mapped_column(Text)
    geo_address: Mapped[str | None] = mapped_column(Text)
    parcel: Mapped[str | None] = mapped_column(String(100))
    area: Mapped[str | None] = mapped_column(String(50))

    # Job
    service_type: Mapped[str | None] = mapped_column(String(100))
    cost_estimate: Mapped[str | None] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(50), default="New", nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    # Travel from the office
    travel_time: Mapped[str | None] = mapped_column(String(50))
    travel_distance: Mapped[str | None] = mapped_column(String(50))

    # Shareable OneDrive folder link, written only after provisioning succeeds
    onedrive_folder_url: Mapped[str | None] = mapped_column(Text)

    # Audit
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("idx_surveydisco_projects_created", "created"),)


class TodoItemModel(Base):
    """Numbered entry on the shared TODO card."""

    __tablename__ = "surveydisco_todo_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_number: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class SettingModel(Base):
    """Key/value application setting."""

    __tablename__ = "surveydisco_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    setting_key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    setting_value: Mapped[str | None] = mapped_column(Text)
    modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class PendingOperationModel(Base):
    """Request parameters parked while the user completes an OAuth redirect.

    Keyed by the OAuth ``state`` value; consumed once by the callback.
    """

    __tablename__ = "surveydisco_pending_operations"

    state: Mapped[str] = mapped_column(String(128), primary_key=True)
    operation: Mapped[str] = mapped_column(String(50), nullable=False)
    parameters: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_surveydisco_pending_expires", "expires_at"),)
