"""SurveyDisco Pydantic models for type-safe data validation.

Field names are snake_case in Python; ``alias_generator=to_camel`` gives the
camelCase names used on the wire (``jobNumber``, ``geoAddress``...).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ServiceType(str, Enum):
    """Categories assigned by the keyword rules."""

    BOUNDARY_SURVEY = "Boundary Survey"
    TOPOGRAPHIC_SURVEY = "Topographic Survey"
    ALTA_SURVEY = "ALTA Survey"
    LEGAL_DESCRIPTION = "Legal Description"
    ELEVATION_CERTIFICATE = "Elevation Certificate"
    SUBDIVISION = "Subdivision"
    SURVEY = "Survey"
    QUOTE_REQUEST = "Quote Request"
    CONSULTATION = "Consultation"
    GENERAL_INQUIRY = "General Inquiry"


class ProjectStatus(str, Enum):
    """Which extraction path populated the record."""

    NEW = "New"  # LLM extractor contributed
    REGEX = "Regex"  # pattern fallback only


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractedFields(CamelModel):
    """Fields pulled out of free text. Empty string means "not found"."""

    client: str = ""
    email: str = ""
    phone: str = ""
    prepared_for: str = ""
    address: str = ""
    parcel: str = ""
    area: str = ""
    service_type: str = ""
    cost_estimate: str = ""


EXTRACTED_FIELD_NAMES: tuple[str, ...] = tuple(ExtractedFields.model_fields)


class ParsedProject(ExtractedFields):
    """A fully parsed inquiry, ready to insert."""

    job_number: str
    geo_address: str = ""
    contact: str = ""
    status: ProjectStatus = ProjectStatus.REGEX
    notes: str = ""
    travel_time: str | None = None
    travel_distance: str | None = None


class Project(ExtractedFields):
    """Stored project as returned by the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    job_number: str
    geo_address: str | None = None
    contact: str | None = None
    status: str
    notes: str | None = None
    travel_time: str | None = None
    travel_distance: str | None = None
    onedrive_folder_url: str | None = None
    created: datetime
    modified: datetime

    # Stored columns are nullable; the base class declares them as str
    client: str | None = None
    email: str | None = None
    phone: str | None = None
    prepared_for: str | None = None
    address: str | None = None
    parcel: str | None = None
    area: str | None = None
    service_type: str | None = None
    cost_estimate: str | None = None


class TodoItem(BaseModel):
    """TODO card entry (snake_case on the wire, like the table)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_number: int
    description: str
    completed: bool
    created: datetime
    modified: datetime


class Setting(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    setting_key: str
    setting_value: str | None = None
    modified: datetime


class FolderRequest(CamelModel):
    """Identifying project fields for OneDrive folder provisioning."""

    job_number: str | None = None
    client_name: str | None = None
    geo_address: str | None = None
    project_id: int | None = None


class FolderResult(CamelModel):
    folder_url: str
    folder_path: str
    folder_exists: bool
    template_copied: bool = False


class AuthRequired(CamelModel):
    auth_url: str
    requires_auth: bool = True


class DriveFile(CamelModel):
    """File entry from a shared OneDrive folder."""

    id: str
    name: str
    size: int = 0
    last_modified: datetime | None = None
    mime_type: str = "application/octet-stream"
    web_url: str | None = None
    download_url: str | None = None
    is_previewable: bool = False


class FileListing(CamelModel):
    files: list[DriveFile] = Field(default_factory=list)
    folder_initialized: bool
    share_url: str | None = None
    message: str | None = None
