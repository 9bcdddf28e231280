"""External (camelCase) to storage (snake_case) field mapping for projects.

The table is checked against ``ProjectModel`` at import time: adding a
column without a mapping, or mapping to a column that does not exist, fails
immediately instead of silently dropping updates.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from surveydisco.db.models import ProjectModel
from surveydisco.exceptions import InvalidInputError


class ProjectField(str, Enum):
    ID = "id"
    JOB_NUMBER = "jobNumber"
    CLIENT = "client"
    EMAIL = "email"
    PHONE = "phone"
    PREPARED_FOR = "preparedFor"
    CONTACT = "contact"
    ADDRESS = "address"
    GEO_ADDRESS = "geoAddress"
    PARCEL = "parcel"
    AREA = "area"
    SERVICE_TYPE = "serviceType"
    COST_ESTIMATE = "costEstimate"
    STATUS = "status"
    NOTES = "notes"
    TRAVEL_TIME = "travelTime"
    TRAVEL_DISTANCE = "travelDistance"
    ONEDRIVE_FOLDER_URL = "onedriveFolderUrl"
    CREATED = "created"
    MODIFIED = "modified"


PROJECT_COLUMNS: dict[ProjectField, str] = {
    ProjectField.ID: "id",
    ProjectField.JOB_NUMBER: "job_number",
    ProjectField.CLIENT: "client",
    ProjectField.EMAIL: "email",
    ProjectField.PHONE: "phone",
    ProjectField.PREPARED_FOR: "prepared_for",
    ProjectField.CONTACT: "contact",
    ProjectField.ADDRESS: "address",
    ProjectField.GEO_ADDRESS: "geo_address",
    ProjectField.PARCEL: "parcel",
    ProjectField.AREA: "area",
    ProjectField.SERVICE_TYPE: "service_type",
    ProjectField.COST_ESTIMATE: "cost_estimate",
    ProjectField.STATUS: "status",
    ProjectField.NOTES: "notes",
    ProjectField.TRAVEL_TIME: "travel_time",
    ProjectField.TRAVEL_DISTANCE: "travel_distance",
    ProjectField.ONEDRIVE_FOLDER_URL: "onedrive_folder_url",
    ProjectField.CREATED: "created",
    ProjectField.MODIFIED: "modified",
}

# Write-once, provenance, or managed by a dedicated operation
READ_ONLY_FIELDS: frozenset[ProjectField] = frozenset(
    {
        ProjectField.ID,
        ProjectField.JOB_NUMBER,
        ProjectField.CREATED,
        ProjectField.MODIFIED,
        ProjectField.STATUS,
        ProjectField.NOTES,
        ProjectField.ONEDRIVE_FOLDER_URL,
    }
)


def _check_mapping() -> None:
    missing = set(ProjectField) - set(PROJECT_COLUMNS)
    if missing:
        raise RuntimeError(f"Unmapped project fields: {sorted(f.value for f in missing)}")

    columns = set(ProjectModel.__table__.columns.keys())
    mapped = set(PROJECT_COLUMNS.values())
    if mapped != columns:
        raise RuntimeError(
            "Project field mapping out of sync with table: "
            f"unmapped columns={sorted(columns - mapped)} unknown columns={sorted(mapped - columns)}"
        )


_check_mapping()


def translate_updates(updates: Mapping[str, Any]) -> dict[str, str | None]:
    """Translate a camelCase partial update into column assignments.

    Unknown field names and non-text values raise ``InvalidInputError``.
    Read-only fields are ignored.
    """
    columns: dict[str, str | None] = {}
    for name, value in updates.items():
        try:
            field = ProjectField(name)
        except ValueError:
            raise InvalidInputError(f"Unknown field: {name}") from None

        if field in READ_ONLY_FIELDS:
            continue
        if value is not None and not isinstance(value, str):
            raise InvalidInputError(f"Field {name} must be a string")

        columns[PROJECT_COLUMNS[field]] = value
    return columns
