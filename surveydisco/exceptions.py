"""Exception hierarchy shared by the SurveyDisco services and web layer."""

from __future__ import annotations

from enum import Enum


class SurveyDiscoError(Exception):
    """Base class for all domain errors."""


class InvalidInputError(SurveyDiscoError):
    """Missing or malformed caller input."""


class NotFoundError(SurveyDiscoError):
    """Requested entity does not exist."""


class UnauthorizedError(SurveyDiscoError):
    """Caller-supplied admin secret did not match."""


class ServiceUnavailableError(SurveyDiscoError):
    """A downstream collaborator is not configured or returned nothing usable."""


class JobNumberExhaustedError(SurveyDiscoError):
    """All 99 job numbers for the current month are taken."""


class OneDriveErrorCategory(str, Enum):
    """Stable categories for cloud-storage failures."""

    SERVICE_UNAVAILABLE = "service_unavailable"
    AUTHENTICATION_FAILED = "authentication_failed"
    THROTTLED = "throttled"
    NOT_FOUND = "not_found"
    FAILED = "failed"


ONEDRIVE_MESSAGES: dict[OneDriveErrorCategory, str] = {
    OneDriveErrorCategory.SERVICE_UNAVAILABLE: "OneDrive service unavailable - missing credentials",
    OneDriveErrorCategory.AUTHENTICATION_FAILED: "OneDrive authentication failed - please sign in again",
    OneDriveErrorCategory.THROTTLED: "OneDrive service is busy - please try again in a moment",
    OneDriveErrorCategory.NOT_FOUND: "OneDrive folder not found - it may have been moved or deleted",
    OneDriveErrorCategory.FAILED: "Failed to access OneDrive folder",
}


class OneDriveError(SurveyDiscoError):
    """Classified Microsoft Graph / identity platform failure."""

    def __init__(self, category: OneDriveErrorCategory, detail: str | None = None):
        self.category = category
        self.detail = detail
        super().__init__(ONEDRIVE_MESSAGES[category])

    @property
    def message(self) -> str:
        return ONEDRIVE_MESSAGES[self.category]


class InvalidShareUrlError(SurveyDiscoError):
    """Stored share link cannot be resolved to a drive item."""

    def __init__(self, share_url: str | None = None):
        self.share_url = share_url
        super().__init__("Invalid OneDrive share URL")


class FileTooLargeError(SurveyDiscoError):
    """Declared file size exceeds the caller's limit."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(f"File is too large ({size} bytes). Maximum size: {max_size} bytes")
