"""Translate domain exceptions into ``HTTPException`` responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from surveydisco.exceptions import (
    FileTooLargeError,
    InvalidInputError,
    InvalidShareUrlError,
    JobNumberExhaustedError,
    NotFoundError,
    OneDriveError,
    OneDriveErrorCategory,
    ServiceUnavailableError,
    SurveyDiscoError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

ONEDRIVE_STATUS: dict[OneDriveErrorCategory, int] = {
    OneDriveErrorCategory.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    OneDriveErrorCategory.AUTHENTICATION_FAILED: status.HTTP_401_UNAUTHORIZED,
    OneDriveErrorCategory.THROTTLED: status.HTTP_429_TOO_MANY_REQUESTS,
    OneDriveErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OneDriveErrorCategory.FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_STATUS_BY_TYPE: tuple[tuple[type[SurveyDiscoError], int], ...] = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (InvalidShareUrlError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (JobNumberExhaustedError, status.HTTP_409_CONFLICT),
    (FileTooLargeError, 413),
    (ServiceUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error(exc: SurveyDiscoError) -> HTTPException:
    if isinstance(exc, OneDriveError):
        return HTTPException(status_code=ONEDRIVE_STATUS[exc.category], detail=exc.message)

    for error_type, status_code in _STATUS_BY_TYPE:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))

    logger.error("unmapped_domain_error: %s: %s", type(exc).__name__, exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
