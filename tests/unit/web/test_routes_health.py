"""Tests for surveydisco.web.routes.health and surveydisco.web.errors."""

from __future__ import annotations

import pytest

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
from surveydisco.web.errors import http_error


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "OK",
        "service": "SurveyDisco.ai",
        "database": "connected",
    }


class TestHttpError:
    @pytest.mark.parametrize(
        "exc,status_code",
        [
            (InvalidInputError("bad"), 400),
            (InvalidShareUrlError("x"), 400),
            (UnauthorizedError("Invalid password"), 401),
            (NotFoundError("Project not found"), 404),
            (JobNumberExhaustedError("full"), 409),
            (FileTooLargeError(20, 10), 413),
            (ServiceUnavailableError("down"), 503),
            (SurveyDiscoError("other"), 500),
        ],
    )
    def test_status_codes(self, exc, status_code):
        assert http_error(exc).status_code == status_code

    @pytest.mark.parametrize(
        "category,status_code",
        [
            (OneDriveErrorCategory.SERVICE_UNAVAILABLE, 503),
            (OneDriveErrorCategory.AUTHENTICATION_FAILED, 401),
            (OneDriveErrorCategory.THROTTLED, 429),
            (OneDriveErrorCategory.NOT_FOUND, 404),
            (OneDriveErrorCategory.FAILED, 500),
        ],
    )
    def test_onedrive_categories(self, category, status_code):
        error = http_error(OneDriveError(category, detail="internal detail"))

        assert error.status_code == status_code
        assert "internal detail" not in error.detail

    def test_detail_is_message(self):
        assert http_error(NotFoundError("Todo not found")).detail == "Todo not found"
