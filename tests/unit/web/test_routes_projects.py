"""Tests for surveydisco.web.routes.projects - project card routes."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select

from surveydisco.core.security import AdminGuard
from surveydisco.db.models import ProjectModel
from surveydisco.enrichment import TravelInfo
from surveydisco.extraction import FieldExtractor, LLMExtractor
from surveydisco.models import ParsedProject
from surveydisco.projects import ProjectService, repository
from surveydisco.web.dependencies import get_project_service


@pytest.fixture
def maps():
    client = MagicMock()
    client.validate_address = AsyncMock(return_value="123 Main St, Atlanta, GA 30303, USA")
    client.calculate_travel = AsyncMock(return_value=TravelInfo("25 min", "12.4 mi"))
    return client


@pytest.fixture
def service(app, llm_config, admin_config, maps):
    service = ProjectService(
        extractor=FieldExtractor(LLMExtractor(llm_config)),
        maps=maps,
        admin_guard=AdminGuard(admin_config),
    )
    app.dependency_overrides[get_project_service] = lambda: service
    return service


@pytest.fixture
def project(run_db, parsed_project):
    return run_db(lambda session: repository.insert_project(session, parsed_project))


def _count(run_db) -> int:
    async def count(session):
        return (await session.execute(select(func.count(ProjectModel.id)))).scalar_one()

    return run_db(count)


class TestListAndGet:
    def test_empty(self, client):
        response = client.get("/api/projects")

        assert response.status_code == 200
        assert response.json() == []

    def test_newest_first_in_camel_case(self, client, run_db, project):
        second = run_db(
            lambda session: repository.insert_project(session, ParsedProject(job_number="250902"))
        )

        data = client.get("/api/projects").json()

        assert [p["id"] for p in data] == [second.id, project.id]
        assert data[1]["jobNumber"] == "250901"
        assert data[1]["geoAddress"] == "123 Main St, Atlanta, GA 30303, USA"

    def test_get_one(self, client, project):
        response = client.get(f"/api/projects/{project.id}")

        assert response.status_code == 200
        assert response.json()["client"] == "John Smith"

    def test_get_missing(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="surveydisco.web.routes.projects"):
            response = client.get("/api/projects/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Project not found"
        assert "project_lookup_rejected: project_id=999" in caplog.text


class TestParse:
    def test_creates_project(self, client, service, run_db):
        text = "John Smith needs a boundary survey for 123 Main Street, call 404-555-1212"

        response = client.post("/api/projects/parse", json={"text": text})

        assert response.status_code == 200
        data = response.json()
        assert data["client"] == "John Smith"
        assert data["serviceType"] == "Boundary Survey"
        assert data["status"] == "Regex"
        assert data["travelTime"] == "25 min"
        assert data["notes"] == text
        assert _count(run_db) == 1

    @pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": "   "}])
    def test_text_required(self, client, service, run_db, body):
        response = client.post("/api/projects/parse", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Text is required"
        assert _count(run_db) == 0


class TestUpdate:
    def test_partial_update(self, client, service, project):
        response = client.patch(
            f"/api/projects/{project.id}", json={"client": "Jane Doe", "serviceType": "ALTA Survey"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["client"] == "Jane Doe"
        assert data["serviceType"] == "ALTA Survey"
        assert data["email"] == "john@test.com"

    def test_only_read_only_fields(self, client, service, project):
        response = client.patch(
            f"/api/projects/{project.id}", json={"id": 42, "jobNumber": "999999"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "No valid fields to update"

    def test_unknown_field(self, client, service, project):
        response = client.patch(f"/api/projects/{project.id}", json={"colour": "red"})

        assert response.status_code == 400

    def test_missing_project(self, client, service):
        response = client.patch("/api/projects/999", json={"client": "Jane"})

        assert response.status_code == 404


class TestRefreshTravel:
    def test_recomputes_travel(self, client, service, maps, project):
        maps.calculate_travel.return_value = TravelInfo("1 hr 5 min", "48.2 mi")

        response = client.post(f"/api/projects/{project.id}/refresh-travel")

        assert response.status_code == 200
        assert response.json()["travelTime"] == "1 hr 5 min"
        assert response.json()["travelDistance"] == "48.2 mi"

    def test_no_address(self, client, service, run_db):
        bare = run_db(
            lambda session: repository.insert_project(session, ParsedProject(job_number="250903"))
        )

        response = client.post(f"/api/projects/{bare.id}/refresh-travel")

        assert response.status_code == 400

    def test_routing_unavailable(self, client, service, maps, project):
        maps.calculate_travel.return_value = None

        response = client.post(f"/api/projects/{project.id}/refresh-travel")

        assert response.status_code == 503
        assert response.json()["detail"] == "Failed to calculate travel time"


class TestDelete:
    def test_wrong_password_leaves_row(self, client, service, run_db, project):
        response = client.request(
            "DELETE", f"/api/projects/{project.id}", json={"password": "guess"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid password"
        assert _count(run_db) == 1

    def test_missing_body(self, client, service, run_db, project):
        response = client.delete(f"/api/projects/{project.id}")

        assert response.status_code == 401
        assert _count(run_db) == 1

    def test_deletes_with_password(self, client, service, run_db, project):
        response = client.request(
            "DELETE", f"/api/projects/{project.id}", json={"password": "s3cret"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Project deleted successfully"
        assert data["deleted"]["jobNumber"] == "250901"
        assert _count(run_db) == 0

    def test_missing_project_after_password(self, client, service):
        response = client.request("DELETE", "/api/projects/999", json={"password": "s3cret"})

        assert response.status_code == 404
