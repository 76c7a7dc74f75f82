"""HTTP-level tests; each client gets a fresh in-memory database."""

import pytest
from fastapi.testclient import TestClient

from app.auth import create_access_token
from app.main import app
from app.stories.models import UserRole


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _auth(role=UserRole.admin, subject="user-1"):
    return {"Authorization": f"Bearer {create_access_token(subject, role)}"}


def _upload(client, content, filename="stories.csv", headers=None):
    return client.post(
        "/api/v1/stories/import/csv",
        files={"file": (filename, content, "text/csv")},
        headers=headers if headers is not None else _auth(),
    )


class TestAuth:
    def test_login_issues_admin_token(self, client):
        response = client.post(
            "/api/v1/auth/login", json={"username": "admin", "password": "test-password"}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        listed = client.get("/api/v1/stories/", headers={"Authorization": f"Bearer {token}"})
        assert listed.status_code == 200

    def test_bad_credentials(self, client):
        response = client.post("/api/v1/auth/login", json={"username": "admin", "password": "no"})
        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_invalid_token(self, client):
        response = client.get("/api/v1/stories/", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401


class TestImportEndpoint:
    def test_partial_import_report(self, client):
        content = (
            "idea_title,idea_description,interviewees\n"
            'Fixed Test Story 1,Valid,"""Smith, John"""\n'
            ",Valid description\n"
        ).encode()
        response = _upload(client, content)

        assert response.status_code == 200
        body = response.json()
        assert body["imported"] == 1
        assert body["total"] == 2
        assert body["errors"] == [{"row": 2, "title": None, "error": "missing title"}]
        assert body["approval_status"] == "approved"

        stories = client.get("/api/v1/stories/", headers=_auth()).json()
        assert len(stories) == 1
        assert stories[0]["interviewees"] == ["Smith, John"]
        assert stories[0]["approval_status"] == "approved"

    def test_teacher_import_lands_pending(self, client):
        response = _upload(client, b"idea_title\nA\n", headers=_auth(UserRole.teacher))
        assert response.json()["approval_status"] == "pending"

    def test_empty_file_is_parse_error(self, client):
        response = _upload(client, b"")
        assert response.status_code == 400
        assert response.json()["error"] == "PARSE_ERROR"

    def test_wrong_extension(self, client):
        response = _upload(client, b"idea_title\nA\n", filename="stories.txt")
        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_template_download_round_trips(self, client):
        template = client.get("/api/v1/stories/import/template", headers=_auth())
        assert template.status_code == 200
        assert template.headers["content-type"].startswith("text/csv")

        response = _upload(client, template.content)
        body = response.json()
        assert body["imported"] == 2
        assert body["errors"] == []


class TestStoryEndpoints:
    def test_submit_and_approve(self, client):
        created = client.post(
            "/api/v1/stories/",
            json={"title": "Mural", "tags": ["Art"], "coverage_start_date": "2024-04-01"},
            headers=_auth(UserRole.student, "student-1"),
        )
        assert created.status_code == 201
        story = created.json()
        assert story["approval_status"] == "pending"
        assert story["coverage_start_date"] == "2024-04-01"

        forbidden = client.post(
            f"/api/v1/stories/{story['id']}/approve", headers=_auth(UserRole.teacher)
        )
        assert forbidden.status_code == 403

        approved = client.post(f"/api/v1/stories/{story['id']}/approve", headers=_auth())
        assert approved.status_code == 200
        assert approved.json()["approval_status"] == "approved"

    def test_missing_story(self, client):
        response = client.get("/api/v1/stories/nope", headers=_auth())
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_health(self, client):
        assert client.get("/api/v1/health").json() == {"status": "healthy"}
