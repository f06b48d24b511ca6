"""
Test suite for application endpoints.
"""

import pytest

from app.crud import application as application_crud
from app.schemas.application import Application


@pytest.fixture
def application(client, job_seeker, job):
    response = client.post("/v1/applications", json={
        "job_seeker_id": job_seeker["id"],
        "job_id": job["id"],
        "cover_letter": "I am very excited about this opportunity.",
        "resume": "https://example.com/resume.pdf",
    })
    assert response.status_code == 201
    return response.json()


class TestApplicationCreation:

    def test_status_defaults_to_pending(self, application):
        assert application["status"] == "pending"
        assert application["applied_at"]

    def test_explicit_status(self, client, job_seeker, job):
        response = client.post("/v1/applications", json={
            "job_seeker_id": job_seeker["id"],
            "job_id": job["id"],
            "status": "reviewed",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "reviewed"
        assert data["cover_letter"] is None
        assert data["resume"] is None

    def test_job_id_is_required(self, client, job_seeker):
        response = client.post("/v1/applications", json={"job_seeker_id": job_seeker["id"]})

        assert response.status_code == 400
        assert "job_id" in response.json()["message"]

    def test_unknown_status(self, client, job_seeker, job):
        response = client.post("/v1/applications", json={
            "job_seeker_id": job_seeker["id"],
            "job_id": job["id"],
            "status": "withdrawn",
        })
        assert response.status_code == 400


class TestApplicationRetrieval:

    def test_get_by_id(self, client, application):
        response = client.get(f"/v1/applications/{application['id']}")

        assert response.status_code == 200
        assert response.json() == application

    def test_get_missing(self, client):
        response = client.get("/v1/applications/99999")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_list(self, client, application):
        data = client.get("/v1/applications?limit=5").json()

        assert data == {"page": 1, "count": 1, "items": [application]}


class TestApplicationUpdate:

    def test_status_change_keeps_other_fields(self, client, application):
        response = client.put(f"/v1/applications/{application['id']}", json={"status": "accepted"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "accepted"
        assert data["cover_letter"] == application["cover_letter"]
        assert data["resume"] == application["resume"]
        assert data["applied_at"] == application["applied_at"]
        assert client.get(f"/v1/applications/{application['id']}").json() == data

    def test_empty_update_is_a_no_op(self, client, application):
        response = client.put(f"/v1/applications/{application['id']}", json={})

        assert response.status_code == 200
        assert response.json() == application

    def test_job_and_seeker_cannot_change(self, client, application):
        data = client.put(f"/v1/applications/{application['id']}", json={"job_id": 777, "job_seeker_id": 888}).json()

        assert data["job_id"] == application["job_id"]
        assert data["job_seeker_id"] == application["job_seeker_id"]

    def test_update_missing(self, client):
        assert client.put("/v1/applications/99999", json={"status": "reviewed"}).status_code == 404

    def test_application_removed_before_write_is_not_found(self, client, monkeypatch, application):
        stale = Application.model_validate(application)
        assert client.delete(f"/v1/applications/{stale.id}").status_code == 204
        monkeypatch.setattr(application_crud, "get_by_id", lambda db, application_id: stale)

        response = client.put(f"/v1/applications/{stale.id}", json={"status": "reviewed"})

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"


class TestApplicationDeletion:

    def test_delete(self, client, application):
        assert client.delete(f"/v1/applications/{application['id']}").status_code == 204
        assert client.get(f"/v1/applications/{application['id']}").status_code == 404

    def test_delete_missing(self, client):
        assert client.delete("/v1/applications/99999").status_code == 204

    def test_deleting_the_job_leaves_applications(self, client, application, job):
        assert client.delete(f"/v1/jobs/{job['id']}").status_code == 204

        response = client.get(f"/v1/applications/{application['id']}")
        assert response.status_code == 200
        assert response.json()["job_id"] == job["id"]
