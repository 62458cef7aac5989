from pathlib import Path
from urllib.parse import urlparse

from fastapi.testclient import TestClient

from lurm.application.services.deletion_service import InFlightRegistry
from lurm.core.config import AppPaths
from lurm.core.errors import RemoteWriteError
from lurm.infrastructure.db.repos.resource_repo import ResourceRepo
from lurm.infrastructure.identity.token_provider import StaticTokenIdentityProvider
from lurm.infrastructure.storage.store import BucketStore
from lurm.web.app import create_app

ADMIN = {"Authorization": "Bearer admin-token"}
STUDENT = {"Authorization": "Bearer student-token"}


def _client(tmp_path: Path) -> TestClient:
    lurm_dir = tmp_path / "proj" / ".lurm"
    paths = AppPaths(
        project_root=tmp_path / "proj",
        lurm_dir=lurm_dir,
        db_path=lurm_dir / "lurm.db",
        storage_dir=lurm_dir / "storage",
    )
    provider = StaticTokenIdentityProvider(admin_tokens=("admin-token",), user_tokens=("student-token",))
    return TestClient(create_app(paths, identity_provider=provider))


def _form(**overrides) -> dict[str, str]:
    values = {
        "name": "Advanced Calculus Textbook",
        "type": "Textbook",
        "course": "MTH205",
        "year": "2022",
        "description": "In-depth textbook for advanced calculus students.",
        "keywords": "calculus, math",
    }
    values.update(overrides)
    return values


def test_web_app_end_to_end_smoke(tmp_path: Path) -> None:
    client = _client(tmp_path)

    r = client.post("/api/init")
    assert r.status_code == 200

    r = client.post(
        "/api/resources",
        data=_form(),
        files={"file": ("calc.epub", b"epub-bytes", "application/epub+zip")},
        headers=ADMIN,
    )
    assert r.status_code == 200
    created = r.json()["resource"]
    assert r.json()["notification"]["severity"] == "success"
    assert created["file_mime_type"] == "application/epub+zip"

    r = client.post(
        "/api/resources",
        data=_form(name="Quantum Notes", type="Lecture Notes", course="PHY301", year="2023", keywords="quantum"),
        headers=ADMIN,
    )
    assert r.status_code == 200

    r = client.get("/api/resources")
    payload = r.json()
    assert payload["count"] == 2
    assert payload["facets"] == {
        "years": [2023, 2022],
        "types": ["Lecture Notes", "Textbook"],
        "courses": ["MTH205", "PHY301"],
    }

    r = client.get("/api/resources", params={"type": "Textbook", "search": "CALCULUS"})
    assert [item["id"] for item in r.json()["resources"]] == [created["id"]]
    assert r.json()["facets"]["courses"] == ["MTH205", "PHY301"]

    r = client.get(f"/api/resources/{created['id']}")
    assert r.status_code == 200
    assert r.json()["resource"]["keywords"] == ["calculus", "math"]

    r = client.get(urlparse(created["file_url"]).path)
    assert r.status_code == 200
    assert r.content == b"epub-bytes"

    r = client.delete(f"/api/resources/{created['id']}", headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["status"] == "full_success"
    assert r.json()["storage_outcome"] == "deleted"

    r = client.get(urlparse(created["file_url"]).path)
    assert r.status_code == 404

    r = client.delete(f"/api/resources/{created['id']}", headers=ADMIN)
    assert r.status_code == 404


def test_admin_actions_require_admin_token(tmp_path: Path) -> None:
    client = _client(tmp_path)

    r = client.post("/api/resources", data=_form())
    assert r.status_code == 401

    r = client.post("/api/resources", data=_form(), headers=STUDENT)
    assert r.status_code == 403

    created = client.post("/api/resources", data=_form(), headers=ADMIN).json()["resource"]

    assert client.delete(f"/api/resources/{created['id']}").status_code == 401
    assert client.delete(f"/api/resources/{created['id']}", headers=STUDENT).status_code == 403
    assert client.get(f"/api/resources/{created['id']}").status_code == 200


def test_upload_validation_errors_are_bad_requests(tmp_path: Path) -> None:
    client = _client(tmp_path)

    r = client.post("/api/resources", data=_form(year="soon"), headers=ADMIN)
    assert r.status_code == 400
    assert "Year" in r.json()["detail"]

    assert client.get("/api/resources").json()["count"] == 0


def test_missing_form_field_is_a_bad_request(tmp_path: Path) -> None:
    client = _client(tmp_path)

    form = _form()
    del form["name"]
    r = client.post("/api/resources", data=form, headers=ADMIN)
    assert r.status_code == 400
    assert r.json()["detail"] == "Missing required fields: name"


def test_non_ascii_bearer_token_is_unauthorized(tmp_path: Path) -> None:
    client = _client(tmp_path)
    created = client.post("/api/resources", data=_form(), headers=ADMIN).json()["resource"]

    r = client.delete(
        f"/api/resources/{created['id']}",
        headers={"Authorization": "Bearer café".encode("latin-1")},
    )
    assert r.status_code == 401
    assert client.get(f"/api/resources/{created['id']}").status_code == 200


def test_upload_storage_failure_returns_notification(tmp_path: Path, monkeypatch) -> None:
    client = _client(tmp_path)

    def refuse(self, object_path, data, *, upsert=False):
        raise RemoteWriteError("Bucket not found")

    monkeypatch.setattr(BucketStore, "upload_object", refuse)
    r = client.post(
        "/api/resources",
        data=_form(),
        files={"file": ("calc.pdf", b"pdf-bytes", "application/pdf")},
        headers=ADMIN,
    )
    assert r.status_code == 502
    body = r.json()
    assert body["ok"] is False
    assert body["notification"] == {
        "severity": "error",
        "title": "File Upload Failed",
        "description": "Bucket not found",
    }
    assert client.get("/api/resources").json()["count"] == 0


def test_upload_insert_failure_returns_notification(tmp_path: Path, monkeypatch) -> None:
    client = _client(tmp_path)

    def reject(self, resource):
        raise RemoteWriteError('duplicate key value violates unique constraint "resources_pkey"')

    monkeypatch.setattr(ResourceRepo, "insert", reject)
    r = client.post("/api/resources", data=_form(), headers=ADMIN)
    assert r.status_code == 502
    notification = r.json()["notification"]
    assert notification["title"] == "Resource Creation Failed"
    assert notification["description"] == 'duplicate key value violates unique constraint "resources_pkey"'


def test_delete_row_failure_returns_error_notification(tmp_path: Path, monkeypatch) -> None:
    client = _client(tmp_path)
    created = client.post("/api/resources", data=_form(), headers=ADMIN).json()["resource"]

    def refuse(self, resource_id):
        raise RemoteWriteError("permission denied for table resources")

    monkeypatch.setattr(ResourceRepo, "delete", refuse)
    r = client.delete(f"/api/resources/{created['id']}", headers=ADMIN)
    assert r.status_code == 502
    body = r.json()
    assert body["detail"] == "permission denied for table resources"
    assert body["notification"] == {
        "severity": "error",
        "title": "Deletion Failed",
        "description": "permission denied for table resources",
    }

    monkeypatch.undo()
    assert client.get(f"/api/resources/{created['id']}").status_code == 200


def test_delete_already_in_flight_is_a_conflict(tmp_path: Path, monkeypatch) -> None:
    client = _client(tmp_path)
    created = client.post("/api/resources", data=_form(), headers=ADMIN).json()["resource"]

    monkeypatch.setattr(InFlightRegistry, "acquire", lambda self, resource_id: False)
    r = client.delete(f"/api/resources/{created['id']}", headers=ADMIN)
    assert r.status_code == 409
    assert "already being deleted" in r.json()["detail"]

    monkeypatch.undo()
    assert client.get(f"/api/resources/{created['id']}").status_code == 200
