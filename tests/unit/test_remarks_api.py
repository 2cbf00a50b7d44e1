"""FastAPI-level tests for the remark endpoints."""

from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.buq.api.dependencies import get_remark_service, get_settings
from backend.buq.api.routers import health, remarks
from backend.buq.config import PaginationConfig, Settings
from backend.buq.domain.audit import AuditTrail, InMemoryAuditLogRepository
from backend.buq.domain.remark import InMemoryRemarkRepository, RemarkService


def _build_client() -> TestClient:
    service = RemarkService(
        repository=InMemoryRemarkRepository(),
        audit_trail=AuditTrail(InMemoryAuditLogRepository()),
    )
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(remarks.router)
    app.dependency_overrides[get_remark_service] = lambda: service
    app.dependency_overrides[get_settings] = lambda: Settings(
        environment="test",
        pagination=PaginationConfig(default_page_size=10, max_page_size=50),
    )
    return TestClient(app)


def test_health_reports_ok():
    resp = _build_client().get("/api/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "environment": "test"}


def test_create_ignores_client_id_and_returns_201():
    client = _build_client()
    client_id = str(uuid4())

    resp = client.post("/api/remarks", json={"id": client_id, "name": "Stockout"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] != client_id
    assert body["name"] == "Stockout"
    assert body["description"] is None
    assert body["version"] == 0


def test_create_blank_name_is_422_with_field_details():
    resp = _build_client().post("/api/remarks", json={"name": ""})

    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error_code"] == "BUQ-INVALID-REQUEST"
    assert detail["details"]["fields"] == {"name": "name must not be blank"}


def test_get_unknown_remark_is_404():
    resp = _build_client().get(f"/api/remarks/{uuid4()}")

    assert resp.status_code == 404
    assert resp.json()["detail"]["error_code"] == "BUQ-NOT-FOUND"


def test_search_uses_configured_default_size_and_ignores_paging_keys():
    client = _build_client()
    for index in range(25):
        client.post("/api/remarks", json={"name": f"remark {index:02d}"})

    resp = client.get("/api/remarks", params={"sort": "name,desc"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["size"] == 10
    assert body["number_of_elements"] == 10
    assert body["total_elements"] == 25
    assert body["total_pages"] == 3
    assert body["content"][0]["name"] == "remark 24"


def test_search_by_name_and_malformed_id():
    client = _build_client()
    client.post("/api/remarks", json={"name": "Stockout"})
    client.post("/api/remarks", json={"name": "Damaged"})

    found = client.get("/api/remarks", params={"name": "stock"})
    bad = client.get("/api/remarks", params={"id": "nope"})

    assert [item["name"] for item in found.json()["content"]] == ["Stockout"]
    assert bad.status_code == 422
    assert list(bad.json()["detail"]["details"]["fields"]) == ["id"]


def test_invalid_paging_is_422():
    client = _build_client()

    assert client.get("/api/remarks", params={"page": -1}).status_code == 422
    assert client.get("/api/remarks", params={"sort": "colour"}).status_code == 422


def test_update_conflict_and_mismatch():
    client = _build_client()
    created = client.post("/api/remarks", json={"name": "Stockout"}).json()
    remark_id = created["id"]

    ok = client.put(f"/api/remarks/{remark_id}", json={"name": "Stockout 2", "version": 0})
    stale = client.put(f"/api/remarks/{remark_id}", json={"name": "Stockout 3", "version": 0})
    mismatch = client.put(
        f"/api/remarks/{remark_id}", json={"id": str(uuid4()), "name": "x"}
    )
    missing = client.put(f"/api/remarks/{uuid4()}", json={"name": "x"})

    assert ok.status_code == 200
    assert ok.json()["version"] == 1
    assert stale.status_code == 409
    assert stale.json()["detail"]["error_code"] == "BUQ-CONFLICT"
    assert mismatch.status_code == 422
    assert missing.status_code == 404


def test_delete_then_404():
    client = _build_client()
    remark_id = client.post("/api/remarks", json={"name": "Stockout"}).json()["id"]

    assert client.delete(f"/api/remarks/{remark_id}").status_code == 204
    assert client.delete(f"/api/remarks/{remark_id}").status_code == 404


def test_audit_log_filters_by_author_and_property():
    client = _build_client()
    remark_id = client.post(
        "/api/remarks", json={"name": "Stockout"}, headers={"X-Actor-Id": "alice"}
    ).json()["id"]
    client.put(
        f"/api/remarks/{remark_id}",
        json={"name": "Stockout", "description": "empty shelves"},
        headers={"X-Actor-Id": "bob"},
    )

    everything = client.get(f"/api/remarks/{remark_id}/auditLog").json()
    by_bob = client.get(
        f"/api/remarks/{remark_id}/auditLog", params={"author": "bob"}
    ).json()
    by_name = client.get(
        f"/api/remarks/{remark_id}/auditLog",
        params={"changed_property_name": "name"},
    ).json()

    assert everything["total_elements"] == 2
    assert [entry["property_name"] for entry in by_bob["content"]] == ["description"]
    assert by_bob["content"][0]["right"] == "empty shelves"
    assert [entry["author"] for entry in by_name["content"]] == ["alice"]
    assert client.get(f"/api/remarks/{uuid4()}/auditLog").status_code == 404
