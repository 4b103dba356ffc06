from __future__ import annotations

from tests.conftest import json_reply


def test_health(client, backend):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert r.headers["x-request-id"]
    assert backend.calls == []


def test_request_id_is_propagated_to_backend(client, backend):
    backend.on("GET", "/api/admin/categories", json_reply(200, {"success": True}))
    r = client.get("/api/admin/categories", headers={"X-Request-ID": "req-123"})
    assert r.headers["x-request-id"] == "req-123"
    assert backend.calls[0].headers["x-request-id"] == "req-123"


def test_minted_request_id_is_forwarded(client, backend):
    backend.on("GET", "/api/admin/categories", json_reply(200, {"success": True}))
    r = client.get("/api/admin/categories")
    assert backend.calls[0].headers["x-request-id"] == r.headers["x-request-id"]
