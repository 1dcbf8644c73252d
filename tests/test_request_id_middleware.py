from __future__ import annotations


def test_preserves_incoming_request_id_header(client):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert len(generated) > 0

    duration = resp.headers.get("X-Request-Duration-ms")
    assert duration is not None
    assert float(duration) >= 0


def test_error_responses_carry_request_id(client):
    resp = client.get("/api/employees", headers={"X-Request-ID": "err-1"})

    assert resp.status_code == 401
    assert resp.headers.get("X-Request-ID") == "err-1"
