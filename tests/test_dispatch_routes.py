"""Tests for the dispatch endpoints."""

import pytest
from fastapi.testclient import TestClient


def test_create_and_list_dispatches(client: TestClient, auth_headers) -> None:
    created = client.post(
        "/api/dispatch",
        json={"dispatchedKg": 120.5, "dispatchDate": "2024-03-05", "notes": "truck 2"},
        headers=auth_headers,
    )

    assert created.status_code == 201
    dispatch = created.json()["dispatch"]
    assert dispatch["dispatchedKg"] == 120.5
    assert dispatch["dispatchDate"].startswith("2024-03-05T00:00:00")

    client.post("/api/dispatch", json={"dispatchedKg": 10, "dispatchDate": "2024-03-06"}, headers=auth_headers)
    listed = client.get("/api/dispatch", headers=auth_headers).json()["dispatches"]
    assert [d["dispatchedKg"] for d in listed] == [10, 120.5]


@pytest.mark.parametrize(
    "payload",
    [
        {"dispatchedKg": 0, "dispatchDate": "2024-03-05"},
        {"dispatchedKg": -5, "dispatchDate": "2024-03-05"},
        {"dispatchedKg": 5},
    ],
)
def test_invalid_dispatch(client: TestClient, auth_headers, payload: dict) -> None:
    response = client.post("/api/dispatch", json=payload, headers=auth_headers)

    assert response.status_code == 400


def test_dispatches_are_owner_scoped(client: TestClient, auth_headers, other_auth_headers) -> None:
    client.post("/api/dispatch", json={"dispatchedKg": 1, "dispatchDate": "2024-03-05"}, headers=auth_headers)

    assert client.get("/api/dispatch", headers=other_auth_headers).json()["dispatches"] == []
