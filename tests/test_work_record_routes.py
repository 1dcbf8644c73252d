"""Tests for the work record endpoints."""

import pytest
from fastapi.testclient import TestClient


class TestWorkRecordCreate:
    def test_date_only_is_start_of_day_utc(
        self, client: TestClient, auth_headers, create_employee
    ) -> None:
        employee = create_employee(auth_headers, name="Ana")

        response = client.post(
            "/api/work-records",
            json={"employeeId": employee["id"], "date": "2024-03-01", "kilograms": 12.5, "notes": "wet"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        record = response.json()["workRecord"]
        assert record["date"].startswith("2024-03-01T00:00:00")
        assert record["kilograms"] == 12.5
        assert record["employee"] == {"id": employee["id"], "name": "Ana"}

    def test_iso_datetime_with_offset_is_normalized(
        self, client: TestClient, auth_headers, create_employee
    ) -> None:
        employee = create_employee(auth_headers)

        record = client.post(
            "/api/work-records",
            json={"employeeId": employee["id"], "date": "2024-03-01T22:30:00-03:00", "kilograms": 1},
            headers=auth_headers,
        ).json()["workRecord"]

        assert record["date"].startswith("2024-03-02T01:30:00")

    @pytest.mark.parametrize(
        "payload",
        [
            {"date": "01/03/2024", "kilograms": 1},
            {"date": "2024-03-01", "kilograms": -1},
            {"date": "2024-03-01", "kilograms": 10000},
        ],
    )
    def test_invalid_payload(self, client: TestClient, auth_headers, create_employee, payload: dict) -> None:
        employee = create_employee(auth_headers)

        response = client.post(
            "/api/work-records", json={"employeeId": employee["id"], **payload}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_employee_of_other_owner_is_404(
        self, client: TestClient, auth_headers, other_auth_headers, create_employee
    ) -> None:
        employee = create_employee(auth_headers)

        response = client.post(
            "/api/work-records",
            json={"employeeId": employee["id"], "date": "2024-03-01", "kilograms": 1},
            headers=other_auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "employee_not_found"


class TestWorkRecordQueries:
    def test_list_ordered_by_date_desc_with_filters(
        self, client: TestClient, auth_headers, create_employee, create_work_record
    ) -> None:
        ana = create_employee(auth_headers, name="Ana")
        bruno = create_employee(auth_headers, name="Bruno")
        create_work_record(auth_headers, ana["id"], 1, date="2024-03-01")
        create_work_record(auth_headers, ana["id"], 2, date="2024-03-03")
        create_work_record(auth_headers, bruno["id"], 3, date="2024-03-02T15:00:00Z")

        body = client.get("/api/work-records", headers=auth_headers).json()
        assert [r["kilograms"] for r in body["workRecords"]] == [2, 3, 1]
        assert body["pagination"]["total"] == 3

        by_employee = client.get(
            "/api/work-records", params={"employee_id": ana["id"]}, headers=auth_headers
        ).json()
        assert [r["kilograms"] for r in by_employee["workRecords"]] == [2, 1]

        by_day = client.get("/api/work-records", params={"date": "2024-03-02"}, headers=auth_headers).json()
        assert [r["kilograms"] for r in by_day["workRecords"]] == [3]
        assert by_day["workRecords"][0]["employee"]["name"] == "Bruno"

    def test_invalid_date_filter_is_400(self, client: TestClient, auth_headers) -> None:
        response = client.get("/api/work-records", params={"date": "yesterday"}, headers=auth_headers)

        assert response.status_code == 400

    def test_update_and_delete(self, client: TestClient, auth_headers, create_employee, create_work_record) -> None:
        employee = create_employee(auth_headers)
        record = create_work_record(auth_headers, employee["id"], 5)

        updated = client.put(
            f"/api/work-records/{record['id']}",
            json={"kilograms": 7.25, "date": "2024-04-01"},
            headers=auth_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["workRecord"]["kilograms"] == 7.25
        assert updated.json()["workRecord"]["date"].startswith("2024-04-01")

        deleted = client.delete(f"/api/work-records/{record['id']}", headers=auth_headers)
        assert deleted.status_code == 200
        assert client.get(f"/api/work-records/{record['id']}", headers=auth_headers).status_code == 404

    def test_other_owner_cannot_read(
        self, client: TestClient, auth_headers, other_auth_headers, create_employee, create_work_record
    ) -> None:
        record = create_work_record(auth_headers, create_employee(auth_headers)["id"], 5)

        response = client.get(f"/api/work-records/{record['id']}", headers=other_auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "work_record_not_found"
