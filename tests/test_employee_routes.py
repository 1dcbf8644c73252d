"""Tests for the employee endpoints."""

from fastapi.testclient import TestClient


class TestEmployeeCrud:
    def test_create_and_get(self, client: TestClient, auth_headers) -> None:
        created = client.post(
            "/api/employees", json={"name": "Ana", "specialNotes": "Morning shift"}, headers=auth_headers
        )

        assert created.status_code == 201
        body = created.json()
        assert body["message"] == "Employee created successfully"
        employee = body["employee"]
        assert employee["name"] == "Ana"
        assert employee["specialNotes"] == "Morning shift"
        assert employee["isActive"] is True

        fetched = client.get(f"/api/employees/{employee['id']}", headers=auth_headers)
        assert fetched.status_code == 200
        assert fetched.json()["employee"]["id"] == employee["id"]

    def test_name_is_required(self, client: TestClient, auth_headers) -> None:
        response = client.post("/api/employees", json={"name": ""}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_failed"

    def test_update_partial(self, client: TestClient, auth_headers, create_employee) -> None:
        employee = create_employee(auth_headers, name="Ana", specialNotes="notes")

        response = client.put(
            f"/api/employees/{employee['id']}", json={"isActive": False}, headers=auth_headers
        )

        assert response.status_code == 200
        updated = response.json()["employee"]
        assert updated["isActive"] is False
        assert updated["name"] == "Ana"
        assert updated["specialNotes"] == "notes"

    def test_delete(self, client: TestClient, auth_headers, create_employee) -> None:
        employee = create_employee(auth_headers)

        response = client.delete(f"/api/employees/{employee['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Employee deleted successfully"}
        assert client.get(f"/api/employees/{employee['id']}", headers=auth_headers).status_code == 404

    def test_delete_cascades_to_work_records(
        self, client: TestClient, auth_headers, create_employee, create_work_record
    ) -> None:
        employee = create_employee(auth_headers)
        record = create_work_record(auth_headers, employee["id"], 12)

        client.delete(f"/api/employees/{employee['id']}", headers=auth_headers)

        assert client.get(f"/api/work-records/{record['id']}", headers=auth_headers).status_code == 404


class TestEmployeeListing:
    def test_pagination_and_order(self, client: TestClient, auth_headers, create_employee) -> None:
        for name in ("Ana", "Bruno", "Caio"):
            create_employee(auth_headers, name=name)

        response = client.get("/api/employees", params={"page": 1, "limit": 2}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert [e["name"] for e in body["employees"]] == ["Caio", "Bruno"]
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

        second = client.get("/api/employees", params={"page": 2, "limit": 2}, headers=auth_headers).json()
        assert [e["name"] for e in second["employees"]] == ["Ana"]

    def test_search_is_case_insensitive_over_name_and_notes(
        self, client: TestClient, auth_headers, create_employee
    ) -> None:
        create_employee(auth_headers, name="Ana Souza")
        create_employee(auth_headers, name="Bruno", specialNotes="works with SOUZA family")
        create_employee(auth_headers, name="Caio")

        body = client.get("/api/employees", params={"search": "souza"}, headers=auth_headers).json()

        assert sorted(e["name"] for e in body["employees"]) == ["Ana Souza", "Bruno"]
        assert body["pagination"]["total"] == 2

    def test_search_treats_wildcards_literally(
        self, client: TestClient, auth_headers, create_employee
    ) -> None:
        create_employee(auth_headers, name="Ana")
        create_employee(auth_headers, name="Bruno_Silva", specialNotes="paid 100%")

        underscore = client.get("/api/employees", params={"search": "_"}, headers=auth_headers).json()
        percent = client.get("/api/employees", params={"search": "%"}, headers=auth_headers).json()

        assert [e["name"] for e in underscore["employees"]] == ["Bruno_Silva"]
        assert [e["name"] for e in percent["employees"]] == ["Bruno_Silva"]

    def test_filter_by_active(self, client: TestClient, auth_headers, create_employee) -> None:
        inactive = create_employee(auth_headers, name="Old")
        create_employee(auth_headers, name="New")
        client.put(f"/api/employees/{inactive['id']}", json={"isActive": False}, headers=auth_headers)

        body = client.get("/api/employees", params={"is_active": "false"}, headers=auth_headers).json()

        assert [e["name"] for e in body["employees"]] == ["Old"]


class TestEmployeeOwnership:
    def test_other_owner_sees_404(
        self, client: TestClient, auth_headers, other_auth_headers, create_employee
    ) -> None:
        employee = create_employee(auth_headers)

        for method in ("get", "delete"):
            response = getattr(client, method)(f"/api/employees/{employee['id']}", headers=other_auth_headers)
            assert response.status_code == 404
            assert response.json()["error"]["code"] == "employee_not_found"

        response = client.put(
            f"/api/employees/{employee['id']}", json={"name": "Hijack"}, headers=other_auth_headers
        )
        assert response.status_code == 404

    def test_listing_is_owner_scoped(
        self, client: TestClient, auth_headers, other_auth_headers, create_employee
    ) -> None:
        create_employee(auth_headers, name="Mine")

        body = client.get("/api/employees", headers=other_auth_headers).json()

        assert body["employees"] == []
        assert body["pagination"]["total"] == 0
