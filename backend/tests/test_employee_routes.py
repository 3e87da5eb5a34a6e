"""
Employee Manager API — Employee Route Tests
============================================

What:  HTTP-level tests for /api/v1/employees.
How:   HTTPX AsyncClient over ASGITransport against an app backed by a
       throwaway SQLite file. Tests that must prove no storage call happens
       patch the service singleton with AsyncMocks.

What we test:
    ✅ Status codes, plain-text error bodies, JSON shapes, Location header
    ✅ Validation happens before any storage call
    ✅ Lenient paging parameters and the per_page cap
    ✅ NotFound (404) kept separate from database failures (500)
    ✅ X-Request-ID on responses
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from employee_api.config import Settings
from employee_api.exceptions import DatabaseError
from employee_api.main import create_app

BASE = "/api/v1/employees"
SERVICE = "employee_api.routes.employees.employee_service"


class TestCreateEmployee:

    @pytest.mark.asyncio
    async def test_create_first_employee(self, test_client, sample_employee_data):
        response = await test_client.post(BASE, json=sample_employee_data)

        assert response.status_code == 201
        assert response.json() == {
            "id": 1,
            "name": "John Doe",
            "position": "Engineer",
            "salary": 50000,
        }
        assert response.headers["Location"] == f"{BASE}/1"

    @pytest.mark.asyncio
    async def test_create_truncates_salary_in_response(self, test_client):
        response = await test_client.post(
            BASE, json={"name": "Jane Roe", "position": "Manager", "salary": 72000.99}
        )

        assert response.status_code == 201
        assert response.json()["salary"] == 72000

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload, message",
        [
            ({"name": "", "position": "Engineer", "salary": 50000}, "invalid name"),
            ({"position": "Engineer", "salary": 50000}, "invalid name"),
            ({"name": "John Doe", "position": "", "salary": 50000}, "invalid position"),
            ({"name": "John Doe", "position": "Engineer", "salary": 0}, "invalid salary"),
            ({"name": "John Doe", "position": "Engineer", "salary": -10.5}, "invalid salary"),
            ({}, "invalid name"),
        ],
    )
    async def test_validation_rejects_before_storage(self, test_client, payload, message):
        with patch(SERVICE) as mock_service:
            mock_service.create_employee = AsyncMock()

            response = await test_client.post(BASE, json=payload)

            assert response.status_code == 400
            assert response.text == message
            assert response.headers["content-type"].startswith("text/plain")
            mock_service.create_employee.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            "{not json",
            '{"name": "John Doe", "position": "Engineer", "salary": "lots"}',
            '{"name": 7, "position": "Engineer", "salary": 50000}',
            "[]",
            '{"name": "John Doe", "position": "Engineer", "salary": NaN}',
            '{"name": "John Doe", "position": "Engineer", "salary": Infinity}',
            '{"name": "John Doe", "position": "Engineer", "salary": -Infinity}',
            '{"name": "John Doe", "position": "Engineer", "salary": 1e400}',
            '{"name": "John Doe", "position": "Engineer", "salary": 1' + "0" * 400 + "}",
        ],
    )
    async def test_undecodable_body(self, test_client, body):
        with patch(SERVICE) as mock_service:
            mock_service.create_employee = AsyncMock()

            response = await test_client.post(
                BASE, content=body, headers={"Content-Type": "application/json"}
            )

            assert response.status_code == 400
            assert response.text == "Invalid request payload"
            mock_service.create_employee.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_database_failure_is_500(self, test_client, sample_employee_data):
        with patch(SERVICE) as mock_service:
            mock_service.create_employee = AsyncMock(
                side_effect=DatabaseError(message="failed to create employee")
            )

            response = await test_client.post(BASE, json=sample_employee_data)

        assert response.status_code == 500
        assert response.text == "failed to create employee"


class TestGetEmployee:

    @pytest.mark.asyncio
    async def test_get_on_empty_table_is_404(self, test_client):
        response = await test_client.get(f"{BASE}/1")

        assert response.status_code == 404
        assert response.text == "Employee not found"

    @pytest.mark.asyncio
    async def test_get_after_create(self, test_client, sample_employee_data):
        created = (await test_client.post(BASE, json=sample_employee_data)).json()

        response = await test_client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw_id", ["abc", "0", "-1", "1.5", " 5", "99999999999999999999"]
    )
    async def test_invalid_id_is_400(self, test_client, raw_id):
        with patch(SERVICE) as mock_service:
            mock_service.get_employee = AsyncMock()

            response = await test_client.get(f"{BASE}/{raw_id}")

            assert response.status_code == 400
            assert response.text == "Invalid employee ID"
            mock_service.get_employee.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_id_beyond_integer_column_is_404(self, test_client, sample_employee_data):
        await test_client.post(BASE, json=sample_employee_data)

        responses = [
            await test_client.get(f"{BASE}/3000000000"),
            await test_client.put(f"{BASE}/3000000000", json=sample_employee_data),
            await test_client.delete(f"{BASE}/3000000000"),
        ]

        assert [r.status_code for r in responses] == [404, 404, 404]
        assert all(r.text == "Employee not found" for r in responses)

    @pytest.mark.asyncio
    async def test_get_database_failure_is_500(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.get_employee = AsyncMock(
                side_effect=DatabaseError(message="failed to get employee")
            )

            response = await test_client.get(f"{BASE}/1")

        assert response.status_code == 500
        assert response.text == "failed to get employee"


class TestUpdateEmployee:

    @pytest.mark.asyncio
    async def test_update_echoes_submitted_fields(self, test_client, sample_employee_data):
        await test_client.post(BASE, json=sample_employee_data)
        payload = {"name": "John Doe", "position": "Staff Engineer", "salary": 80000.7}

        response = await test_client.put(f"{BASE}/1", json=payload)

        assert response.status_code == 200
        assert response.json() == {
            "id": 1,
            "name": "John Doe",
            "position": "Staff Engineer",
            "salary": 80000,
        }
        stored = (await test_client.get(f"{BASE}/1")).json()
        assert stored["position"] == "Staff Engineer"

    @pytest.mark.asyncio
    async def test_update_twice_is_idempotent(self, test_client, sample_employee_data):
        await test_client.post(BASE, json=sample_employee_data)
        payload = {"name": "John Doe", "position": "Lead", "salary": 90000}

        first = await test_client.put(f"{BASE}/1", json=payload)
        second = await test_client.put(f"{BASE}/1", json=payload)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()
        assert (await test_client.get(f"{BASE}/1")).json() == first.json()

    @pytest.mark.asyncio
    async def test_update_missing_is_404(self, test_client, sample_employee_data):
        response = await test_client.put(f"{BASE}/7", json=sample_employee_data)

        assert response.status_code == 404
        assert response.text == "Employee not found"

    @pytest.mark.asyncio
    async def test_update_validates_before_storage(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.update_employee = AsyncMock()

            response = await test_client.put(
                f"{BASE}/1", json={"name": "John Doe", "position": "Engineer", "salary": 0}
            )

            assert response.status_code == 400
            assert response.text == "invalid salary"
            mock_service.update_employee.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("salary", ["NaN", "Infinity", "1e400"])
    async def test_update_rejects_non_finite_salary(
        self, test_client, sample_employee_data, salary
    ):
        await test_client.post(BASE, json=sample_employee_data)

        response = await test_client.put(
            f"{BASE}/1",
            content='{"name": "John Doe", "position": "Engineer", "salary": %s}' % salary,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.text == "Invalid request payload"
        stored = await test_client.get(f"{BASE}/1")
        assert stored.json()["salary"] == 50000
        assert (await test_client.get(BASE)).status_code == 200

    @pytest.mark.asyncio
    async def test_update_bad_id_wins_over_bad_body(self, test_client):
        response = await test_client.put(f"{BASE}/abc", json={"salary": "lots"})

        assert response.status_code == 400
        assert response.text == "Invalid employee ID"


class TestDeleteEmployee:

    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, test_client, sample_employee_data):
        await test_client.post(BASE, json=sample_employee_data)

        response = await test_client.delete(f"{BASE}/1")

        assert response.status_code == 204
        assert response.content == b""
        assert (await test_client.get(f"{BASE}/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_is_404(self, test_client):
        response = await test_client.delete(f"{BASE}/1")

        assert response.status_code == 404
        assert response.text == "Employee not found"

    @pytest.mark.asyncio
    async def test_delete_invalid_id_is_400(self, test_client):
        response = await test_client.delete(f"{BASE}/zero")

        assert response.status_code == 400
        assert response.text == "Invalid employee ID"


class TestListEmployees:

    @pytest.mark.asyncio
    async def test_list_empty_table(self, test_client):
        response = await test_client.get(BASE)

        assert response.status_code == 200
        assert response.json() == {"employees": [], "total": 0}
        assert response.headers["X-Total-Count"] == "0"

    @pytest.mark.asyncio
    async def test_list_pages(self, test_client):
        for i in range(3):
            await test_client.post(
                BASE, json={"name": f"Employee {i}", "position": "Engineer", "salary": 1000.5 + i}
            )

        first = (await test_client.get(BASE, params={"page": 1, "per_page": 2})).json()
        second = (await test_client.get(BASE, params={"page": 2, "per_page": 2})).json()

        assert [e["id"] for e in first["employees"]] == [1, 2]
        assert [e["id"] for e in second["employees"]] == [3]
        assert first["total"] == second["total"] == 3
        assert first["employees"][0]["salary"] == 1000

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"page": "abc", "per_page": "xyz"},
            {"page": "0", "per_page": "0"},
            {"page": "-3", "per_page": "-1"},
            {"page": "99999999999999999999", "per_page": "99999999999999999999"},
            {"page": " 2", "per_page": "5 "},
        ],
    )
    async def test_bad_paging_parameters_fall_back_to_defaults(self, test_client, params):
        with patch(SERVICE) as mock_service:
            mock_service.list_employees = AsyncMock(return_value=([], 0))

            response = await test_client.get(BASE, params=params)

            assert response.status_code == 200
            mock_service.list_employees.assert_awaited_once()
            kwargs = mock_service.list_employees.await_args.kwargs
            assert kwargs["page"] == 1
            assert kwargs["per_page"] == 10

    @pytest.mark.asyncio
    async def test_page_too_large_for_offset_is_clamped(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.list_employees = AsyncMock(return_value=([], 0))

            response = await test_client.get(
                BASE, params={"page": str(2**63 - 1), "per_page": "10"}
            )

            assert response.status_code == 200
            kwargs = mock_service.list_employees.await_args.kwargs
            assert (kwargs["page"] - 1) * kwargs["per_page"] <= 2**63 - 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", ["99999999999999999999", str(2**63 - 1)])
    async def test_huge_page_returns_200(self, test_client, sample_employee_data, page):
        await test_client.post(BASE, json=sample_employee_data)

        response = await test_client.get(BASE, params={"page": page})

        assert response.status_code == 200
        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_per_page_is_capped(self, tmp_path):
        settings = Settings(
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'capped.db'}",
            max_per_page=2,
            log_level="WARNING",
        )
        app = create_app(settings)
        await app.state.database.connect()
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                for i in range(3):
                    await client.post(
                        BASE, json={"name": f"E{i}", "position": "Engineer", "salary": 100}
                    )

                response = await client.get(BASE, params={"per_page": 50})
        finally:
            await app.state.database.dispose()

        body = response.json()
        assert len(body["employees"]) == 2
        assert body["total"] == 3

    @pytest.mark.asyncio
    async def test_list_database_failure_is_500(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.list_employees = AsyncMock(
                side_effect=DatabaseError(message="failed to list employees")
            )

            response = await test_client.get(BASE)

        assert response.status_code == 500
        assert response.text == "failed to list employees"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_response_carries_generated_request_id(self, test_client):
        response = await test_client.get(BASE)

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_incoming_request_id_is_echoed(self, test_client):
        response = await test_client.get(BASE, headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"
