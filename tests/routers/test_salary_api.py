from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from salary_app.core.config import get_settings
from salary_app.main import create_app
from salary_app.routers.dependencies import get_session_factory, get_salary_service


@pytest.fixture
def client(session_factory, monkeypatch) -> Iterator[TestClient]:
    monkeypatch.setenv("LOG_DIR", "")
    get_settings.cache_clear()
    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    get_settings.cache_clear()


def _register(client: TestClient, name: str, email: str) -> int:
    response = client.post("/api/users", json={"name": name, "email": email})
    assert response.status_code in (200, 201)
    return response.json()["user"]["id"]


def test_salary_roundtrip_over_http(client: TestClient) -> None:
    admin_id = _register(client, "Grace Hopper", "grace@example.com")
    user_id = _register(client, "Ada Lovelace", "ada@example.com")
    headers = {"X-Actor-Id": str(admin_id)}

    created = client.put(
        f"/api/salaries/{user_id}",
        json={"local_amount": "50000", "currency_code": "USD"},
        headers=headers,
    )
    assert created.status_code == 200
    assert created.json()["salary_euros"] == "42500.00"
    assert created.json()["displayed_salary"] == "43000.00"

    updated = client.put(
        f"/api/salaries/{user_id}",
        json={"local_amount": "33333.33", "currency_code": "USD", "reason": "Restructuring plan"},
        headers=headers,
    )
    assert updated.json()["salary_euros"] == "28333.33"

    history = client.get(f"/api/salaries/{user_id}/history").json()
    assert history["total"] == 1
    assert history["items"][0]["old_salary_euros"] == "42500.00"
    assert history["items"][0]["changed_by"] == admin_id

    fetched = client.get(f"/api/salaries/{user_id}")
    assert fetched.json()["displayed_salary"] == "28833.33"

    events = client.get("/api/audit/events", params={"event_type": "salary_updated"}).json()
    assert [event["actor_id"] for event in events] == [admin_id]


def test_first_user_registration_returns_created(client: TestClient) -> None:
    response = client.post("/api/users", json={"name": "Ada", "email": "ada@example.com"})
    again = client.post("/api/users", json={"name": "Ada", "email": "ADA@example.com"})

    assert response.status_code == 201
    assert again.status_code == 200
    assert again.json()["created"] is False


def test_blank_user_name_is_rejected_as_invalid_input(client: TestClient) -> None:
    response = client.post("/api/users", json={"name": "   ", "email": "x@example.com"})

    assert response.status_code == 422


def test_registration_strips_surrounding_whitespace(client: TestClient) -> None:
    response = client.post("/api/users", json={"name": "  Ada  ", "email": " ada@example.com "})

    assert response.status_code == 201
    assert response.json()["user"]["name"] == "Ada"
    assert response.json()["user"]["email"] == "ada@example.com"


def test_validation_errors_map_to_422_with_kind(client: TestClient) -> None:
    user_id = _register(client, "Ada Lovelace", "ada@example.com")

    response = client.put(
        f"/api/salaries/{user_id}", json={"local_amount": "50000", "currency_code": "XYZ"}
    )

    assert response.status_code == 422
    assert response.json() == {
        "detail": "Unsupported currency code: XYZ",
        "error": "unsupported_currency",
    }

    too_low = client.put(f"/api/salaries/{user_id}", json={"local_amount": "500"})
    assert too_low.status_code == 422
    assert too_low.json()["error"] == "salary_out_of_bounds"


def test_missing_records_map_to_404(client: TestClient) -> None:
    user_id = _register(client, "Ada Lovelace", "ada@example.com")

    assert client.put("/api/salaries/9999", json={"local_amount": "50000"}).status_code == 404
    assert client.get(f"/api/salaries/{user_id}").status_code == 404
    missing_commission = client.patch(
        f"/api/salaries/{user_id}/commission", json={"commission": "100"}
    )
    assert missing_commission.status_code == 404
    assert missing_commission.json()["error"] == "record_not_found"
    assert client.delete("/api/users/9999").status_code == 404
    assert client.get("/api/salaries/9999/history").status_code == 404


def test_bulk_endpoint_reports_partial_success(client: TestClient) -> None:
    first = _register(client, "Ada Lovelace", "ada@example.com")
    second = _register(client, "Grace Hopper", "grace@example.com")

    response = client.post(
        "/api/salaries/bulk",
        json={
            "updates": [
                {"user_id": first, "local_amount": "60000"},
                {"user_id": second, "local_amount": "60000", "currency_code": "XYZ"},
            ]
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert body["succeeded"] == 1
    assert body["failed"] == 1
    assert body["results"][1]["error_kind"] == "unsupported_currency"

    (event,) = client.get("/api/audit/events", params={"event_type": "bulk_operation"}).json()
    assert event["metadata"]["failed_operations"] == 1


def test_commission_policy_endpoints(client: TestClient) -> None:
    assert client.get("/api/commission").json()["amount"] == "500.00"

    updated = client.put("/api/commission", json={"amount": "650"})
    assert updated.status_code == 200
    assert updated.json()["amount"] == "650.00"

    rejected = client.put("/api/commission", json={"amount": "-1"})
    assert rejected.status_code == 422
    assert rejected.json()["error"] == "invalid_commission"


def test_reference_endpoints(client: TestClient) -> None:
    currencies = client.get("/api/salaries/currencies").json()
    assert currencies["base_currency"] == "EUR"
    assert currencies["rates"]["USD"] == "0.85"

    statistics = client.get("/api/salaries/statistics").json()
    assert statistics["count"] == 0
    assert statistics["currency_distribution"] == {}

    audit = client.get("/api/audit/statistics").json()
    assert audit["summary"] == "No activity recorded"


def test_unexpected_errors_return_generic_500(client: TestClient) -> None:
    class ExplodingService:
        def get_salary(self, user_id):
            raise RuntimeError("database unavailable")

    client.app.dependency_overrides[get_salary_service] = lambda: ExplodingService()

    response = client.get("/api/salaries/1")

    assert response.status_code == 500
    assert "database unavailable" not in response.text
