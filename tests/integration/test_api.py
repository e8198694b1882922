"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient


@pytest.fixture
def mock_ledger():
    with patch(
        "bills_engine.infrastructure.clients.ledger.LedgerClient.send_transaction",
        new_callable=AsyncMock,
    ) as mock:
        yield mock


def _create_installment(client: TestClient, **overrides) -> dict:
    body = {
        "kind": "INSTALLMENT",
        "description": "Laptop",
        "amount_cents": 300000,
        "amount_is_total": True,
        "due_day": 15,
        "category": "Personal",
        "sub_category": "Electronics",
        "start_date": "2024-01-01",
        "total_installments": 10,
    }
    body.update(overrides)
    response = client.post("/v1/obligations", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_endpoint(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_create_and_fetch(client: TestClient):
    created = _create_installment(client)

    assert created["amount_cents"] == 30000
    assert created["kind"] == "INSTALLMENT"

    response = client.get(f"/v1/obligations/{created['id']}")
    assert response.status_code == 200
    assert response.json()["total_installments"] == 10


def test_create_installment_without_count_is_rejected(client: TestClient):
    response = client.post(
        "/v1/obligations",
        json={"kind": "INSTALLMENT", "description": "TV", "amount_cents": 1000, "due_day": 5, "start_date": "2024-01-01"},
    )
    assert response.status_code == 422


def test_unknown_obligation(client: TestClient):
    assert client.get("/v1/obligations/missing").status_code == 404


def test_pay_then_month_view(client: TestClient, mock_ledger: AsyncMock):
    plan = _create_installment(client)

    response = client.post(
        f"/v1/obligations/{plan['id']}/payments",
        json={"year": 2024, "month": 1, "amount_cents": 30000, "bank": "Wallet", "payment_method": "Pix"},
    )
    assert response.status_code == 200
    mock_ledger.assert_awaited_once()
    payload = mock_ledger.await_args.args[0]
    assert payload["description"] == "Laptop (Installment)"
    assert payload["amount_cents"] == 30000

    january = client.get("/v1/months/2024/1").json()
    assert january["occurrences"][0]["status"] == "PAID"
    assert january["occurrences"][0]["occurrence_index"] == 1
    assert january["summary"] == {"total_cents": 30000, "paid_cents": 30000, "pending_cents": 0, "overdue_count": 0}

    february = client.get("/v1/months/2024/2").json()
    assert february["occurrences"][0]["occurrence_index"] == 2
    assert february["occurrences"][0]["is_paid"] is False


def test_double_payment_conflict(client: TestClient, mock_ledger: AsyncMock):
    plan = _create_installment(client)
    body = {"year": 2024, "month": 3, "amount_cents": 30000, "bank": "Wallet", "payment_method": "Pix"}

    assert client.post(f"/v1/obligations/{plan['id']}/payments", json=body).status_code == 200
    response = client.post(f"/v1/obligations/{plan['id']}/payments", json=body)

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "already_paid"
    assert mock_ledger.await_count == 1


def test_settlement(client: TestClient, mock_ledger: AsyncMock):
    plan = _create_installment(client)

    response = client.post(
        f"/v1/obligations/{plan['id']}/settlement",
        json={"year": 2024, "month": 9, "bank": "Wallet", "payment_method": "Pix"},
    )

    assert response.status_code == 200
    assert len(response.json()["payment_history"]) == 2
    assert mock_ledger.await_args.args[0]["amount_cents"] == 60000

    response = client.post(
        f"/v1/obligations/{plan['id']}/settlement",
        json={"year": 2024, "month": 11, "bank": "Wallet", "payment_method": "Pix"},
    )
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "nothing_to_settle"


def test_debt_paydown(client: TestClient, mock_ledger: AsyncMock):
    debt = client.post(
        "/v1/obligations",
        json={"kind": "DEBT", "description": "Loan", "amount_cents": 100000, "due_day": 5, "start_date": "2024-01-01"},
    ).json()
    url = f"/v1/obligations/{debt['id']}/abatements"
    body = {"amount_cents": 150000, "bank": "Wallet", "payment_method": "Pix"}

    response = client.post(url, json=body)
    assert response.status_code == 200
    assert response.json()["current_balance_cents"] == 0
    assert response.json()["is_settled"] is True

    response = client.post(url, json=body)
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "debt_already_settled"


def test_deferral(client: TestClient):
    bill = client.post(
        "/v1/obligations",
        json={"kind": "FIXED", "description": "Rent", "amount_cents": 150000, "due_day": 10, "start_date": "2024-01-01"},
    ).json()

    response = client.post(f"/v1/obligations/{bill['id']}/deferrals", json={"year": 2024, "month": 5})

    assert response.status_code == 201
    data = response.json()
    assert data["origin"]["exclusions"] == ["2024-4"]
    assert data["deferred"]["description"] == "Rent (BILL FROM MAY/2024)"
    assert data["deferred"]["end_date"] == "2024-06-30"

    may = client.get("/v1/months/2024/5").json()
    june = client.get("/v1/months/2024/6").json()
    assert may["occurrences"] == []
    assert len(june["occurrences"]) == 2
    assert june["summary"]["total_cents"] == 300000


def test_delete_occurrence_and_record(client: TestClient):
    plan = _create_installment(client)

    response = client.delete(f"/v1/obligations/{plan['id']}", params={"year": 2024, "month": 2})
    assert response.status_code == 200
    assert response.json()["exclusions"] == ["2024-1"]
    assert client.get("/v1/months/2024/2").json()["occurrences"] == []

    assert client.delete(f"/v1/obligations/{plan['id']}").status_code == 204
    assert client.get(f"/v1/obligations/{plan['id']}").status_code == 404


@pytest.mark.parametrize("params", [{"year": 2024}, {"month": 2}])
def test_delete_with_partial_month_keeps_record(client: TestClient, params: dict):
    bill = client.post(
        "/v1/obligations",
        json={"kind": "FIXED", "description": "Rent", "amount_cents": 150000, "due_day": 10, "start_date": "2024-01-01"},
    ).json()

    response = client.delete(f"/v1/obligations/{bill['id']}", params=params)

    assert response.status_code == 422
    fetched = client.get(f"/v1/obligations/{bill['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["exclusions"] == []


@pytest.mark.parametrize(
    "body",
    [
        {"kind": "FIXED", "total_installments": 3},
        {"kind": "DEBT", "end_date": "2024-06-30"},
        {"kind": "INSTALLMENT", "total_installments": 3, "end_date": "2024-06-30"},
    ],
)
def test_create_rejects_fields_of_other_kinds(client: TestClient, body: dict):
    body = {"description": "Mixed", "amount_cents": 1000, "due_day": 5, "start_date": "2024-01-01", **body}

    response = client.post("/v1/obligations", json=body)

    assert response.status_code == 422
    assert client.get("/v1/months/2024/1").json()["occurrences"] == []


def test_create_one_cent_debt_rejected(client: TestClient):
    response = client.post(
        "/v1/obligations",
        json={"kind": "DEBT", "description": "Loan", "amount_cents": 1, "due_day": 5, "start_date": "2024-01-01"},
    )
    assert response.status_code == 422


def test_debt_occurrence_delete_rejected(client: TestClient):
    debt = client.post(
        "/v1/obligations",
        json={"kind": "DEBT", "description": "Loan", "amount_cents": 100000, "due_day": 5, "start_date": "2024-01-01"},
    ).json()

    response = client.delete(f"/v1/obligations/{debt['id']}", params={"year": 2024, "month": 2})

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "unsupported_operation"


def test_alerts_endpoint(client: TestClient):
    response = client.get("/v1/alerts")
    assert response.status_code == 200
    assert response.json() == {"alerts": []}


def test_metrics_endpoint(client: TestClient):
    _create_installment(client)
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "bills_mutation_total" in response.text
