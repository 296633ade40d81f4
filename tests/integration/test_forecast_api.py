"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from cashflow_forecast.domain.exceptions import TransactionSourceError
from cashflow_forecast.domain.models import Transaction

CLIENT_PATH = "cashflow_forecast.infrastructure.clients.transactions.TransactionClient.get_transactions"


def _payload(transactions: list[Transaction]) -> list[dict]:
    return [
        {
            "id": t.transaction_id,
            "date": t.date.isoformat(),
            "description": t.description,
            "category": t.category,
            "amount_cents": t.amount_cents,
            "type": t.type.value,
        }
        for t in transactions
    ]


@pytest.fixture
def base_request(as_of) -> dict:
    return {"owner_id": "owner_1", "current_balance_cents": 50000, "as_of": as_of.isoformat()}


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "cashflow-forecast"}


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "transaction_fetch_failures_total" in response.text


def test_request_id_echoed(client: TestClient):
    """Test caller-supplied request ID returned unchanged"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


@patch(CLIENT_PATH)
def test_forecast_fetches_history(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    monthly_history: list[Transaction],
):
    """Test POST /v1/forecast with history from the transaction source"""
    mock_get.return_value = monthly_history

    response = client.post("/v1/forecast", json={**base_request, "horizon_days": 30})

    assert response.status_code == 200
    data = response.json()
    assert data["owner_id"] == "owner_1"
    assert len(data["periods"]) == 30
    assert data["periods"][0]["date"] == "2026-01-02"
    assert data["summary"]["burn_rate_months"] is None
    assert data["summary"]["projected_balance_90d_cents"] is None
    assert len(data["recurring_patterns"]) == 2
    assert {p["frequency"] for p in data["recurring_patterns"]} == {"monthly"}
    assert len(data["seasonal_patterns"]) == 12
    mock_get.assert_awaited_once_with("owner_1")


@patch(CLIENT_PATH)
def test_forecast_inline_history_skips_source(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    sparse_history: list[Transaction],
):
    """Test inline transactions are used without calling the source"""
    response = client.post(
        "/v1/forecast",
        json={**base_request, "horizon_days": 14, "transactions": _payload(sparse_history)},
    )

    assert response.status_code == 200
    data = response.json()
    assert len(data["periods"]) == 14
    assert data["summary"]["insufficient_history"] is True
    assert data["summary"]["confidence_score"] < 0.3
    mock_get.assert_not_called()


@patch(CLIENT_PATH)
def test_forecast_source_unavailable(mock_get: AsyncMock, client: TestClient, base_request: dict):
    """Test transaction source failure maps to 503"""
    mock_get.side_effect = TransactionSourceError("Transaction source timeout after 5.0s")

    response = client.post("/v1/forecast", json=base_request)

    assert response.status_code == 503
    assert response.json()["detail"] == "Transaction source unavailable"


@patch(CLIENT_PATH)
def test_forecast_unexpected_error(mock_get: AsyncMock, client: TestClient, base_request: dict):
    """Test unexpected failures map to 500"""
    mock_get.side_effect = RuntimeError("boom")

    response = client.post("/v1/forecast", json=base_request)

    assert response.status_code == 500


def test_forecast_rejects_zero_horizon(client: TestClient, base_request: dict):
    """Test horizon validation"""
    response = client.post("/v1/forecast", json={**base_request, "horizon_days": 0, "transactions": []})
    assert response.status_code == 422


def test_forecast_rejects_negative_amount(client: TestClient, base_request: dict):
    """Test negative inline amounts rejected"""
    bad = [{"id": "1", "date": "2025-12-01", "description": "Rent", "amount_cents": -5, "type": "expense"}]

    response = client.post("/v1/forecast", json={**base_request, "transactions": bad})

    assert response.status_code == 422


@patch(CLIENT_PATH)
def test_scenarios_endpoint(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    monthly_history: list[Transaction],
):
    """Test POST /v1/scenarios returns ordered outcomes and risk"""
    mock_get.return_value = monthly_history

    response = client.post("/v1/scenarios", json=base_request)

    assert response.status_code == 200
    data = response.json()
    assert (
        data["pessimistic"]["balance_at_1y_cents"]
        <= data["realistic"]["balance_at_1y_cents"]
        <= data["optimistic"]["balance_at_1y_cents"]
    )
    assert data["risk"]["level"] == "medium"
    assert isinstance(data["recommendations"], list)


@patch(CLIENT_PATH)
def test_scenarios_always_project_one_year(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    deficit_history: list[Transaction],
):
    """Test a client-sent horizon cannot shorten scenario checkpoints"""
    mock_get.return_value = deficit_history

    response = client.post(
        "/v1/scenarios",
        json={**base_request, "current_balance_cents": 300000, "horizon_days": 30},
    )

    assert response.status_code == 200
    realistic = response.json()["realistic"]
    assert realistic["balance_at_90d_cents"] < realistic["balance_at_30d_cents"] < 300000
    assert realistic["balance_at_1y_cents"] < realistic["balance_at_90d_cents"]
    assert "Projected significant balance decline" in response.json()["risk"]["factors"]


@patch(CLIENT_PATH)
def test_what_if_endpoint(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    monthly_history: list[Transaction],
):
    """Test POST /v1/what-if compares modified against original"""
    mock_get.return_value = monthly_history

    response = client.post(
        "/v1/what-if",
        json={
            **base_request,
            "horizon_days": 90,
            "target_day": 90,
            "scenario": {"name": "Raise", "income_change_cents": 50000},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["scenario_name"] == "Raise"
    assert data["balance_difference_cents"] > 0
    assert [p["day"] for p in data["timeline"]] == [7, 14, 30, 60, 90]


@patch(CLIENT_PATH)
def test_what_if_target_beyond_horizon(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    monthly_history: list[Transaction],
):
    """Test target day past the horizon maps to 422"""
    mock_get.return_value = monthly_history

    response = client.post(
        "/v1/what-if",
        json={**base_request, "horizon_days": 30, "target_day": 60, "scenario": {"name": "Raise"}},
    )

    assert response.status_code == 422


@patch(CLIENT_PATH)
def test_predictions_endpoint(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    monthly_history: list[Transaction],
):
    """Test POST /v1/predictions returns milestone balances"""
    mock_get.return_value = monthly_history

    response = client.post("/v1/predictions", json={**base_request, "horizon_days": 30})

    assert response.status_code == 200
    predictions = response.json()["predictions"]
    assert [p["day"] for p in predictions] == [7, 14, 30]
    for p in predictions:
        assert p["optimistic_cents"] >= p["realistic_cents"] >= p["pessimistic_cents"]


@patch(CLIENT_PATH)
def test_seasons_endpoint(
    mock_get: AsyncMock,
    client: TestClient,
    base_request: dict,
    monthly_history: list[Transaction],
):
    """Test POST /v1/seasons returns four seasons and insights"""
    mock_get.return_value = monthly_history

    response = client.post("/v1/seasons", json=base_request)

    assert response.status_code == 200
    data = response.json()
    assert [s["season"] for s in data["seasons"]] == ["spring", "summer", "fall", "winter"]
    assert len(data["insights"]) == 3
    assert len(data["profiles"]) == 12
    assert data["yearly_trends"]["income_trend"] == "stable"
    assert data["next_month"]["month"] == 1
    assert data["month_recommendations"] is None


def test_seasons_holiday_analysis_with_month_advice(
    client: TestClient,
    base_request: dict,
    monthly_history: list[Transaction],
):
    """Test December gifts surface as holiday impact, insight and month advice"""
    gifts = [
        {
            "id": f"gift_{year}",
            "date": f"{year}-12-20",
            "description": "Gift shop",
            "category": "Gifts",
            "amount_cents": 150000,
            "type": "expense",
        }
        for year in (2023, 2024, 2025)
    ]
    body = {**base_request, "transactions": _payload(monthly_history) + gifts, "month": 11}

    response = client.post("/v1/seasons", json=body)

    assert response.status_code == 200
    data = response.json()
    assert [h["holiday"] for h in data["holiday_impacts"]] == ["Holiday Season"]
    assert data["holiday_impacts"][0]["category_breakdown"]["Gifts"] > 0
    assert data["seasonal_insights"][0]["kind"] == "spending_spike"
    assert data["seasonal_insights"][0]["severity"] == "high"
    advice = data["month_recommendations"]
    assert advice[0] == "December typically has high expenses. Plan and budget accordingly."
    assert advice[-1].startswith("Holiday Season affects spending this month.")


def test_seasons_rejects_invalid_month(client: TestClient, base_request: dict):
    """Test month outside 0-11 fails request validation"""
    response = client.post("/v1/seasons", json={**base_request, "transactions": [], "month": 12})

    assert response.status_code == 422
