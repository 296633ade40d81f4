"""POST /v1/forecast - Day-by-day cash flow forecast"""

import time
from fastapi import APIRouter, Depends, Request

from cashflow_forecast.api.v1.schemas import ForecastRequest, ForecastResponse
from cashflow_forecast.api.dependencies import (
    get_request_id,
    get_transaction_client,
    resolve_transactions,
    to_http_exception,
)
from cashflow_forecast.infrastructure.clients.transactions import TransactionClient
from cashflow_forecast.domain.forecast import generate_forecast
from cashflow_forecast.infrastructure.observability.metrics import record_forecast
from cashflow_forecast.infrastructure.observability.logging import log_forecast

router = APIRouter()


@router.post("/forecast", response_model=ForecastResponse)
async def create_forecast(
    request_body: ForecastRequest,
    request: Request,
    transaction_client: TransactionClient = Depends(get_transaction_client),
):
    """
    Project income, expense and balance for each day of the horizon.

    Flow:
    1. Resolve transaction history (inline or from the transaction source)
    2. Detect recurring, seasonal and trend signals
    3. Project each day and summarize
    4. Record metrics and logs
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = await resolve_transactions(request_body, transaction_client)
        result = generate_forecast(
            transactions,
            request_body.current_balance_cents,
            request_body.horizon_days,
            as_of=request_body.as_of,
        )
    except Exception as e:
        raise to_http_exception(e, request_id) from e

    duration_ms = (time.time() - start_time) * 1000
    record_forecast("forecast", result.summary.confidence_score, result.summary.insufficient_history)
    log_forecast(
        request_id,
        request_body.owner_id,
        "forecast",
        request_body.horizon_days,
        result.summary.confidence_score,
        duration_ms,
    )

    return ForecastResponse(
        owner_id=request_body.owner_id,
        periods=result.periods,
        summary=result.summary,
        insights=result.insights,
        warnings=result.warnings,
        recurring_patterns=result.recurring_patterns,
        seasonal_patterns=result.seasonal_patterns,
        trend=result.trend,
    )
