"""POST /v1/seasons - Seasonal spending analysis"""

import time
from fastapi import APIRouter, Depends, Request

from cashflow_forecast.api.v1.schemas import SeasonsRequest, SeasonsResponse
from cashflow_forecast.api.dependencies import (
    get_request_id,
    get_transaction_client,
    resolve_transactions,
    to_http_exception,
)
from cashflow_forecast.infrastructure.clients.transactions import TransactionClient
from cashflow_forecast.domain.seasonal import analyze_seasonality, compare_seasons, month_recommendations
from cashflow_forecast.domain.validation import validate_transactions
from cashflow_forecast.infrastructure.observability.metrics import record_forecast
from cashflow_forecast.infrastructure.observability.logging import log_forecast

router = APIRouter()


@router.post("/seasons", response_model=SeasonsResponse)
async def analyze_spending_seasons(
    request_body: SeasonsRequest,
    request: Request,
    transaction_client: TransactionClient = Depends(get_transaction_client),
):
    """
    Season comparison plus the month-by-month seasonal analysis.

    When `month` is given, budgeting advice for that calendar month is added.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = await resolve_transactions(request_body, transaction_client)
        validate_transactions(transactions)
        comparison = compare_seasons(transactions)
        analysis = analyze_seasonality(transactions, as_of=request_body.as_of)
        advice = (
            month_recommendations(analysis, request_body.month)
            if request_body.month is not None
            else None
        )
    except Exception as e:
        raise to_http_exception(e, request_id) from e

    duration_ms = (time.time() - start_time) * 1000
    record_forecast("seasons", analysis.next_month.confidence)
    log_forecast(
        request_id,
        request_body.owner_id,
        "seasons",
        0,
        analysis.next_month.confidence,
        duration_ms,
    )

    return SeasonsResponse(
        owner_id=request_body.owner_id,
        seasons=comparison.seasons,
        insights=comparison.insights,
        profiles=analysis.profiles,
        seasonal_insights=analysis.insights,
        holiday_impacts=analysis.holiday_impacts,
        yearly_trends=analysis.yearly_trends,
        recommendations=analysis.recommendations,
        next_month=analysis.next_month,
        month_recommendations=advice,
    )
