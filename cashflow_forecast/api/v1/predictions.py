"""POST /v1/predictions - Balance milestones with confidence bands"""

import time
from fastapi import APIRouter, Depends, Request

from cashflow_forecast.api.v1.schemas import PredictionsRequest, PredictionsResponse
from cashflow_forecast.api.dependencies import (
    get_request_id,
    get_transaction_client,
    resolve_transactions,
    to_http_exception,
)
from cashflow_forecast.infrastructure.clients.transactions import TransactionClient
from cashflow_forecast.domain.predictions import generate_balance_predictions
from cashflow_forecast.infrastructure.observability.metrics import record_forecast
from cashflow_forecast.infrastructure.observability.logging import log_forecast

router = APIRouter()


@router.post("/predictions", response_model=PredictionsResponse)
async def predict_balances(
    request_body: PredictionsRequest,
    request: Request,
    transaction_client: TransactionClient = Depends(get_transaction_client),
):
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = await resolve_transactions(request_body, transaction_client)
        predictions = generate_balance_predictions(
            transactions,
            request_body.current_balance_cents,
            horizon_days=request_body.horizon_days,
            as_of=request_body.as_of,
        )
    except Exception as e:
        raise to_http_exception(e, request_id) from e

    # Nearest milestone stands in for the overall confidence
    confidence = predictions[0].confidence if predictions else None

    duration_ms = (time.time() - start_time) * 1000
    record_forecast("predictions", confidence)
    log_forecast(request_id, request_body.owner_id, "predictions", request_body.horizon_days, confidence, duration_ms)

    return PredictionsResponse(owner_id=request_body.owner_id, predictions=predictions)
