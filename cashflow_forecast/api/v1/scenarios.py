"""POST /v1/scenarios - Optimistic, realistic and pessimistic projections"""

import time
from fastapi import APIRouter, Depends, Request

from cashflow_forecast.api.v1.schemas import ForecastInputs, ScenarioResponse
from cashflow_forecast.api.dependencies import (
    get_request_id,
    get_transaction_client,
    resolve_transactions,
    to_http_exception,
)
from cashflow_forecast.infrastructure.clients.transactions import TransactionClient
from cashflow_forecast.domain.scenarios import perform_scenario_analysis
from cashflow_forecast.domain.thresholds import SCENARIO_HORIZON_DAYS
from cashflow_forecast.infrastructure.observability.metrics import record_forecast
from cashflow_forecast.infrastructure.observability.logging import log_forecast

router = APIRouter()


@router.post("/scenarios", response_model=ScenarioResponse)
async def analyze_scenarios(
    request_body: ForecastInputs,
    request: Request,
    transaction_client: TransactionClient = Depends(get_transaction_client),
):
    """Run the three standard one-year scenarios with recommendations and a risk assessment"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = await resolve_transactions(request_body, transaction_client)
        analysis = perform_scenario_analysis(
            transactions,
            request_body.current_balance_cents,
            as_of=request_body.as_of,
        )
    except Exception as e:
        raise to_http_exception(e, request_id) from e

    duration_ms = (time.time() - start_time) * 1000
    record_forecast("scenarios")
    log_forecast(request_id, request_body.owner_id, "scenarios", SCENARIO_HORIZON_DAYS, None, duration_ms)

    return ScenarioResponse(
        owner_id=request_body.owner_id,
        optimistic=analysis.optimistic,
        realistic=analysis.realistic,
        pessimistic=analysis.pessimistic,
        recommendations=analysis.recommendations,
        risk=analysis.risk,
    )
