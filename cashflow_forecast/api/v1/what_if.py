"""POST /v1/what-if - Compare a hypothetical change against the baseline"""

import time
from fastapi import APIRouter, Depends, Request

from cashflow_forecast.api.v1.schemas import WhatIfRequest, WhatIfResponse
from cashflow_forecast.api.dependencies import (
    get_request_id,
    get_transaction_client,
    resolve_transactions,
    to_http_exception,
)
from cashflow_forecast.infrastructure.clients.transactions import TransactionClient
from cashflow_forecast.domain.what_if import evaluate_what_if
from cashflow_forecast.infrastructure.observability.metrics import record_forecast
from cashflow_forecast.infrastructure.observability.logging import log_forecast

router = APIRouter()


@router.post("/what-if", response_model=WhatIfResponse)
async def run_what_if(
    request_body: WhatIfRequest,
    request: Request,
    transaction_client: TransactionClient = Depends(get_transaction_client),
):
    """
    Forecast the history as-is and with the scenario applied.

    Returns 422 when target_day falls outside the horizon.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = await resolve_transactions(request_body, transaction_client)
        result = evaluate_what_if(
            transactions,
            request_body.current_balance_cents,
            request_body.scenario.to_domain(),
            as_of=request_body.as_of,
            horizon_days=request_body.horizon_days,
            target_day=request_body.target_day,
        )
    except Exception as e:
        raise to_http_exception(e, request_id) from e

    duration_ms = (time.time() - start_time) * 1000
    record_forecast("what_if")
    log_forecast(request_id, request_body.owner_id, "what_if", request_body.horizon_days, None, duration_ms)

    return WhatIfResponse(
        owner_id=request_body.owner_id,
        scenario_name=result.scenario_name,
        target_day=result.target_day,
        original_balance_cents=result.original_balance_cents,
        modified_balance_cents=result.modified_balance_cents,
        balance_difference_cents=result.balance_difference_cents,
        percentage_change=result.percentage_change,
        timeline=result.timeline,
    )
