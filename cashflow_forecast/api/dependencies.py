"""Dependency injection for FastAPI endpoints"""

import logging
from typing import List

from fastapi import HTTPException, Request
from cashflow_forecast.api.v1.schemas import ForecastInputs
from cashflow_forecast.domain.exceptions import (
    InvalidInputError,
    TransactionSourceError,
    WhatIfEvaluationError,
)
from cashflow_forecast.domain.models import Transaction
from cashflow_forecast.infrastructure.clients.transactions import TransactionClient
from cashflow_forecast.infrastructure.observability.metrics import transaction_fetch_failures_counter


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_transaction_client() -> TransactionClient:
    """Provide transaction source client instance"""
    return TransactionClient()


async def resolve_transactions(body: ForecastInputs, client: TransactionClient) -> List[Transaction]:
    """Use inline transactions when supplied, otherwise fetch the owner's history"""
    if body.transactions is not None:
        return [txn.to_domain() for txn in body.transactions]
    return await client.get_transactions(body.owner_id)


def to_http_exception(error: Exception, request_id: str) -> HTTPException:
    """Map domain failures to HTTP errors and log them"""
    if isinstance(error, TransactionSourceError):
        transaction_fetch_failures_counter.inc()
        logging.error(f"Transaction source error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Transaction source unavailable")

    if isinstance(error, (InvalidInputError, WhatIfEvaluationError)):
        logging.warning(f"Rejected request: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=422, detail=str(error))

    logging.error(f"Unexpected error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
