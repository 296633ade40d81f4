"""Synchronous input validation run before any forecast computation"""

from datetime import date
from typing import Iterable

from cashflow_forecast.domain.exceptions import InvalidInputError
from cashflow_forecast.domain.models import Transaction, TransactionType


def validate_horizon(horizon_days: int) -> None:
    if isinstance(horizon_days, bool) or not isinstance(horizon_days, int):
        raise InvalidInputError(f"Horizon must be an integer day count, got {horizon_days!r}")
    if horizon_days < 1:
        raise InvalidInputError(f"Horizon must be at least 1 day, got {horizon_days}")


def validate_transactions(transactions: Iterable[Transaction]) -> None:
    """
    Reject malformed transactions.

    Raises:
        InvalidInputError: negative amount, missing/unknown type or missing date
    """
    for txn in transactions:
        if not isinstance(txn.type, TransactionType):
            raise InvalidInputError(
                f"Transaction {txn.transaction_id} has invalid type {txn.type!r}"
            )
        if not isinstance(txn.date, date):
            raise InvalidInputError(f"Transaction {txn.transaction_id} is missing a date")
        if not isinstance(txn.amount_cents, int) or isinstance(txn.amount_cents, bool):
            raise InvalidInputError(
                f"Transaction {txn.transaction_id} amount must be integer cents"
            )
        if txn.amount_cents < 0:
            raise InvalidInputError(
                f"Transaction {txn.transaction_id} has negative amount {txn.amount_cents}"
            )
