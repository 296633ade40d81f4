"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from cashflow_forecast.api.main import create_app
from cashflow_forecast.domain.models import Transaction, TransactionType


AS_OF = date(2026, 1, 1)


def make_transaction(
    transaction_id: str,
    day: date,
    amount_cents: int,
    txn_type: TransactionType,
    description: str,
    category: str = "",
) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        date=day,
        description=description,
        category=category,
        amount_cents=amount_cents,
        type=txn_type,
    )


def monthly_series(
    prefix: str,
    day_of_month: int,
    amount_cents: int,
    txn_type: TransactionType,
    description: str,
    months: int = 36,
    start_year: int = 2023,
) -> list[Transaction]:
    """One transaction per calendar month starting January of start_year"""
    series = []
    for i in range(months):
        year, month = start_year + i // 12, i % 12 + 1
        series.append(
            make_transaction(
                f"{prefix}_{i}",
                date(year, month, day_of_month),
                amount_cents,
                txn_type,
                description,
            )
        )
    return series


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def monthly_history() -> list[Transaction]:
    """Three years of a $3000 paycheck on the 1st and $2000 rent on the 5th"""
    return monthly_series(
        "pay", 1, 300000, TransactionType.INCOME, "Paycheck"
    ) + monthly_series("rent", 5, 200000, TransactionType.EXPENSE, "Rent")


@pytest.fixture
def deficit_history() -> list[Transaction]:
    """Three years where rent exceeds the paycheck"""
    return monthly_series(
        "pay", 1, 100000, TransactionType.INCOME, "Paycheck"
    ) + monthly_series("rent", 5, 200000, TransactionType.EXPENSE, "Rent")


@pytest.fixture
def sparse_history() -> list[Transaction]:
    """Ten days of activity only"""
    base_date = AS_OF - timedelta(days=10)
    return [
        make_transaction("s_0", base_date, 150000, TransactionType.INCOME, "Freelance"),
        make_transaction("s_1", base_date + timedelta(days=4), 4500, TransactionType.EXPENSE, "Groceries"),
        make_transaction("s_2", base_date + timedelta(days=9), 8000, TransactionType.EXPENSE, "Utilities"),
    ]
