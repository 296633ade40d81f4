"""What-if evaluation - compare forecasts under hypothetical changes to the history"""

from dataclasses import replace
from datetime import date, timedelta
from typing import List, Optional

from cashflow_forecast.domain.exceptions import InvalidInputError, WhatIfEvaluationError
from cashflow_forecast.domain.forecast import generate_forecast
from cashflow_forecast.domain.models import (
    RecurringChange,
    Transaction,
    TransactionType,
    WhatIfResult,
    WhatIfScenario,
)
from cashflow_forecast.domain.predictions import predictions_from_forecast
from cashflow_forecast.domain.summary import balance_at_day
from cashflow_forecast.domain.thresholds import RECURRING_CHANGE_SCHEDULE, WHAT_IF_HORIZON_DAYS
from cashflow_forecast.domain.validation import validate_horizon, validate_transactions


def _validate_scenario(scenario: WhatIfScenario) -> None:
    one_time = (scenario.one_time_income_cents, scenario.one_time_expense_cents)
    if any(amount < 0 for amount in one_time):
        raise InvalidInputError("One-time amounts must be non-negative")
    for change in (scenario.recurring_income, scenario.recurring_expense):
        if change is not None and change.amount_cents < 0:
            raise InvalidInputError("Recurring amounts must be non-negative")


def _recurring_transactions(
    scenario_name: str,
    change: RecurringChange,
    txn_type: TransactionType,
    as_of: date,
) -> List[Transaction]:
    count, interval_days = RECURRING_CHANGE_SCHEDULE[change.frequency]
    label = "income" if txn_type == TransactionType.INCOME else "expense"
    return [
        Transaction(
            transaction_id=f"scenario-recurring-{label}-{i}",
            date=as_of + timedelta(days=i * interval_days),
            description=f"{scenario_name} - Recurring {label}",
            category="Income" if txn_type == TransactionType.INCOME else "Other",
            amount_cents=change.amount_cents,
            type=txn_type,
        )
        for i in range(count)
    ]


def apply_scenario_changes(
    transactions: List[Transaction],
    scenario: WhatIfScenario,
    as_of: date,
) -> List[Transaction]:
    """
    Build a modified copy of the history; the input list is never mutated.

    - income/expense deltas are added to every matching transaction
      (amounts floored at zero)
    - one-time injections are dated as_of
    - recurring injections are expanded into dated occurrences from as_of
    """
    _validate_scenario(scenario)
    modified = []

    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            delta = scenario.income_change_cents
        else:
            delta = scenario.expense_change_cents
        if delta:
            txn = replace(txn, amount_cents=max(0, txn.amount_cents + delta))
        modified.append(txn)

    if scenario.one_time_income_cents:
        modified.append(
            Transaction(
                transaction_id="scenario-income",
                date=as_of,
                description=f"{scenario.name} - One-time income",
                category="Income",
                amount_cents=scenario.one_time_income_cents,
                type=TransactionType.INCOME,
            )
        )

    if scenario.one_time_expense_cents:
        modified.append(
            Transaction(
                transaction_id="scenario-expense",
                date=as_of,
                description=f"{scenario.name} - One-time expense",
                category="Other",
                amount_cents=scenario.one_time_expense_cents,
                type=TransactionType.EXPENSE,
            )
        )

    if scenario.recurring_income is not None:
        modified.extend(
            _recurring_transactions(scenario.name, scenario.recurring_income, TransactionType.INCOME, as_of)
        )
    if scenario.recurring_expense is not None:
        modified.extend(
            _recurring_transactions(scenario.name, scenario.recurring_expense, TransactionType.EXPENSE, as_of)
        )

    return modified


def evaluate_what_if(
    transactions: List[Transaction],
    current_balance_cents: int,
    scenario: WhatIfScenario,
    as_of: Optional[date] = None,
    horizon_days: int = WHAT_IF_HORIZON_DAYS,
    target_day: int = WHAT_IF_HORIZON_DAYS,
) -> WhatIfResult:
    """
    Main entry point: forecast original and modified histories and compare.

    Raises:
        InvalidInputError: malformed history, horizon or scenario amounts
        WhatIfEvaluationError: either run has no balance at target_day
    """
    validate_horizon(horizon_days)
    validate_transactions(transactions)
    as_of = as_of or date.today()

    modified_transactions = apply_scenario_changes(transactions, scenario, as_of)

    original = generate_forecast(transactions, current_balance_cents, horizon_days, as_of=as_of)
    modified = generate_forecast(modified_transactions, current_balance_cents, horizon_days, as_of=as_of)

    original_balance = balance_at_day(original.periods, target_day)
    modified_balance = balance_at_day(modified.periods, target_day)
    if original_balance is None or modified_balance is None:
        raise WhatIfEvaluationError(
            f"No projected balance at day {target_day} within a {horizon_days}-day horizon"
        )

    difference = modified_balance - original_balance
    percentage = difference / abs(original_balance) * 100 if original_balance != 0 else None

    return WhatIfResult(
        scenario_name=scenario.name,
        target_day=target_day,
        original_balance_cents=original_balance,
        modified_balance_cents=modified_balance,
        balance_difference_cents=difference,
        percentage_change=percentage,
        timeline=predictions_from_forecast(modified, modified_transactions, current_balance_cents, as_of),
    )
