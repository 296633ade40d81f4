"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cashflow_forecast.config import settings
from cashflow_forecast.domain.models import (
    CashFlowHealth,
    Frequency,
    InsightKind,
    RecurringChange,
    RiskLevel,
    Severity,
    Transaction,
    TransactionType,
    TrendDirection,
    WhatIfScenario,
)


class TransactionSchema(BaseModel):
    """Inline transaction record (alternative to fetching from the source)"""

    id: str
    date: date
    description: str
    category: str = ""
    amount_cents: int = Field(..., ge=0, description="Non-negative magnitude in cents")
    type: TransactionType

    def to_domain(self) -> Transaction:
        return Transaction(
            transaction_id=self.id,
            date=self.date,
            description=self.description,
            category=self.category,
            amount_cents=self.amount_cents,
            type=self.type,
        )


class ForecastInputs(BaseModel):
    """Fields shared by every forecasting request"""

    owner_id: str = Field(..., min_length=1, description="Owner of the transaction history")
    current_balance_cents: int = Field(0, description="Starting balance in cents")
    as_of: Optional[date] = Field(None, description="Forecast start date (default: today)")
    transactions: Optional[List[TransactionSchema]] = Field(
        None, description="Inline history; fetched from the transaction source when omitted"
    )


class ForecastRequest(ForecastInputs):
    """Request body for POST /v1/forecast"""

    horizon_days: int = Field(settings.default_horizon_days, ge=1, le=settings.max_horizon_days)


class PredictionsRequest(ForecastInputs):
    """Request body for POST /v1/predictions"""

    horizon_days: int = Field(365, ge=1, le=settings.max_horizon_days)


class SeasonsRequest(ForecastInputs):
    """Request body for POST /v1/seasons"""

    month: Optional[int] = Field(
        None, ge=0, le=11, description="Calendar month (0 = January) to get budgeting advice for"
    )


class RecurringChangeSchema(BaseModel):
    amount_cents: int = Field(..., ge=0)
    frequency: Frequency


class WhatIfScenarioSchema(BaseModel):
    name: str = Field(..., min_length=1)
    income_change_cents: int = 0
    expense_change_cents: int = 0
    one_time_income_cents: int = Field(0, ge=0)
    one_time_expense_cents: int = Field(0, ge=0)
    recurring_income: Optional[RecurringChangeSchema] = None
    recurring_expense: Optional[RecurringChangeSchema] = None

    def to_domain(self) -> WhatIfScenario:
        def change(schema: Optional[RecurringChangeSchema]) -> Optional[RecurringChange]:
            if schema is None:
                return None
            return RecurringChange(amount_cents=schema.amount_cents, frequency=schema.frequency)

        return WhatIfScenario(
            name=self.name,
            income_change_cents=self.income_change_cents,
            expense_change_cents=self.expense_change_cents,
            one_time_income_cents=self.one_time_income_cents,
            one_time_expense_cents=self.one_time_expense_cents,
            recurring_income=change(self.recurring_income),
            recurring_expense=change(self.recurring_expense),
        )


class WhatIfRequest(ForecastInputs):
    """Request body for POST /v1/what-if"""

    scenario: WhatIfScenarioSchema
    horizon_days: int = Field(365, ge=1, le=settings.max_horizon_days)
    target_day: int = Field(365, ge=1, description="Day of the horizon to compare balances at")


# Response models read directly from domain dataclasses


class _FromDomain(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ForecastPeriodSchema(_FromDomain):
    date: date
    predicted_income_cents: int
    predicted_expense_cents: int
    predicted_balance_cents: int
    confidence: float


class ForecastSummarySchema(_FromDomain):
    current_balance_cents: int
    projected_balance_30d_cents: Optional[int]
    projected_balance_90d_cents: Optional[int]
    avg_monthly_income_cents: int
    avg_monthly_expense_cents: int
    burn_rate_months: Optional[float] = Field(None, description="null means sustainable (infinite)")
    confidence_score: float
    insufficient_history: bool


class RecurringPatternSchema(_FromDomain):
    type: TransactionType
    description: str
    average_amount_cents: int
    frequency: Frequency
    confidence: float
    next_occurrence: date
    occurrences: int


class SeasonalPatternSchema(_FromDomain):
    month: int
    average_income_cents: int
    average_expense_cents: int
    sample_count: int
    confidence: float


class TrendSchema(_FromDomain):
    income_growth_rate: float
    expense_growth_rate: float
    volatility: float
    confidence: float
    months_observed: int


class ForecastResponse(BaseModel):
    """Response for POST /v1/forecast"""

    owner_id: str
    periods: List[ForecastPeriodSchema]
    summary: ForecastSummarySchema
    insights: List[str]
    warnings: List[str]
    recurring_patterns: List[RecurringPatternSchema]
    seasonal_patterns: List[SeasonalPatternSchema]
    trend: TrendSchema


class KeyEventSchema(_FromDomain):
    date: date
    description: str
    balance_impact_cents: int


class ScenarioOutcomeSchema(_FromDomain):
    name: str
    balance_at_30d_cents: int
    balance_at_90d_cents: int
    balance_at_1y_cents: int
    cash_flow_health: CashFlowHealth
    key_events: List[KeyEventSchema]


class RiskAssessmentSchema(_FromDomain):
    level: RiskLevel
    factors: List[str]
    mitigation: List[str]


class ScenarioResponse(BaseModel):
    """Response for POST /v1/scenarios"""

    owner_id: str
    optimistic: ScenarioOutcomeSchema
    realistic: ScenarioOutcomeSchema
    pessimistic: ScenarioOutcomeSchema
    recommendations: List[str]
    risk: RiskAssessmentSchema


class PredictionFactorSchema(_FromDomain):
    kind: str
    description: str
    impact_cents: int
    probability: float
    timeframe: str


class BalancePredictionSchema(_FromDomain):
    date: date
    day: int
    predicted_balance_cents: int
    optimistic_cents: int
    realistic_cents: int
    pessimistic_cents: int
    confidence: float
    factors: List[PredictionFactorSchema]


class PredictionsResponse(BaseModel):
    """Response for POST /v1/predictions"""

    owner_id: str
    predictions: List[BalancePredictionSchema]


class WhatIfResponse(BaseModel):
    """Response for POST /v1/what-if"""

    owner_id: str
    scenario_name: str
    target_day: int
    original_balance_cents: int
    modified_balance_cents: int
    balance_difference_cents: int
    percentage_change: Optional[float]
    timeline: List[BalancePredictionSchema]


class SeasonSummarySchema(_FromDomain):
    season: str
    avg_monthly_income_cents: int
    avg_monthly_expense_cents: int
    avg_monthly_net_cents: int


class CategoryShareSchema(_FromDomain):
    category: str
    amount_cents: int
    percentage: float


class MonthlyProfileSchema(_FromDomain):
    month: int
    month_name: str
    average_income_cents: int
    average_expense_cents: int
    net_cents: int
    transaction_count: int
    top_categories: List[CategoryShareSchema]
    confidence: float


class SeasonalInsightSchema(_FromDomain):
    kind: InsightKind
    month: int
    description: str
    impact_cents: int
    severity: Severity
    recommendations: List[str]


class HolidayImpactSchema(_FromDomain):
    holiday: str
    months: List[int]
    average_spending_cents: int
    category_breakdown: Dict[str, int]


class YearlyTrendsSchema(_FromDomain):
    income_trend: TrendDirection
    income_rate: float
    expense_trend: TrendDirection
    expense_rate: float
    volatility: float


class SeasonalAdjustmentSchema(_FromDomain):
    factor: str
    impact_cents: int
    reasoning: str


class SeasonalForecastSchema(_FromDomain):
    month: int
    predicted_income_cents: int
    predicted_expense_cents: int
    predicted_net_cents: int
    confidence: float
    adjustments: List[SeasonalAdjustmentSchema]


class SeasonsResponse(BaseModel):
    """Response for POST /v1/seasons"""

    owner_id: str
    seasons: List[SeasonSummarySchema]
    insights: List[str]
    profiles: List[MonthlyProfileSchema]
    seasonal_insights: List[SeasonalInsightSchema]
    holiday_impacts: List[HolidayImpactSchema]
    yearly_trends: YearlyTrendsSchema
    recommendations: List[str]
    next_month: SeasonalForecastSchema
    month_recommendations: Optional[List[str]] = None
