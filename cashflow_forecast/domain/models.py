"""Domain models - pure Python dataclasses representing forecasting entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class CashFlowHealth(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Transaction:
    """Historical transaction supplied by the transaction source (read-only)"""

    transaction_id: str
    date: date
    description: str
    category: str
    amount_cents: int  # always >= 0, sign carried by type
    type: TransactionType


@dataclass
class RecurringPattern:
    """Inferred periodic transaction series (paycheck, rent, subscription)"""

    type: TransactionType
    description: str  # normalized grouping key
    average_amount_cents: int
    frequency: Frequency
    confidence: float
    next_occurrence: date
    occurrences: int


@dataclass
class SeasonalPattern:
    """Historical averages for one calendar month across all observed years"""

    month: int  # 0 = January ... 11 = December
    average_income_cents: int
    average_expense_cents: int
    sample_count: int
    confidence: float


@dataclass
class SeasonSummary:
    """Average monthly flows for one meteorological season"""

    season: str
    avg_monthly_income_cents: int
    avg_monthly_expense_cents: int
    avg_monthly_net_cents: int


@dataclass
class SeasonComparison:
    seasons: List[SeasonSummary]
    insights: List[str]


class InsightKind(str, Enum):
    SPENDING_SPIKE = "spending_spike"
    INCOME_BOOST = "income_boost"
    ANOMALY = "anomaly"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass
class CategoryShare:
    category: str
    amount_cents: int  # per year
    percentage: float  # of the month's expenses


@dataclass
class MonthlyProfile:
    """Yearly-averaged income and expense for one calendar month, with its top categories"""

    month: int  # 0 = January ... 11 = December
    month_name: str
    average_income_cents: int
    average_expense_cents: int
    net_cents: int
    transaction_count: int
    top_categories: List[CategoryShare]
    confidence: float


@dataclass
class SeasonalInsight:
    kind: InsightKind
    month: int
    description: str
    impact_cents: int
    severity: Severity
    recommendations: List[str]


@dataclass
class HolidayImpact:
    """Average yearly spending in a holiday window's typical categories"""

    holiday: str
    months: List[int]
    average_spending_cents: int
    category_breakdown: Dict[str, int]


@dataclass
class YearlyTrends:
    """Growth across calendar-year totals"""

    income_trend: TrendDirection
    income_rate: float
    expense_trend: TrendDirection
    expense_rate: float
    volatility: float


@dataclass
class SeasonalAdjustment:
    factor: str
    impact_cents: int
    reasoning: str


@dataclass
class SeasonalForecast:
    """Next calendar month predicted from its seasonal profile and yearly trends"""

    month: int
    predicted_income_cents: int
    predicted_expense_cents: int
    predicted_net_cents: int
    confidence: float
    adjustments: List[SeasonalAdjustment]


@dataclass
class SeasonalAnalysis:
    profiles: List[MonthlyProfile]
    insights: List[SeasonalInsight]
    holiday_impacts: List[HolidayImpact]
    yearly_trends: YearlyTrends
    recommendations: List[str]
    next_month: SeasonalForecast


@dataclass
class TrendEstimate:
    """Growth and volatility across monthly aggregate totals"""

    income_growth_rate: float
    expense_growth_rate: float
    volatility: float
    confidence: float
    months_observed: int


@dataclass
class ForecastPeriod:
    """Projection for a single forecasted day"""

    date: date
    predicted_income_cents: int
    predicted_expense_cents: int
    predicted_balance_cents: int
    confidence: float


@dataclass
class ForecastSummary:
    """Headline metrics derived from the forecast and history"""

    current_balance_cents: int
    projected_balance_30d_cents: Optional[int]
    projected_balance_90d_cents: Optional[int]
    avg_monthly_income_cents: int
    avg_monthly_expense_cents: int
    burn_rate_months: Optional[float]  # None = sustainable (infinite runway)
    confidence_score: float
    insufficient_history: bool


@dataclass
class ForecastResult:
    """Output of a full forecast run"""

    periods: List[ForecastPeriod]
    summary: ForecastSummary
    insights: List[str]
    warnings: List[str]
    recurring_patterns: List[RecurringPattern] = field(default_factory=list)
    seasonal_patterns: List[SeasonalPattern] = field(default_factory=list)
    trend: Optional[TrendEstimate] = None


@dataclass
class KeyEvent:
    """Large day-over-day balance movement within a scenario"""

    date: date
    description: str
    balance_impact_cents: int


@dataclass
class ScenarioOutcome:
    """Balances and health for one scenario variant"""

    name: str
    balance_at_30d_cents: int
    balance_at_90d_cents: int
    balance_at_1y_cents: int
    cash_flow_health: CashFlowHealth
    key_events: List[KeyEvent]


@dataclass
class RiskAssessment:
    level: RiskLevel
    factors: List[str]
    mitigation: List[str]


@dataclass
class ScenarioAnalysis:
    """Optimistic / realistic / pessimistic outcomes with risk and advice"""

    optimistic: ScenarioOutcome
    realistic: ScenarioOutcome
    pessimistic: ScenarioOutcome
    recommendations: List[str]
    risk: RiskAssessment


@dataclass
class RecurringChange:
    """Hypothetical recurring income or expense"""

    amount_cents: int
    frequency: Frequency


@dataclass
class WhatIfScenario:
    """Named bundle of hypothetical modifications to the history"""

    name: str
    income_change_cents: int = 0  # added to every income transaction
    expense_change_cents: int = 0  # added to every expense transaction
    one_time_income_cents: int = 0
    one_time_expense_cents: int = 0
    recurring_income: Optional[RecurringChange] = None
    recurring_expense: Optional[RecurringChange] = None


@dataclass
class PredictionFactor:
    """Driver behind a balance prediction"""

    kind: str  # "recurring" | "seasonal"
    description: str
    impact_cents: int
    probability: float
    timeframe: str  # "short-term" | "long-term"


@dataclass
class BalancePrediction:
    """Balance at a milestone day with an optimistic/pessimistic band"""

    date: date
    day: int
    predicted_balance_cents: int
    optimistic_cents: int
    realistic_cents: int
    pessimistic_cents: int
    confidence: float
    factors: List[PredictionFactor]


@dataclass
class WhatIfResult:
    """Comparison of baseline and modified forecasts at the target day"""

    scenario_name: str
    target_day: int
    original_balance_cents: int
    modified_balance_cents: int
    balance_difference_cents: int
    percentage_change: Optional[float]  # None when the original balance is 0
    timeline: List[BalancePrediction]
