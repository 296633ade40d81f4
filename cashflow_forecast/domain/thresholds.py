"""Tunable thresholds and multipliers for the forecasting heuristics"""

from cashflow_forecast.domain.models import Frequency

# Pattern detection
MIN_PATTERN_OCCURRENCES = 3
MIN_PATTERN_CONFIDENCE = 0.5
WEEKLY_MAX_INTERVAL_DAYS = 10
MONTHLY_MAX_INTERVAL_DAYS = 40
QUARTERLY_MAX_INTERVAL_DAYS = 120
RELIABLE_PATTERN_CONFIDENCE = 0.7

# Nominal period used for phase alignment
FREQUENCY_PERIOD_DAYS = {
    Frequency.WEEKLY: 7,
    Frequency.MONTHLY: 30,
    Frequency.QUARTERLY: 90,
    Frequency.YEARLY: 365,
}

# Seasonal aggregation
SEASONAL_FULL_CONFIDENCE_SAMPLES = 10
DAYS_PER_MONTH = 30

# Seasonal analysis
MIN_SEASONAL_TRANSACTIONS = 50
PROFILE_FULL_CONFIDENCE_TRANSACTIONS = 20
TOP_CATEGORY_COUNT = 5
SPENDING_SPIKE_RATIO = 1.3
HIGH_SPENDING_SPIKE_RATIO = 1.5
INCOME_BOOST_RATIO = 1.2
NEGATIVE_MONTH_CENTS = -100_000  # -$1000
SEVERE_NEGATIVE_MONTH_CENTS = 200_000  # $2000 either way
MIN_HOLIDAY_TRANSACTIONS = 3
YEARLY_TREND_RATE = 0.05
SPARSE_YEARLY_VOLATILITY = 0.2
SEASONAL_EXPENSE_VOLATILITY_LIMIT = 0.3
RISING_EXPENSE_RATE = 0.1
HIGH_SPENDING_MONTH_RATIO = 1.2
LOW_INCOME_MONTH_RATIO = 0.8
CATEGORY_PEAK_PERCENT = 30
MAX_SEASONAL_RECOMMENDATIONS = 8

# Trend estimation
TREND_FULL_CONFIDENCE_MONTHS = 6
DEFAULT_VOLATILITY = 0.5
SPARSE_TREND_CONFIDENCE = 0.2

# Forecast generation
OCCURRENCE_PROBABILITY_THRESHOLD = 0.1
SEASONAL_CONFIDENCE_GATE = 0.3
TREND_CONFIDENCE_GATE = 0.4
NO_SIGNAL_CONFIDENCE = 0.3
MIN_HISTORY_DAYS = 30
INSUFFICIENT_HISTORY_CONFIDENCE = 0.25

# Summary, insights and warnings
LOW_BALANCE_CENTS = 100_000  # $1000
URGENT_BURN_RATE_MONTHS = 6
LOW_CONFIDENCE = 0.4
TREND_INSIGHT_CONFIDENCE = 0.5
INCOME_GROWTH_INSIGHT_RATE = 0.02
HIGH_CASH_FLOW_VOLATILITY = 0.7

# Scenario multipliers (income, expense)
REALISTIC_MULTIPLIERS = (1.0, 1.0)
OPTIMISTIC_MULTIPLIERS = (1.15, 0.9)
PESSIMISTIC_MULTIPLIERS = (0.9, 1.15)
SCENARIO_HORIZON_DAYS = 365

# Cash flow health: minimum income/expense ratio per bucket
EXCELLENT_RATIO = 1.5
GOOD_RATIO = 1.2
FAIR_RATIO = 1.0

KEY_EVENT_THRESHOLD_CENTS = 100_000  # $1000 day-over-day move
MAX_KEY_EVENTS = 5

# Risk factors
BALANCE_DECLINE_RATIO = 0.5
INCOME_CONCENTRATION_LIMIT = 0.8
EXPENSE_VOLATILITY_LIMIT = 0.4
HIGH_RISK_FACTOR_COUNT = 3

# Recommendations
SHORT_TERM_DECLINE_RATIO = 0.8
EMERGENCY_FUND_CENTS = 100_000  # $1000
GROWTH_INVEST_MULTIPLE = 3
INCOME_VARIABILITY_LIMIT = 0.3

# Balance predictions
PREDICTION_MILESTONE_DAYS = (7, 14, 30, 60, 90, 180, 365)
BALANCE_BAND_RATE = 0.2
DEFAULT_BALANCE_VOLATILITY = 0.2
MAX_PREDICTION_FACTORS = 10
HOLIDAY_SPEND_SHARE = 0.3
HOLIDAY_FACTOR_PROBABILITY = 0.8
HOLIDAY_MIN_WINDOW_DAYS = 60

# What-if evaluation
WHAT_IF_HORIZON_DAYS = 365
RECURRING_CHANGE_SCHEDULE = {
    Frequency.WEEKLY: (52, 7),
    Frequency.MONTHLY: (12, 30),
    Frequency.QUARTERLY: (4, 90),
    Frequency.YEARLY: (1, 365),
}
