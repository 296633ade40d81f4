"""
Seasonal analysis - per calendar month averages, season comparison,
holiday spending, yearly trends and next-month outlook.
"""

import calendar
import logging
from datetime import date
from statistics import fmean
from typing import Dict, List, Optional

from cashflow_forecast.domain.models import (
    CategoryShare,
    HolidayImpact,
    InsightKind,
    MonthlyProfile,
    SeasonalAdjustment,
    SeasonalAnalysis,
    SeasonalForecast,
    SeasonalInsight,
    SeasonalPattern,
    SeasonComparison,
    SeasonSummary,
    Severity,
    Transaction,
    TransactionType,
    TrendDirection,
    YearlyTrends,
)
from cashflow_forecast.domain.thresholds import (
    CATEGORY_PEAK_PERCENT,
    HIGH_SPENDING_MONTH_RATIO,
    HIGH_SPENDING_SPIKE_RATIO,
    INCOME_BOOST_RATIO,
    LOW_INCOME_MONTH_RATIO,
    MAX_SEASONAL_RECOMMENDATIONS,
    MIN_HOLIDAY_TRANSACTIONS,
    MIN_SEASONAL_TRANSACTIONS,
    NEGATIVE_MONTH_CENTS,
    PROFILE_FULL_CONFIDENCE_TRANSACTIONS,
    RISING_EXPENSE_RATE,
    SEASONAL_EXPENSE_VOLATILITY_LIMIT,
    SEASONAL_FULL_CONFIDENCE_SAMPLES,
    SEVERE_NEGATIVE_MONTH_CENTS,
    SPARSE_YEARLY_VOLATILITY,
    SPENDING_SPIKE_RATIO,
    TOP_CATEGORY_COUNT,
    YEARLY_TREND_RATE,
)
from cashflow_forecast.domain.trends import calculate_growth_rate, calculate_volatility
from cashflow_forecast.utils.date_utils import month_index, span_days

logger = logging.getLogger(__name__)

MONTH_NAMES = list(calendar.month_name)[1:]

# Meteorological seasons by zero-based month
SEASON_MONTHS = {
    "spring": (2, 3, 4),
    "summer": (5, 6, 7),
    "fall": (8, 9, 10),
    "winter": (11, 0, 1),
}

# Holiday windows: zero-based months and the categories they drive
HOLIDAYS = {
    "New Year": ((0,), ("Entertainment", "Food & Dining")),
    "Valentine's Day": ((1,), ("Entertainment", "Gifts", "Food & Dining")),
    "Spring Break": ((2, 3), ("Travel", "Entertainment")),
    "Summer Vacation": ((5, 6, 7), ("Travel", "Entertainment", "Gas & Transportation")),
    "Back to School": ((7, 8), ("Shopping", "Education")),
    "Halloween": ((9,), ("Shopping", "Entertainment")),
    "Thanksgiving": ((10,), ("Food & Dining", "Travel")),
    "Holiday Season": ((10, 11), ("Shopping", "Gifts", "Food & Dining", "Travel")),
}

UNCATEGORIZED = "Uncategorized"


def analyze_seasonal_patterns(transactions: List[Transaction]) -> List[SeasonalPattern]:
    """
    Compute one SeasonalPattern per calendar month (always 12 entries).

    Averages are per transaction within the month bucket, ignoring the year.
    Confidence = min(sample_count / 10, 1). Months without samples come back
    with zero averages and zero confidence, meaning "no signal".
    """
    income: Dict[int, List[int]] = {month: [] for month in range(12)}
    expenses: Dict[int, List[int]] = {month: [] for month in range(12)}

    for txn in transactions:
        bucket = income if txn.type == TransactionType.INCOME else expenses
        bucket[month_index(txn.date)].append(txn.amount_cents)

    patterns = []
    for month in range(12):
        sample_count = len(income[month]) + len(expenses[month])
        patterns.append(
            SeasonalPattern(
                month=month,
                average_income_cents=round(fmean(income[month])) if income[month] else 0,
                average_expense_cents=round(fmean(expenses[month])) if expenses[month] else 0,
                sample_count=sample_count,
                confidence=min(sample_count / SEASONAL_FULL_CONFIDENCE_SAMPLES, 1.0),
            )
        )

    return patterns


def _years_of_data(transactions: List[Transaction]) -> float:
    """Observed span in years, never less than one"""
    days = span_days([t.date for t in transactions])
    return max((days - 1) / 365, 1.0)


def compare_seasons(transactions: List[Transaction]) -> SeasonComparison:
    """Average monthly income, expense and net flow for each season"""
    years = _years_of_data(transactions)
    summaries = []

    for season, months in SEASON_MONTHS.items():
        in_season = [t for t in transactions if month_index(t.date) in months]
        divisor = len(months) * years
        income = sum(t.amount_cents for t in in_season if t.type == TransactionType.INCOME) / divisor
        expense = sum(t.amount_cents for t in in_season if t.type == TransactionType.EXPENSE) / divisor
        summaries.append(
            SeasonSummary(
                season=season,
                avg_monthly_income_cents=round(income),
                avg_monthly_expense_cents=round(expense),
                avg_monthly_net_cents=round(income) - round(expense),
            )
        )

    by_expense = sorted(summaries, key=lambda s: s.avg_monthly_expense_cents, reverse=True)
    best_net = max(summaries, key=lambda s: s.avg_monthly_net_cents)
    insights = [
        f"Highest spending season: {by_expense[0].season} "
        f"(${by_expense[0].avg_monthly_expense_cents / 100:,.0f}/month)",
        f"Lowest spending season: {by_expense[-1].season} "
        f"(${by_expense[-1].avg_monthly_expense_cents / 100:,.0f}/month)",
        f"Best cash flow season: {best_net.season} "
        f"(net ${best_net.avg_monthly_net_cents / 100:,.0f}/month)",
    ]

    return SeasonComparison(seasons=summaries, insights=insights)


def monthly_profiles(transactions: List[Transaction]) -> List[MonthlyProfile]:
    """
    Yearly-averaged totals for each calendar month (always 12 entries).

    Unlike analyze_seasonal_patterns, amounts are month totals divided by the
    years of history, so a month reads as "what this month usually costs".
    """
    years = _years_of_data(transactions)
    by_month: Dict[int, List[Transaction]] = {month: [] for month in range(12)}
    for txn in transactions:
        by_month[month_index(txn.date)].append(txn)

    profiles = []
    for month, month_txns in by_month.items():
        income = sum(t.amount_cents for t in month_txns if t.type == TransactionType.INCOME)
        category_totals: Dict[str, int] = {}
        for txn in month_txns:
            if txn.type == TransactionType.EXPENSE:
                category = txn.category or UNCATEGORIZED
                category_totals[category] = category_totals.get(category, 0) + txn.amount_cents

        expense = sum(category_totals.values())
        ranked = sorted(category_totals.items(), key=lambda item: item[1], reverse=True)
        top_categories = [
            CategoryShare(
                category=category,
                amount_cents=round(amount / years),
                percentage=amount / expense * 100 if expense else 0.0,
            )
            for category, amount in ranked[:TOP_CATEGORY_COUNT]
        ]

        average_income = round(income / years)
        average_expense = round(expense / years)
        profiles.append(
            MonthlyProfile(
                month=month,
                month_name=MONTH_NAMES[month],
                average_income_cents=average_income,
                average_expense_cents=average_expense,
                net_cents=average_income - average_expense,
                transaction_count=len(month_txns),
                top_categories=top_categories,
                confidence=min(len(month_txns) / PROFILE_FULL_CONFIDENCE_TRANSACTIONS, 1.0),
            )
        )

    return profiles


def identify_seasonal_insights(profiles: List[MonthlyProfile]) -> List[SeasonalInsight]:
    """Spending spikes, income boosts and negative months, largest impact first"""
    if not profiles:
        return []

    mean_expense = fmean(p.average_expense_cents for p in profiles)
    mean_income = fmean(p.average_income_cents for p in profiles)
    insights = []

    for profile in profiles:
        name = profile.month_name
        if profile.average_expense_cents > mean_expense * SPENDING_SPIKE_RATIO:
            above = (profile.average_expense_cents / mean_expense - 1) * 100
            severe = profile.average_expense_cents > mean_expense * HIGH_SPENDING_SPIKE_RATIO
            insights.append(
                SeasonalInsight(
                    kind=InsightKind.SPENDING_SPIKE,
                    month=profile.month,
                    description=f"{name} shows significantly higher spending ({above:.1f}% above average)",
                    impact_cents=round(profile.average_expense_cents - mean_expense),
                    severity=Severity.HIGH if severe else Severity.MEDIUM,
                    recommendations=[
                        f"Plan additional budget for {name}",
                        "Save extra in preceding months to cover increased expenses",
                    ],
                )
            )

        if profile.average_income_cents > mean_income * INCOME_BOOST_RATIO:
            above = (profile.average_income_cents / mean_income - 1) * 100
            insights.append(
                SeasonalInsight(
                    kind=InsightKind.INCOME_BOOST,
                    month=profile.month,
                    description=f"{name} typically brings higher income ({above:.1f}% above average)",
                    impact_cents=round(profile.average_income_cents - mean_income),
                    severity=Severity.LOW,
                    recommendations=[
                        "Take advantage of higher income to boost savings",
                        "Consider making extra debt payments during this period",
                    ],
                )
            )

        if profile.net_cents < NEGATIVE_MONTH_CENTS:
            severe = abs(profile.net_cents) > SEVERE_NEGATIVE_MONTH_CENTS
            insights.append(
                SeasonalInsight(
                    kind=InsightKind.ANOMALY,
                    month=profile.month,
                    description=f"{name} shows negative cash flow of ${abs(profile.net_cents) / 100:,.0f}",
                    impact_cents=profile.net_cents,
                    severity=Severity.HIGH if severe else Severity.MEDIUM,
                    recommendations=[
                        f"Review and reduce expenses during {name}",
                        "Build emergency fund to cover cash flow gaps",
                    ],
                )
            )

    return sorted(insights, key=lambda i: abs(i.impact_cents), reverse=True)


def _matches_holiday(category: str, holiday_categories) -> bool:
    # Substring match either way, case-insensitive; blank categories never match
    if not category:
        return False
    category = category.lower()
    return any(c.lower() in category or category in c.lower() for c in holiday_categories)


def analyze_holiday_impacts(transactions: List[Transaction]) -> List[HolidayImpact]:
    """
    Average yearly spending attributable to each holiday window.

    A transaction counts toward a holiday when it falls in one of the window's
    months and its category overlaps one of the holiday's categories. Windows
    with fewer than 3 matching transactions are skipped. Only expenses add to
    the spending figures. Sorted by average spending, highest first.
    """
    years = _years_of_data(transactions)
    impacts = []

    for holiday, (months, categories) in HOLIDAYS.items():
        matching = [
            t for t in transactions
            if month_index(t.date) in months and _matches_holiday(t.category, categories)
        ]
        if len(matching) < MIN_HOLIDAY_TRANSACTIONS:
            continue

        breakdown: Dict[str, int] = {}
        for txn in matching:
            if txn.type == TransactionType.EXPENSE:
                breakdown[txn.category] = breakdown.get(txn.category, 0) + txn.amount_cents

        impacts.append(
            HolidayImpact(
                holiday=holiday,
                months=list(months),
                average_spending_cents=round(sum(breakdown.values()) / years),
                category_breakdown={cat: round(amount / years) for cat, amount in breakdown.items()},
            )
        )

    return sorted(impacts, key=lambda h: h.average_spending_cents, reverse=True)


def _direction(rate: float) -> TrendDirection:
    if rate > YEARLY_TREND_RATE:
        return TrendDirection.INCREASING
    if rate < -YEARLY_TREND_RATE:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def calculate_yearly_trends(transactions: List[Transaction]) -> YearlyTrends:
    """Growth of calendar-year income and expense totals; stable below two years"""
    totals: Dict[int, List[int]] = {}
    for txn in transactions:
        bucket = totals.setdefault(txn.date.year, [0, 0])
        if txn.type == TransactionType.INCOME:
            bucket[0] += txn.amount_cents
        else:
            bucket[1] += txn.amount_cents

    if len(totals) < 2:
        return YearlyTrends(
            income_trend=TrendDirection.STABLE,
            income_rate=0.0,
            expense_trend=TrendDirection.STABLE,
            expense_rate=0.0,
            volatility=SPARSE_YEARLY_VOLATILITY,
        )

    income_by_year = [totals[year][0] for year in sorted(totals)]
    expense_by_year = [totals[year][1] for year in sorted(totals)]
    income_rate = calculate_growth_rate(income_by_year)
    expense_rate = calculate_growth_rate(expense_by_year)

    return YearlyTrends(
        income_trend=_direction(income_rate),
        income_rate=income_rate,
        expense_trend=_direction(expense_rate),
        expense_rate=expense_rate,
        volatility=calculate_volatility(income_by_year + expense_by_year),
    )


def forecast_next_month(transactions: List[Transaction], as_of: Optional[date] = None) -> SeasonalForecast:
    """
    Predict the calendar month after as_of from its monthly profile.

    Each side is nudged by one twelfth of its yearly growth rate; every
    nudge is reported as an adjustment.
    """
    as_of = as_of or date.today()
    month = as_of.month % 12  # zero-based index of the following month
    profile = monthly_profiles(transactions)[month]
    trends = calculate_yearly_trends(transactions)

    income = profile.average_income_cents
    expense = profile.average_expense_cents
    adjustments = []

    if trends.income_rate != 0:
        impact = round(income * trends.income_rate / 12)
        income += impact
        adjustments.append(
            SeasonalAdjustment(
                factor="Income Trend",
                impact_cents=impact,
                reasoning=f"Applied {trends.income_rate * 100:.1f}% annual income growth rate",
            )
        )

    if trends.expense_rate != 0:
        impact = round(expense * trends.expense_rate / 12)
        expense += impact
        adjustments.append(
            SeasonalAdjustment(
                factor="Expense Trend",
                impact_cents=impact,
                reasoning=f"Applied {trends.expense_rate * 100:.1f}% annual expense growth rate",
            )
        )

    return SeasonalForecast(
        month=month,
        predicted_income_cents=income,
        predicted_expense_cents=expense,
        predicted_net_cents=income - expense,
        confidence=profile.confidence,
        adjustments=adjustments,
    )


def seasonal_recommendations(
    profiles: List[MonthlyProfile],
    insights: List[SeasonalInsight],
    trends: YearlyTrends,
) -> List[str]:
    """Budgeting advice from month-to-month variation, yearly trends and severe insights"""
    recommendations = []
    monthly_expenses = [p.average_expense_cents for p in profiles]

    if any(monthly_expenses) and calculate_volatility(monthly_expenses) > SEASONAL_EXPENSE_VOLATILITY_LIMIT:
        recommendations.append(
            "Your spending varies significantly by month. Consider creating a seasonal budget plan."
        )
        recommendations.append("Build a larger emergency fund to handle seasonal expense fluctuations.")

    if trends.expense_trend == TrendDirection.INCREASING and trends.expense_rate > RISING_EXPENSE_RATE:
        recommendations.append("Your expenses are trending upward. Review and optimize your spending habits.")

    if trends.income_trend == TrendDirection.DECREASING:
        recommendations.append("Your income shows a declining trend. Consider diversifying income sources.")

    for insight in insights:
        if insight.severity == Severity.HIGH:
            recommendations.extend(insight.recommendations)

    if monthly_expenses:
        threshold = fmean(monthly_expenses) * HIGH_SPENDING_MONTH_RATIO
        heavy = [p.month_name for p in profiles if p.average_expense_cents > threshold]
        if heavy:
            recommendations.append(f"Plan ahead for higher spending months: {', '.join(heavy)}")

    return recommendations[:MAX_SEASONAL_RECOMMENDATIONS]


def month_recommendations(analysis: SeasonalAnalysis, month: int) -> List[str]:
    """Advice for one calendar month (0 = January) drawn from a finished analysis"""
    profile = next((p for p in analysis.profiles if p.month == month), None)
    if profile is None:
        return ["Not enough data for this month - consider tracking more transactions"]

    name = profile.month_name
    mean_expense = fmean(p.average_expense_cents for p in analysis.profiles)
    mean_income = fmean(p.average_income_cents for p in analysis.profiles)
    recommendations = []

    if profile.average_expense_cents > mean_expense * HIGH_SPENDING_MONTH_RATIO:
        recommendations.append(f"{name} typically has high expenses. Plan and budget accordingly.")
        recommendations.append(f"Consider setting aside extra funds in the months leading up to {name}.")

    if profile.average_income_cents < mean_income * LOW_INCOME_MONTH_RATIO:
        recommendations.append(f"Income tends to be lower in {name}. Prepare for reduced cash flow.")

    for share in profile.top_categories[:2]:
        if share.percentage > CATEGORY_PEAK_PERCENT:
            recommendations.append(
                f"{share.category} spending peaks in {name} ({share.percentage:.1f}% of expenses)."
            )

    holiday = next((h for h in analysis.holiday_impacts if month in h.months), None)
    if holiday:
        recommendations.append(
            f"{holiday.holiday} affects spending this month. "
            f"Budget an extra ${holiday.average_spending_cents / 100:,.0f}."
        )

    return recommendations or ["Spending patterns are relatively stable for this month."]


def _minimal_analysis(as_of: date) -> SeasonalAnalysis:
    return SeasonalAnalysis(
        profiles=[],
        insights=[
            SeasonalInsight(
                kind=InsightKind.ANOMALY,
                month=month_index(as_of),
                description="Not enough transaction data for seasonal analysis",
                impact_cents=0,
                severity=Severity.LOW,
                recommendations=["Add more transaction history to enable seasonal insights"],
            )
        ],
        holiday_impacts=[],
        yearly_trends=YearlyTrends(
            income_trend=TrendDirection.STABLE,
            income_rate=0.0,
            expense_trend=TrendDirection.STABLE,
            expense_rate=0.0,
            volatility=SPARSE_YEARLY_VOLATILITY,
        ),
        recommendations=[
            "Import more historical transaction data to enable seasonal analysis",
            "Track transactions for at least 6 months to see meaningful patterns",
        ],
        next_month=SeasonalForecast(
            month=as_of.month % 12,
            predicted_income_cents=0,
            predicted_expense_cents=0,
            predicted_net_cents=0,
            confidence=0.0,
            adjustments=[],
        ),
    )


def analyze_seasonality(transactions: List[Transaction], as_of: Optional[date] = None) -> SeasonalAnalysis:
    """
    Full seasonal analysis: monthly profiles, insights, holiday impacts,
    yearly trends, recommendations and the next-month outlook.

    Histories under 50 transactions get a placeholder analysis that asks
    for more data instead of reading noise as seasonality.
    """
    as_of = as_of or date.today()
    if len(transactions) < MIN_SEASONAL_TRANSACTIONS:
        logger.debug("Seasonal analysis skipped: %d transactions", len(transactions))
        return _minimal_analysis(as_of)

    profiles = monthly_profiles(transactions)
    insights = identify_seasonal_insights(profiles)
    trends = calculate_yearly_trends(transactions)

    return SeasonalAnalysis(
        profiles=profiles,
        insights=insights,
        holiday_impacts=analyze_holiday_impacts(transactions),
        yearly_trends=trends,
        recommendations=seasonal_recommendations(profiles, insights, trends),
        next_month=forecast_next_month(transactions, as_of),
    )
