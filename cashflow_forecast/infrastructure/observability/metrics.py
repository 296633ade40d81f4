"""Prometheus metrics for forecast volume, confidence and transaction source health"""

from typing import Optional

from prometheus_client import Counter, Histogram

# Forecast metrics
forecast_counter = Counter(
    "cashflow_forecast_total",
    "Total forecast operations served",
    ["operation"],  # forecast | scenarios | what_if | predictions | seasons
)

confidence_bucket_counter = Counter(
    "cashflow_forecast_confidence_bucket",
    "Forecast confidence scores by bucket",
    ["bucket"],  # low, medium, high
)

insufficient_history_counter = Counter(
    "cashflow_forecast_insufficient_history_total",
    "Forecasts produced from less than 30 days of history",
)

# Transaction source metrics
transaction_fetch_failures_counter = Counter(
    "transaction_fetch_failures_total",
    "Failed transaction source calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_forecast(operation: str, confidence_score: Optional[float] = None, insufficient_history: bool = False) -> None:
    """Record forecast volume and the distribution of confidence scores"""
    forecast_counter.labels(operation=operation).inc()

    if insufficient_history:
        insufficient_history_counter.inc()

    if confidence_score is None:
        return

    if confidence_score < 0.4:
        bucket = "low"
    elif confidence_score < 0.7:
        bucket = "medium"
    else:
        bucket = "high"

    confidence_bucket_counter.labels(bucket=bucket).inc()
