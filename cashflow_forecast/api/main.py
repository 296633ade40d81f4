"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cashflow_forecast.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cashflow_forecast.api.v1 import forecast, predictions, scenarios, seasons, what_if
from cashflow_forecast.infrastructure.observability.logging import setup_logging
from cashflow_forecast.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Cash Flow Forecast Service",
        description="Cash flow forecasting, scenario analysis and what-if evaluation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(forecast.router, prefix="/v1", tags=["forecast"])
    app.include_router(scenarios.router, prefix="/v1", tags=["scenarios"])
    app.include_router(what_if.router, prefix="/v1", tags=["what-if"])
    app.include_router(predictions.router, prefix="/v1", tags=["predictions"])
    app.include_router(seasons.router, prefix="/v1", tags=["seasons"])

    return app


app = create_app()
