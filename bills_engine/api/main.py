"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from bills_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from bills_engine.api.v1 import actions, months, obligations
from bills_engine.infrastructure.observability.logging import setup_logging
from bills_engine.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Bills Engine",
        description="Recurring bills, installment plans and debts projected by calendar month",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(obligations.router, prefix="/v1", tags=["obligations"])
    app.include_router(actions.router, prefix="/v1", tags=["actions"])
    app.include_router(months.router, prefix="/v1", tags=["months"])

    return app


app = create_app()
