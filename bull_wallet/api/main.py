"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from bull_wallet.api.middleware import RequestIDMiddleware, MetricsMiddleware
from bull_wallet.api.dependencies import get_request_id
from bull_wallet.api.v1 import conversions, profiles, rates, steps, transactions, withdrawals
from bull_wallet.api.v1.schemas import ErrorResponse
from bull_wallet.domain import exceptions
from bull_wallet.infrastructure.observability.logging import setup_logging
from bull_wallet.config import settings

# Setup structured logging
setup_logging(settings.log_level)

ERROR_STATUS_CODES = {
    exceptions.InvalidAmount: 422,
    exceptions.InvalidRecipient: 422,
    exceptions.InvalidGoals: 422,
    exceptions.WithdrawalDeclined: 402,
    exceptions.StorageConflict: 409,
    exceptions.RateUnavailable: 503,
    exceptions.StorageUnavailable: 503,
    exceptions.ProfileNotFound: 404,
    exceptions.TransactionNotFound: 404,
}


async def wallet_error_handler(request: Request, exc: exceptions.WalletError) -> JSONResponse:
    """Turn typed wallet failures into {"error", "detail", "retryable"} bodies"""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    logging.info(
        f"Wallet request failed: {exc.code}",
        extra={"request_id": get_request_id(request), "path": request.url.path, "status": status_code},
    )
    body = ErrorResponse(error=exc.code, detail=str(exc), retryable=exc.retryable)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Bull Wallet",
        description="Step rewards, currency conversion and MoMo withdrawals",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(exceptions.WalletError, wallet_error_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(profiles.router, prefix="/v1", tags=["profiles"])
    app.include_router(steps.router, prefix="/v1", tags=["rewards"])
    app.include_router(conversions.router, prefix="/v1", tags=["conversions"])
    app.include_router(withdrawals.router, prefix="/v1", tags=["withdrawals"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(rates.router, prefix="/v1", tags=["exchange-rate"])

    return app


app = create_app()
