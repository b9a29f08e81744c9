# intake/main.py
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from intake import __version__
from intake.core.config import GatewayConfig, get_settings
from intake.core.exceptions import ClientInputError, GatewayError
from intake.core.logging import configure_structlog, get_structlog_logger, set_request_id
from intake.middleware import LoggingMiddleware, RequestIdMiddleware
from intake.routes import feedback_router, health_router, lead_router
from intake.schemas.responses import LeadResponse
from intake.services.gateway import GatewayOutcome, LeadGateway
from intake.services.validation import collect_field_errors

logger = get_structlog_logger(__name__)


def _init_sentry(config: GatewayConfig) -> None:
    sentry_sdk.init(
        dsn=config.sentry_dsn,
        environment=config.environment,
        integrations=[
            AsyncioIntegration(),
            FastApiIntegration(),
            StarletteIntegration(),
        ],
        traces_sample_rate=1.0 if config.is_development else 0.1,
        send_default_pii=False,
    )


def create_app(config: Optional[GatewayConfig] = None, gateway: Optional[LeadGateway] = None) -> FastAPI:
    """
    Build the gateway application.

    ``gateway`` lets tests swap in a pipeline with stubbed verification or
    delivery; by default one is built from ``config``.
    """
    config = config or (gateway.config if gateway else get_settings())
    configure_structlog(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("application.starting", environment=config.environment)

        if config.sentry_dsn:
            _init_sentry(config)
            logger.info("sentry.initialized")

        if not config.turnstile_secret_key:
            logger.warning("config.missing", settings=["TURNSTILE_SECRET_KEY"])

        logger.info("application.started")
        yield
        logger.info("application.shutdown_complete")

    app = FastAPI(
        title="Lead Intake Gateway",
        version=__version__,
        description="Validates website lead forms and relays them to the CRM webhook",
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None,
        openapi_url="/openapi.json" if config.is_development else None,
        lifespan=lifespan,
    )
    app.state.gateway = gateway or LeadGateway(config)

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(GatewayError)
    async def gateway_exception_handler(request: Request, exc: GatewayError):
        logger.warning(
            "gateway.exception",
            status_code=exc.status_code,
            code=exc.code,
            path=request.url.path,
            method=request.method,
        )
        return GatewayOutcome.from_error(exc).to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        field_errors = collect_field_errors(exc)
        logger.warning(
            "validation.error",
            path=request.url.path,
            method=request.method,
            fields=sorted(field_errors),
        )
        return GatewayOutcome.from_error(ClientInputError(field_errors=field_errors)).to_response()

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        body = LeadResponse(ok=False, error=str(exc.detail)).body()
        return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_id = f"err_{int(time.time())}_{hash(str(exc)) % 10000:04d}"
        set_request_id(error_id)

        logger.error(
            "unhandled.exception",
            error_id=error_id,
            error_type=type(exc).__name__,
            error=str(exc),
            path=request.url.path,
            method=request.method,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=LeadResponse(ok=False, error="Internal server error").body(),
            headers={"X-Error-ID": error_id},
        )

    app.include_router(health_router, prefix=config.api_prefix)
    app.include_router(lead_router, prefix=config.api_prefix, tags=["leads"])
    app.include_router(feedback_router, prefix=config.api_prefix, tags=["leads"])

    if config.metrics_enabled and not config.is_testing:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    logger.info("application.configured", environment=config.environment)
    return app


app = create_app()
