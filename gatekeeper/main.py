# gatekeeper/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from gatekeeper.api.dependencies import get_metrics
from gatekeeper.api.middleware import CorrelationIdMiddleware, RequestLoggingMiddleware
from gatekeeper.api.routers import doors, events, health, metrics, users
from gatekeeper.application.exceptions import (
    ApplicationError,
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
)
from gatekeeper.config.logging import configure_logging
from gatekeeper.config.settings import get_settings
from gatekeeper.gateway import AccessGateway
from gatekeeper.infrastructure.database.credential_store_db import credential_store_scope

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.gateway = None
    if settings.gateway_enabled:
        gateway = AccessGateway.from_settings(
            settings,
            store_scope=credential_store_scope,
            metrics=get_metrics(),
        )
        # Broker unreachable at startup is fatal: let it propagate.
        await gateway.start()
        app.state.gateway = gateway
    try:
        yield
    finally:
        if app.state.gateway is not None:
            await app.state.gateway.stop()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> RequestLogging.
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_error_handler(request, exc: StoreUnavailableError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(ConflictError)
async def conflict_error_handler(request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


# Routers: /health, /metrics, /events, /users, /doors
app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(events.router, prefix="/events")
app.include_router(users.router, prefix="/users")
app.include_router(doors.router, prefix="/doors")
