from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from casting_messaging.api.middleware.correlation_id import CorrelationIdMiddleware
from casting_messaging.api.middleware.db_check import (
    DatabaseAvailabilityMiddleware,
    database_unavailable_response,
)
from casting_messaging.api.middleware.timing import RequestTimingMiddleware
from casting_messaging.api.v1.routers import (
    admin_conversations,
    conversations,
    health,
    messages,
)
from casting_messaging.application.exceptions import (
    AppError,
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from casting_messaging.config import settings
from casting_messaging.infrastructure.db.health import DatabaseMonitor, engine_probe
from casting_messaging.infrastructure.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    await app.state.db_monitor.start(settings.DB_HEALTHCHECK_INTERVAL)
    if not app.state.db_monitor.is_ready:
        logger.warning(
            "Database not reachable at startup, messaging requests will get 503 until it is",
        )

    yield

    await app.state.db_monitor.stop()
    await app.state.redis.aclose()
    await engine.dispose()
    logger.info("Connection pools closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Casting Platform Messaging",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.db_monitor = DatabaseMonitor(engine_probe(engine))

    app.add_middleware(DatabaseAvailabilityMiddleware, prefix=settings.messaging_prefix)
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router, prefix=settings.API_PREFIX)
    app.include_router(messages.router, prefix=settings.API_PREFIX)
    app.include_router(admin_conversations.router, prefix=settings.API_PREFIX)

    return app


def _error(status_code: int, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": exc.detail, **exc.extra},
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, exc)

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return _error(403, exc)

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return _error(409, exc)

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return _error(422, exc)

    @app.exception_handler(AuthenticationError)
    async def _unauthenticated(_req: Request, exc: AuthenticationError) -> JSONResponse:
        return _error(401, exc)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_req: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=422,
            content={"success": False, "error": f"{field}: {message}" if field else message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http(_req: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DBAPIError)
    async def _database(req: Request, exc: DBAPIError) -> JSONResponse:
        if isinstance(exc, (OperationalError, InterfaceError)) or exc.connection_invalidated:
            req.app.state.db_monitor.mark_down(str(exc.orig))
            return database_unavailable_response()
        logger.exception("Database error on %s %s", req.method, req.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def _unhandled(req: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", req.method, req.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )
