"""FastAPI application factory and setup."""

import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.library import __version__
from src.library.api.http.app_data import ApplicationDependencies
from src.library.api.http.errors import LEGACY_ERROR_DETAIL, register_exception_handlers
from src.library.api.http.routers.health import router as health_router
from src.library.api.http.routers.service.author import router as author_router
from src.library.api.http.routers.service.book import router as book_router
from src.library.api.http.routers.service.user import router as user_router
from src.library.api.utils.app_startup import configure_logging
from src.library.core.services.database.db_manage import DbManageService
from src.library.core.services.database.db_session import DbSessionService
from src.library.runtime.config.config_data import ConfigData
from src.library.runtime.context import get_config


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if request.app.state.config.app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            legacy = request.app.state.config.app.legacy_error_mapping
            return JSONResponse(
                status_code=500,
                content={
                    "detail": LEGACY_ERROR_DETAIL if legacy else "Internal Server Error",
                    "request_id": request_id,
                },
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config: ConfigData = app.state.config
    owns_database = getattr(app.state, "app_dependencies", None) is None
    if owns_database:
        app.state.app_dependencies = ApplicationDependencies(
            database_service=DbSessionService(config.database)
        )

    deps: ApplicationDependencies = app.state.app_dependencies
    DbManageService(deps.database_service.engine).create_all()
    logger.info("Starting up application in {} environment", config.app.environment)
    try:
        yield
    finally:
        logger.info("Shutting down application")
        if owns_database:
            deps.database_service.dispose()
            app.state.app_dependencies = None


def create_app(
    config: ConfigData | None = None,
    database_service: DbSessionService | None = None,
) -> FastAPI:
    """Build the library API.

    Args:
        config: Configuration to run with; the active configuration when omitted.
        database_service: Pre-built database service. When omitted one is
            created from ``config.database`` at startup.
    """
    config = config or get_config()
    configure_logging(config)

    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    production = config.app.environment == "production"
    app = FastAPI(
        title="Library API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )
    app.state.config = config
    app.state.app_dependencies = (
        ApplicationDependencies(database_service=database_service)
        if database_service is not None
        else None
    )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(author_router)
    app.include_router(book_router)
    app.include_router(user_router)
    return app
