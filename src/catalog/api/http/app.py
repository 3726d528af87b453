"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from catalog.api.http.app_data import ApplicationDependencies
from catalog.api.http.routers import health, pages, product
from catalog.api.utils.app_startup import configure_logging
from catalog.core.pricing import FlatTaxPolicy
from catalog.core.services.database import DbManageService, DbSessionService
from catalog.runtime.config.config_data import ConfigData
from catalog.runtime.context import get_config

__all__ = ["app", "create_app", "startup", "shutdown"]


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        return response


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
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

            # Raw messages only outside production
            environment = request.app.state.config.app.environment
            detail = "Internal Server Error" if environment == "production" else str(exc)
            return PlainTextResponse(
                detail, status_code=500, headers={"X-Request-ID": request_id}
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    # Unknown paths and known paths with an unsupported method look the same
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return PlainTextResponse(
        str(exc.detail), status_code=exc.status_code, headers=exc.headers
    )


def startup(app: FastAPI) -> None:
    """Build application-wide dependencies and ensure the schema exists.

    Any database error here propagates and aborts startup.
    """
    config: ConfigData = app.state.config
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService(config.database, config.app.environment)
    DbManageService(database_service).ensure_schema()

    app.state.app_dependencies = ApplicationDependencies(
        config=config,
        database_service=database_service,
        tax_policy=FlatTaxPolicy(config.pricing.flat_tax_rate),
    )


def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup(app)
    try:
        yield
    finally:
        shutdown(app)


def create_app(config: ConfigData | None = None) -> FastAPI:
    """Create the catalog application for ``config`` (the active config by default)."""
    config = config or get_config()
    configure_logging(config)

    is_production = config.app.environment == "production"
    application = FastAPI(
        title=config.app.title,
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    application.state.config = config

    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    application.middleware("http")(log_requests)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)

    application.include_router(pages.router)
    application.include_router(product.router)
    application.include_router(health.router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # request logging middleware covers access logs
    )
