"""Directory API server factory."""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from unidir.config.settings import Settings, get_settings
from unidir.logging import configure_logging, get_logger
from unidir.runtime.api import (
    catalog_router,
    entities_router,
    health_router,
    sessions_router,
)
from unidir.runtime.api.errors import register_exception_handlers
from unidir.runtime.context import AppContext
from unidir.runtime.storage.base import DirectoryStore
from unidir.version import __version__

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    store: DirectoryStore | None = None,
) -> FastAPI:
    """Create the directory FastAPI application.

    Args:
        settings: Settings to use instead of the environment
        store: Store to use instead of the configured backend

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.logging.level, json_output=settings.logging.json_output)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        context = AppContext.build(settings, store=store)
        app.state.context = context
        await context.start()
        logger.info(
            "server_started",
            storage=settings.storage.backend,
            protected=sorted(kind.value for kind in context.protected),
        )
        try:
            yield
        finally:
            await context.stop()
            logger.info("server_stopped")

    app = FastAPI(
        title="University Directory API",
        description="""
        CRUD API over universities, courses, IELTS/PTE scores, admission
        requirements and users.

        ## Authentication

        - `POST /login` returns a token valid for one hour
        - Writes (`POST`, `PUT`, `DELETE`) on entity routes need the raw
          token in the `token` header
        - `POST /logout` revokes the token
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.runtime.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "token"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request_handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(catalog_router)
    app.include_router(entities_router)

    return app


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the directory server.

    Args:
        host: Host to bind to, defaults to the runtime settings
        port: Port to bind to, defaults to the runtime settings
    """
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.runtime.host,
        port=port or settings.runtime.port,
        log_level=settings.runtime.log_level,
    )


if __name__ == "__main__":
    run_server()
