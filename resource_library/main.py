"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from resource_library.config import settings
from resource_library.dependencies import get_library
from resource_library.logging_config import configure_logging
from resource_library.routers import health, resources
from resource_library.services.errors import CatalogError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and, when enabled, build the first catalog."""
    configure_logging(json_logs=not settings.debug, log_level=settings.log_level)
    logger = structlog.get_logger()

    if settings.rebuild_on_startup and settings.repo_owner and settings.repo_name:
        library = get_library()
        try:
            await library.rebuild()
        except CatalogError as exc:
            # The library keeps the error; GET /resources reports it.
            logger.warning("startup_rebuild_failed", diagnostic=library.diagnostic(exc))

    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

if settings.cors_origins:
    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(resources.router)
