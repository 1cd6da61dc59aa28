"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from golinks.api.routes import gateway, health, redirects, search
from golinks.config import VERSION, get_database_url, get_ui_path
from golinks.core.errors import GoLinksError
from golinks.core.interfaces import Backend
from golinks.database import create_backend
from golinks.redirects.registry import RedirectRegistry
from golinks.utilities.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    setup_logging()
    registry: RedirectRegistry = app.state.registry
    logger.info(
        "[STARTUP] golinks %s ready (%s, %d redirects)",
        VERSION,
        type(registry.backend).__name__,
        len(registry.list()),
    )

    yield

    logger.info("[SHUTDOWN] Shutting down golinks...")
    registry.backend.close()


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code)


async def _golinks_error(request: Request, exc: GoLinksError) -> JSONResponse:
    logger.error("[API] %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"message": str(exc)}, status_code=500)


def create_app(
    backend: Backend | None = None,
    ui_path: Path | str | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        backend: Storage backend (default: built from DATABASE_URL)
        ui_path: Static UI directory (default: UI_PATH)
    """
    if backend is None:
        backend = create_backend(get_database_url())

    app = FastAPI(
        title="golinks API",
        description="Go-link redirect service",
        version=VERSION,
        docs_url="/_gadget/docs",
        redoc_url=None,
        openapi_url="/_gadget/openapi.json",
        lifespan=lifespan,
    )
    app.state.registry = RedirectRegistry(backend)

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(GoLinksError, _golinks_error)

    app.include_router(health.router, tags=["Health"])
    app.include_router(redirects.router, prefix="/_gadget/api", tags=["Redirects"])
    app.include_router(search.router, prefix="/_gadget/api", tags=["Search"])

    # Serve the static UI bundle
    ui_dir = Path(ui_path) if ui_path is not None else get_ui_path()
    if ui_dir.exists():
        app.mount("/_gadget/ui", StaticFiles(directory=ui_dir, html=True), name="ui")
        logger.info("[STARTUP] Serving UI from %s", ui_dir)
    else:
        logger.warning("[STARTUP] UI not found at %s - UI not available", ui_dir)

    # Catch-all redirect gateway has lowest priority since it's added last
    app.include_router(gateway.router)

    return app
