"""FastAPI main application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trustypcs import __version__
from trustypcs.api import settings
from trustypcs.api.auth import AuthError
from trustypcs.config import AppSettings, app_settings
from trustypcs.core.settings_store import SettingsStore, SqlSettingsStore, create_settings_store
from trustypcs.database import init_db

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(store: Optional[SettingsStore] = None, config: Optional[AppSettings] = None) -> FastAPI:
    """Build the application around a settings store."""
    config = config or app_settings
    if store is None:
        store = create_settings_store(config.settings_store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(store, SqlSettingsStore):
            init_db()
        logger.info(f"{config.app_name} settings service started ({type(store).__name__})")
        yield

    app = FastAPI(title=f"{config.app_name} Settings", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.settings_store = store

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
            headers=settings.cors_headers(request),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405 and settings.is_settings_path(request.url.path):
            return settings.method_not_allowed(request)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(exc) or "Internal server error"},
            headers=settings.cors_headers(request),
        )

    app.include_router(settings.router, prefix=settings.SETTINGS_PREFIX, tags=["settings"])

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


configure_logging(app_settings.log_level)
app = create_app()
