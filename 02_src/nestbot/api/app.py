"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from ..app import Application
from ..logging_config import get_logger
from .routes import control, observability, webhook

logger = get_logger(__name__)

# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application()
    return _app


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Manage application lifespan."""
    application: Application = fastapi_app.state.application
    await application.start()
    yield
    await application.stop()


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or get_app()

    fastapi_app = FastAPI(
        title="nestbot",
        description="Messenger webhook bot for weather and news",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    @fastapi_app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s %s", response.status_code, request.method, request.url.path)
        return response

    fastapi_app.include_router(webhook.create_webhook_router(application))
    fastapi_app.include_router(observability.create_observability_router(application))
    fastapi_app.include_router(control.create_control_router(application))

    return fastapi_app
