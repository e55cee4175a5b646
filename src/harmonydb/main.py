"""FastAPI application factory.

Run with:
    uvicorn harmonydb.main:app
"""

from fastapi import FastAPI

from harmonydb.api import app_router
from harmonydb.api.exception_handlers import register_exception_handlers
from harmonydb.config import Settings, get_settings
from harmonydb.infrastructure.lifecycle import lifespan
from harmonydb.infrastructure.observability import RequestLoggingMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings (tests); defaults to the environment

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware, log_request_body=settings.debug)
    register_exception_handlers(app)
    app.include_router(app_router)

    return app


app = create_app()
