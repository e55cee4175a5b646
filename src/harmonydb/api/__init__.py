"""API module for harmonydb.

Structure:
- routers/: HTTP endpoints (release merge, release pages, edits, health)
- schemas/: Pydantic models for request/response
- dependencies.py: Dependency injection (session, repositories, services, request context)
- exception_handlers.py: Global error handlers
"""

from harmonydb.api.routers import app_router

__all__ = ["app_router"]
