"""Dependency injection for API endpoints."""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from harmonydb.application.context import RequestContext
from harmonydb.application.services.edit_service import EditService
from harmonydb.application.services.release_merge_service import ReleaseMergeService
from harmonydb.application.services.release_service import ReleaseService
from harmonydb.config import Settings, get_settings
from harmonydb.domain.exceptions import AuthenticationError
from harmonydb.infrastructure.observability import get_correlation_id
from harmonydb.infrastructure.persistence.database import Database
from harmonydb.infrastructure.persistence.repositories import (
    EditRepository,
    ReleaseRepository,
)

logger = logging.getLogger(__name__)

__all__ = [
    "get_db_session",
    "get_edit_repository",
    "get_edit_service",
    "get_release_merge_service",
    "get_release_repository",
    "get_release_service",
    "get_request_context",
    "get_settings",
    "Settings",
]


# Hey future me - this is a FastAPI dependency that yields a DB session to endpoints.
# session_scope() commits when the endpoint returns normally and rolls back when it raises, so a
# request is ONE transaction. Every repo/service below is built on this same session, which is
# how a merge edit and its edit_release links land together (or not at all).
# Use this in endpoint params like: "session: AsyncSession = Depends(get_db_session)"
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state.

    Uses session_scope() context manager for proper connection lifecycle management.
    FastAPI automatically handles cleanup when the request completes.
    """
    db: Database = request.app.state.db
    async with db.session_scope() as session:
        yield session


def get_release_repository(
    session: AsyncSession = Depends(get_db_session),
) -> ReleaseRepository:
    """Get release repository instance."""
    return ReleaseRepository(session)


def get_edit_repository(
    session: AsyncSession = Depends(get_db_session),
) -> EditRepository:
    """Get edit repository instance."""
    return EditRepository(session)


def get_edit_service(
    edit_repository: EditRepository = Depends(get_edit_repository),
) -> EditService:
    return EditService(edit_repository)


def get_release_merge_service(
    release_repository: ReleaseRepository = Depends(get_release_repository),
    edit_service: EditService = Depends(get_edit_service),
) -> ReleaseMergeService:
    """Get the release merge service for this request."""
    return ReleaseMergeService(release_repository, edit_service)


def get_release_service(
    release_repository: ReleaseRepository = Depends(get_release_repository),
    edit_service: EditService = Depends(get_edit_service),
) -> ReleaseService:
    return ReleaseService(release_repository, edit_service)


# Yo, editor identity comes from the X-Editor-Id header (set by the auth proxy in front of us).
# A missing header is fine here, anonymous users can still LOOK at forms and releases. Services
# call context.require_editor() when they are about to create an edit, and THAT raises 401.
# A header that isn't a positive integer is garbage from the proxy, reject it right away.
def get_request_context(
    x_editor_id: str | None = Header(default=None),
) -> RequestContext:
    """Build the per-request context from headers.

    Raises:
        AuthenticationError: X-Editor-Id present but not a positive integer
    """
    editor_id: int | None = None
    if x_editor_id:
        try:
            editor_id = int(x_editor_id)
        except ValueError as e:
            raise AuthenticationError(f"Invalid editor id: {x_editor_id!r}") from e
        if editor_id < 1:
            raise AuthenticationError(f"Invalid editor id: {x_editor_id!r}")
    return RequestContext(editor_id=editor_id, correlation_id=get_correlation_id())
