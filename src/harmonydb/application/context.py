"""Per-request context handed explicitly to application services."""

from dataclasses import dataclass

from harmonydb.domain.exceptions import AuthenticationError


# Hey future me - services never reach for globals/request objects to find out WHO is acting.
# The API layer builds one RequestContext per request and passes it down.
@dataclass(frozen=True)
class RequestContext:
    """Who is acting, and which request this is."""

    editor_id: int | None = None
    correlation_id: str = ""

    @property
    def is_authenticated(self) -> bool:
        return self.editor_id is not None

    def require_editor(self) -> int:
        """Return the editor id or raise if nobody is logged in."""
        if self.editor_id is None:
            raise AuthenticationError("You need to be logged in to enter edits")
        return self.editor_id
