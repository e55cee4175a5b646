"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from harmonydb.domain.entities import Edit, Release


# Hey future me, IReleaseRepository is a PORT: services depend on this, the SQLAlchemy version
# lives in infrastructure. Every method returns FULLY RESOLVED aggregates (mediums → tracks →
# recordings → artist credits). The planning code never lazy-loads anything.
class IReleaseRepository(ABC):
    """Repository interface for Release aggregates."""

    @abstractmethod
    async def get_by_id(self, release_id: int) -> Release | None:
        """Get a release by row id."""
        pass

    @abstractmethod
    async def get_by_gid(self, gid: str) -> Release | None:
        """Get a release by its public MBID-style gid."""
        pass

    @abstractmethod
    async def get_by_ids(self, release_ids: Sequence[int]) -> list[Release]:
        """Get releases in the order of ``release_ids``; unknown ids are skipped."""
        pass


class IEditRepository(ABC):
    """Repository interface for edits in the moderation queue."""

    @abstractmethod
    async def add(self, edit: Edit) -> Edit:
        """Persist a new edit and return it with its id set."""
        pass

    @abstractmethod
    async def get_by_id(self, edit_id: int) -> Edit | None:
        """Get an edit by id."""
        pass

    @abstractmethod
    async def list_open_for_release(self, release_id: int) -> list[Edit]:
        """Open edits whose data references the release."""
        pass
