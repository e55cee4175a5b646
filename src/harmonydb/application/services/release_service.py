"""Release pages and simple release edits."""

import logging

from harmonydb.application.context import RequestContext
from harmonydb.application.services.edit_service import EditService
from harmonydb.domain.entities import (
    EDIT_RELEASE_CHANGE_QUALITY,
    Edit,
    Release,
    ReleaseQuality,
)
from harmonydb.domain.exceptions import BusinessRuleViolation, EntityNotFoundException
from harmonydb.domain.ports import IReleaseRepository

logger = logging.getLogger(__name__)


class ReleaseService:
    """Loads releases for display and enters release edits."""

    def __init__(
        self, release_repository: IReleaseRepository, edit_service: EditService
    ) -> None:
        self._releases = release_repository
        self._edits = edit_service

    async def get_by_gid(self, gid: str) -> Release:
        release = await self._releases.get_by_gid(gid)
        if release is None:
            raise EntityNotFoundException("Release", gid)
        return release

    async def change_quality(
        self, context: RequestContext, gid: str, quality: ReleaseQuality
    ) -> Edit:
        """Enter an edit changing the data quality of a release.

        Raises:
            EntityNotFoundException: Unknown release
            BusinessRuleViolation: The release already has that quality
        """
        context.require_editor()
        release = await self.get_by_gid(gid)
        if release.quality is quality:
            raise BusinessRuleViolation("The release already has this data quality")

        logger.info(
            f"Changing quality of release {release.id}: {release.quality.name} → {quality.name}"
        )
        return await self._edits.create_edit(
            context,
            EDIT_RELEASE_CHANGE_QUALITY,
            {
                "release": {"id": release.id, "name": release.name},
                "old": {"quality": int(release.quality)},
                "new": {"quality": int(quality)},
            },
            release_ids=[release.id],
        )
