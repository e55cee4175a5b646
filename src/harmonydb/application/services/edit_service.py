"""Edit creation for the moderation queue."""

import logging
from collections.abc import Sequence
from typing import Any

from harmonydb.application.context import RequestContext
from harmonydb.domain.entities import Edit, EditStatus
from harmonydb.domain.exceptions import EntityNotFoundException
from harmonydb.domain.ports import IEditRepository

logger = logging.getLogger(__name__)


class EditService:
    """Creates and loads edits.

    Edits are only staged in the session here. The caller's unit of work
    commits them together with everything else in the request.
    """

    def __init__(self, edit_repository: IEditRepository) -> None:
        self._edits = edit_repository

    async def create_edit(
        self,
        context: RequestContext,
        edit_type: int,
        data: dict[str, Any],
        release_ids: Sequence[int] = (),
    ) -> Edit:
        """Create an open edit owned by the acting editor.

        Raises:
            AuthenticationError: No editor in context
        """
        editor_id = context.require_editor()
        edit = await self._edits.add(
            Edit(
                id=None,
                edit_type=edit_type,
                editor_id=editor_id,
                data=data,
                status=EditStatus.OPEN,
                release_ids=list(release_ids),
            )
        )
        logger.info(
            f"Created edit #{edit.id} (type {edit_type}) for editor {editor_id}",
            extra={
                "edit_id": edit.id,
                "edit_type": edit_type,
                "editor_id": editor_id,
                "release_ids": list(release_ids),
            },
        )
        return edit

    async def get_edit(self, edit_id: int) -> Edit:
        edit = await self._edits.get_by_id(edit_id)
        if edit is None:
            raise EntityNotFoundException("Edit", edit_id)
        return edit

    async def open_edits_for_release(self, release_id: int) -> list[Edit]:
        return await self._edits.list_open_for_release(release_id)
