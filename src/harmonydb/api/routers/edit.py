"""Edit endpoints: where the merge form redirects after an edit is entered."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from harmonydb.api.dependencies import get_edit_service
from harmonydb.api.routers._shared import templates
from harmonydb.api.schemas.release import EditResponse
from harmonydb.application.services.edit_service import EditService
from harmonydb.domain.entities import EDIT_RELEASE_CHANGE_QUALITY, EDIT_RELEASE_MERGE

router = APIRouter(tags=["Edits"])

EDIT_TYPE_NAMES = {
    EDIT_RELEASE_MERGE: "Merge releases",
    EDIT_RELEASE_CHANGE_QUALITY: "Change release quality",
}


@router.get("/edit/{edit_id}", response_class=HTMLResponse)
async def show_edit(
    request: Request,
    edit_id: int,
    edit_service: EditService = Depends(get_edit_service),
) -> Response:
    edit = await edit_service.get_edit(edit_id)
    return templates.TemplateResponse(
        request,
        "edit/show.html",
        context={
            "edit": edit,
            "edit_type_name": EDIT_TYPE_NAMES.get(edit.edit_type, f"Edit type {edit.edit_type}"),
        },
    )


@router.get("/api/edit/{edit_id}", response_model=EditResponse)
async def get_edit(
    edit_id: int,
    edit_service: EditService = Depends(get_edit_service),
) -> EditResponse:
    edit = await edit_service.get_edit(edit_id)
    return EditResponse.from_entity(edit)
