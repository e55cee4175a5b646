"""Release endpoints: release pages, merge form and quality edits.

Hey future me - HTML and JSON live side by side here. The HTML merge flow is the classic
post/redirect/get: a valid POST creates an edit and 303-redirects to /edit/{id}; a rejected POST
re-renders the form (status 200) with field errors. The JSON variant answers 201 / 422 instead.

Route ORDER matters: /release/merge must be registered before /release/{gid}, otherwise
"merge" gets swallowed as a gid.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from pydantic import ValidationError

from harmonydb.api.dependencies import (
    get_edit_service,
    get_release_merge_service,
    get_release_service,
    get_request_context,
)
from harmonydb.api.routers._shared import templates
from harmonydb.api.schemas.release import (
    ChangeQualityRequest,
    EditResponse,
    MergeRejectedResponse,
    MergeRequest,
    ReleaseResponse,
    parse_merge_form,
)
from harmonydb.application.context import RequestContext
from harmonydb.application.services.edit_service import EditService
from harmonydb.application.services.release_merge_service import (
    MergeFormView,
    ReleaseMergeService,
)
from harmonydb.application.services.release_service import ReleaseService
from harmonydb.domain.entities import ReleaseQuality
from harmonydb.domain.value_objects.merge import MergeStrategy

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Releases"])


def _merge_form_context(
    view: MergeFormView,
    errors: dict[str, list[str]] | None = None,
    submitted: dict[str, Any] | None = None,
) -> dict[str, Any]:
    submitted = submitted or {}
    return {
        "view": view,
        "errors": errors or {},
        "strategies": list(MergeStrategy),
        "selected_strategy": submitted.get("merge_strategy", int(MergeStrategy.APPEND)),
        "edit_note": submitted.get("edit_note", ""),
        "confirm_bad_recording_merges": submitted.get("confirm_bad_recording_merges", False),
    }


def _field_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        field_name = str(error["loc"][0]) if error["loc"] else "form"
        errors.setdefault(field_name, []).append(error["msg"])
    return errors


def _int_values(values: list[Any]) -> list[int]:
    ids = []
    for value in values:
        try:
            ids.append(int(value))
        except (TypeError, ValueError):
            continue
    return ids


# =============================================================================
# MERGE FORM (HTML)
# =============================================================================


@router.get("/release/merge", response_class=HTMLResponse)
async def merge_form(
    request: Request,
    release_ids: list[int] = Query(..., alias="id"),
    target: int | None = Query(default=None),
    merge_service: ReleaseMergeService = Depends(get_release_merge_service),
) -> Response:
    """Show the merge form for the selected releases."""
    view = await merge_service.prepare_form(release_ids, target)
    return templates.TemplateResponse(
        request, "release/merge.html", context=_merge_form_context(view)
    )


@router.post("/release/merge", response_class=HTMLResponse)
async def submit_merge_form(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    merge_service: ReleaseMergeService = Depends(get_release_merge_service),
) -> Response:
    """Validate a posted merge form and enter the merge edit."""
    data = parse_merge_form(await request.form())

    try:
        merge_request = MergeRequest.model_validate(data)
    except ValidationError as e:
        # Without two usable release ids there is no form to re-render.
        release_ids = list(dict.fromkeys(_int_values(data["merging"])))
        if len(release_ids) < 2:
            raise RequestValidationError(e.errors(include_url=False)) from e
        view = await merge_service.prepare_form(release_ids)
        return templates.TemplateResponse(
            request,
            "release/merge.html",
            context=_merge_form_context(view, _field_errors(e), data),
        )

    outcome = await merge_service.submit(context, merge_request.to_submission())
    if outcome.edit is not None:
        return RedirectResponse(
            url=f"/edit/{outcome.edit.id}", status_code=status.HTTP_303_SEE_OTHER
        )

    return templates.TemplateResponse(
        request,
        "release/merge.html",
        context=_merge_form_context(
            outcome.view, outcome.errors.to_dict(), merge_request.model_dump(mode="json")
        ),
    )


# =============================================================================
# MERGE (JSON)
# =============================================================================


@router.get("/api/release/merge/preview")
async def merge_preview(
    release_ids: list[int] = Query(..., alias="id"),
    target: int | None = Query(default=None),
    merge_service: ReleaseMergeService = Depends(get_release_merge_service),
) -> dict[str, Any]:
    """Proposed medium positions and recording merges for the selected releases."""
    view = await merge_service.prepare_form(release_ids, target)
    return view.to_json()


@router.post(
    "/api/release/merge",
    status_code=status.HTTP_201_CREATED,
    response_model=EditResponse,
    responses={422: {"model": MergeRejectedResponse}},
)
async def submit_merge(
    merge_request: MergeRequest,
    context: RequestContext = Depends(get_request_context),
    merge_service: ReleaseMergeService = Depends(get_release_merge_service),
) -> Response:
    """Enter a release merge edit."""
    outcome = await merge_service.submit(context, merge_request.to_submission())
    if outcome.edit is not None:
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=EditResponse.from_entity(outcome.edit).model_dump(mode="json"),
        )

    rejected = MergeRejectedResponse(
        errors=outcome.errors.to_dict(), form=outcome.view.to_json()
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=rejected.model_dump(mode="json"),
    )


# =============================================================================
# RELEASE PAGES
# =============================================================================


@router.get("/release/{gid}", response_class=HTMLResponse)
async def show_release(
    request: Request,
    gid: str,
    release_service: ReleaseService = Depends(get_release_service),
    edit_service: EditService = Depends(get_edit_service),
) -> Response:
    """Release page with mediums, tracks and open edits."""
    release = await release_service.get_by_gid(gid)
    open_edits = await edit_service.open_edits_for_release(release.id)
    return templates.TemplateResponse(
        request,
        "release/index.html",
        context={
            "release": release,
            "open_edits": open_edits,
            "qualities": list(ReleaseQuality),
        },
    )


@router.get("/api/release/{gid}", response_model=ReleaseResponse)
async def get_release(
    gid: str,
    release_service: ReleaseService = Depends(get_release_service),
) -> ReleaseResponse:
    release = await release_service.get_by_gid(gid)
    return ReleaseResponse.from_entity(release)


@router.post("/release/{gid}/change-quality")
async def change_quality_form(
    gid: str,
    quality: ReleaseQuality = Form(...),
    context: RequestContext = Depends(get_request_context),
    release_service: ReleaseService = Depends(get_release_service),
) -> RedirectResponse:
    """Enter a data quality edit from the release page."""
    await release_service.change_quality(context, gid, quality)
    return RedirectResponse(url=f"/release/{gid}", status_code=status.HTTP_303_SEE_OTHER)


@router.post(
    "/api/release/{gid}/change-quality",
    status_code=status.HTTP_201_CREATED,
    response_model=EditResponse,
)
async def change_quality(
    gid: str,
    body: ChangeQualityRequest,
    context: RequestContext = Depends(get_request_context),
    release_service: ReleaseService = Depends(get_release_service),
) -> EditResponse:
    edit = await release_service.change_quality(context, gid, body.quality)
    return EditResponse.from_entity(edit)
