"""API endpoints for logging and viewing workouts."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from workout_map.exceptions import InvalidWorkoutInput, NoActivePlacement
from workout_map.models.schemas import (
    FocusResponse,
    FormFieldsResponse,
    MarkerResponse,
    SubmissionResponse,
    WorkoutFormSubmission,
    WorkoutRecord,
    WorkoutRowResponse,
)
from workout_map.models.workout import WorkoutKind
from workout_map.services.renderers import Marker, WorkoutRow
from workout_map.services.session_controller import form_fields
from workout_map.session import WorkoutSession, get_session


router = APIRouter(prefix="/api/workouts", tags=["workouts"])

SessionDep = Annotated[WorkoutSession, Depends(get_session)]


def _marker_response(marker: Marker) -> MarkerResponse:
    return MarkerResponse(
        workout_id=marker.workout_id,
        coordinates=tuple(marker.coordinates),
        icon=marker.icon,
        popup_text=marker.popup_text,
        popup_class=marker.popup_class,
        auto_close=marker.auto_close,
        close_on_click=marker.close_on_click,
    )


def _row_response(row: WorkoutRow) -> WorkoutRowResponse:
    return WorkoutRowResponse(workout_id=row.workout_id, kind=row.kind, html=row.html)


@router.get("")
async def list_workouts(session: SessionDep) -> list[dict]:
    """Return all workouts in the order they were logged, in stored form."""
    return session.store.serialize()


@router.post("", response_model=SubmissionResponse, status_code=201)
async def submit_workout(form: WorkoutFormSubmission, session: SessionDep):
    """
    Submit the workout form for the currently picked map location.

    Returns:
        SubmissionResponse: the stored workout with its marker and list row

    Raises:
        HTTPException: 409 if no location was picked, 422 on invalid input
    """
    try:
        outcome = session.controller.submit(form)
    except NoActivePlacement as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    if not outcome.ok:
        raise HTTPException(status_code=422, detail=outcome.error)

    return SubmissionResponse(
        workout=WorkoutRecord.from_workout(outcome.workout).to_plain(),
        marker=_marker_response(outcome.marker) if outcome.marker else None,
        row=_row_response(outcome.row),
    )


@router.delete("")
async def reset_workouts(session: SessionDep) -> dict:
    """Delete all workouts, including the stored copy."""
    removed = len(session.store)
    session.controller.reset()
    return {"status": "success", "removed": removed}


@router.get("/markers", response_model=list[MarkerResponse])
async def list_markers(session: SessionDep):
    return [_marker_response(m) for m in session.map_renderer.markers]


@router.get("/rows", response_model=list[WorkoutRowResponse])
async def list_rows(session: SessionDep):
    return [_row_response(r) for r in session.list_renderer.rows]


@router.get("/form-fields", response_model=FormFieldsResponse)
async def get_form_fields(kind: str = WorkoutKind.RUNNING.value):
    """Which extra input the form shows for a workout kind."""
    try:
        workout_kind = WorkoutKind.parse(kind)
    except InvalidWorkoutInput as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    visible, hidden = form_fields(workout_kind)
    return FormFieldsResponse(kind=workout_kind, visible=visible, hidden=hidden)


@router.post("/{workout_id}/focus", response_model=FocusResponse)
async def focus_workout(workout_id: str, session: SessionDep):
    """Centre the map on a workout. Unknown ids leave the map where it is."""
    view = session.controller.jump_to(workout_id)
    if view is None:
        return FocusResponse(moved=False)
    return FocusResponse(moved=True, center=tuple(view.center), zoom_level=view.zoom_level)
