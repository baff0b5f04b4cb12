"""Endpoints driving the map placement session."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from workout_map.models.schemas import CoordinatesPayload, LocationReport, SessionStateResponse
from workout_map.session import WorkoutSession, get_session


router = APIRouter(prefix="/api/session", tags=["session"])

SessionDep = Annotated[WorkoutSession, Depends(get_session)]


def _state(session: WorkoutSession) -> SessionStateResponse:
    controller = session.controller
    view = session.map_renderer.view
    return SessionStateResponse(
        placement=controller.placement.value,
        pending_coordinates=tuple(controller.pending_coordinates) if controller.pending_coordinates else None,
        map_status=controller.map_status.value,
        map_center=tuple(view.center) if view else None,
        zoom_level=view.zoom_level if view else None,
        message=controller.message,
        workout_count=len(session.store),
    )


@router.get("/state", response_model=SessionStateResponse)
async def get_state(session: SessionDep):
    """Return the placement state and whether the map is shown."""
    return _state(session)


@router.post("/location", response_model=SessionStateResponse)
async def report_location(report: LocationReport, session: SessionDep):
    """Accept the result of the client's geolocation request."""
    if report.position is not None:
        session.controller.location_resolved((report.position.latitude, report.position.longitude))
    else:
        session.controller.location_failed(report.error)
    return _state(session)


@router.post("/placement", response_model=SessionStateResponse)
async def start_placement(click: CoordinatesPayload, session: SessionDep):
    """Record a map click and open the workout form for that spot."""
    if not session.controller.location_clicked((click.latitude, click.longitude)):
        raise HTTPException(status_code=409, detail="Map is not ready yet")
    return _state(session)


@router.delete("/placement", response_model=SessionStateResponse)
async def cancel_placement(session: SessionDep):
    session.controller.cancel()
    return _state(session)
