"""Placement state machine and fan-out of new workouts to views and storage."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from workout_map.exceptions import (
    CorruptPersistedData,
    InvalidWorkoutInput,
    LocationUnavailable,
    NoActivePlacement,
    NotFound,
)
from workout_map.models.schemas import WorkoutFormSubmission
from workout_map.models.workout import Coordinates, Workout, WorkoutKind, validate_coordinates
from workout_map.services.location import LocationProvider
from workout_map.services.persistence import WorkoutPersistence
from workout_map.services.renderers import ListRenderer, MapRenderer, MapView, Marker, WorkoutRow
from workout_map.services.workout_store import WorkoutStore


logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Inputs have to be positive numbers!"
LOCATION_FAILED_MESSAGE = "Could not get your current position"


class PlacementState(str, Enum):
    IDLE = "idle"
    AWAITING_SUBMISSION = "awaiting_submission"


class MapStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class SubmissionOutcome:
    """What a form submission produced: a stored workout or a user-facing error."""

    workout: Workout | None = None
    marker: Marker | None = None
    row: WorkoutRow | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.workout is not None


def coerce_number(raw: str | None) -> float:
    """Turn a form field into a float; blank or unparsable text becomes NaN."""
    text = (raw or "").strip()
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def form_fields(kind: WorkoutKind | str) -> tuple[list[str], list[str]]:
    """Return (visible, hidden) form inputs for a workout kind."""
    workout_kind = WorkoutKind.parse(kind)
    base = ["kind", "distance_km", "duration_min"]
    extras = [k.extra_field for k in WorkoutKind]
    visible = base + [workout_kind.extra_field]
    hidden = [name for name in extras if name != workout_kind.extra_field]
    return visible, hidden


class SessionController:
    """
    Coordinate a single user session.

    The controller has two placement states: ``IDLE`` and
    ``AWAITING_SUBMISSION`` (a map click picked a location and the form is
    open). Independently it tracks whether the map could be shown yet; clicks
    arriving before the location resolved are ignored.
    """

    def __init__(
        self,
        store: WorkoutStore,
        map_renderer: MapRenderer,
        list_renderer: ListRenderer,
        persistence: WorkoutPersistence,
        zoom_level: int = 13,
    ):
        self.store = store
        self.map_renderer = map_renderer
        self.list_renderer = list_renderer
        self.persistence = persistence
        self.zoom_level = zoom_level

        self.placement = PlacementState.IDLE
        self.pending_coordinates: Coordinates | None = None
        self.map_status = MapStatus.PENDING
        self.message: str | None = None

    def start(self) -> int:
        """
        Restore persisted workouts and list them.

        Corrupt stored data degrades to an empty store; the next save
        overwrites it.

        Returns:
            Number of workouts restored
        """
        try:
            self.store.deserialize(self.persistence.load())
        except CorruptPersistedData:
            logger.warning("Discarding corrupt persisted workouts", exc_info=True)
            self.store.clear()

        for workout in self.store.all():
            self.list_renderer.render_row(workout)
        return len(self.store)

    async def acquire_location(self, provider: LocationProvider) -> Coordinates | None:
        """
        Ask ``provider`` for the user's position and show the map on success.

        Once the map is shown it stays shown: a later success only recentres
        it and a later failure is ignored.
        """
        if self.map_status is not MapStatus.READY:
            self.map_status = MapStatus.PENDING
        try:
            position = await provider.locate()
        except LocationUnavailable as exc:
            self.location_failed(str(exc) or LOCATION_FAILED_MESSAGE)
            return None
        self.location_resolved(position)
        return Coordinates(*position)

    def location_resolved(self, position: tuple[float, float]) -> MapView:
        center = validate_coordinates(position)
        if self.map_status is MapStatus.READY:
            return self.map_renderer.set_view(center, self.zoom_level)

        view = self.map_renderer.show(center, self.zoom_level)
        for workout in self.store.all():
            self.map_renderer.render_marker(workout)
        self.map_status = MapStatus.READY
        self.message = None
        return view

    def location_failed(self, message: str = LOCATION_FAILED_MESSAGE) -> None:
        if self.map_status is MapStatus.READY:
            logger.info("Ignoring location failure; map already shown")
            return
        logger.warning("Location unavailable: %s", message)
        self.map_status = MapStatus.UNAVAILABLE
        self.message = message

    def location_clicked(self, position: tuple[float, float]) -> bool:
        """Open a placement at ``position``. Returns False if the map isn't shown."""
        if self.map_status is not MapStatus.READY:
            logger.debug("Map click ignored while map status is %s", self.map_status.value)
            return False
        self.pending_coordinates = validate_coordinates(position)
        self.placement = PlacementState.AWAITING_SUBMISSION
        self.message = None
        return True

    def submit(self, form: WorkoutFormSubmission) -> SubmissionOutcome:
        """
        Turn the open form into a workout.

        Invalid input keeps the placement open and reports the error; valid
        input stores the workout, persists the whole collection, renders it
        on the map and in the list and closes the placement.

        Raises:
            NoActivePlacement: if no location was picked first
            Exception: whatever the persistence layer raised; the new workout
                is removed from the store again and the placement stays open
        """
        if self.placement is not PlacementState.AWAITING_SUBMISSION or self.pending_coordinates is None:
            raise NoActivePlacement("Pick a location on the map before submitting a workout")

        try:
            kind = WorkoutKind.parse(form.kind)
            extra_raw = getattr(form, kind.extra_field)
            workout = self.store.add(
                kind,
                coerce_number(form.distance_km),
                coerce_number(form.duration_min),
                self.pending_coordinates,
                coerce_number(extra_raw),
            )
        except InvalidWorkoutInput as exc:
            logger.info("Rejected workout submission: %s", exc)
            self.message = INVALID_INPUT_MESSAGE
            return SubmissionOutcome(error=INVALID_INPUT_MESSAGE)

        try:
            self.persistence.save(self.store.serialize())
        except Exception:
            # keep memory and storage in step; the placement stays open for a retry
            self.store.discard(workout.id)
            logger.exception("Failed to persist workout %s; rolled back", workout.id)
            raise

        marker = self.map_renderer.render_marker(workout) if self.map_renderer.is_ready else None
        row = self.list_renderer.render_row(workout)

        self.placement = PlacementState.IDLE
        self.pending_coordinates = None
        self.message = None
        return SubmissionOutcome(workout=workout, marker=marker, row=row)

    def cancel(self) -> bool:
        if self.placement is PlacementState.IDLE:
            return False
        self.placement = PlacementState.IDLE
        self.pending_coordinates = None
        return True

    def jump_to(self, workout_id: str) -> MapView | None:
        """Pan the map to a workout; unknown ids and a hidden map are no-ops."""
        if not self.map_renderer.is_ready:
            return None
        try:
            workout = self.store.find_by_id(workout_id)
        except NotFound:
            logger.debug("Jump to unknown workout %s ignored", workout_id)
            return None
        return self.map_renderer.set_view(workout.coordinates, self.zoom_level, pan_duration_s=1.0)

    def reset(self) -> None:
        """Delete every workout from memory, storage and both views."""
        self.store.clear()
        self.persistence.clear()
        self.map_renderer.clear()
        self.list_renderer.clear()
        self.placement = PlacementState.IDLE
        self.pending_coordinates = None
        self.message = None
        logger.info("Session reset")
