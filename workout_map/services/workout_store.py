"""Ordered, in-memory collection of workouts."""
from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime
from typing import Any, Callable, Iterator

from pydantic import ValidationError

from workout_map.exceptions import CorruptPersistedData, InvalidWorkoutInput, NotFound
from workout_map.models.schemas import WorkoutRecord
from workout_map.models.workout import (
    Workout,
    WorkoutKind,
    validate_coordinates,
    validate_inputs,
)


logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _new_id() -> str:
    return uuid.uuid4().hex


class WorkoutStore:
    """
    Own the ordered sequence of workouts for one session.

    Insertion order is preserved and is the order used both for list
    rendering and for serialization. Every mutation replaces or extends the
    sequence in a single step, so readers never see a half-built list.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = _local_now,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._clock = clock
        self._id_factory = id_factory
        self._workouts: list[Workout] = []
        self._index: dict[str, Workout] = {}

    def __len__(self) -> int:
        return len(self._workouts)

    def __iter__(self) -> Iterator[Workout]:
        return iter(tuple(self._workouts))

    def _unique_id(self) -> str:
        workout_id = self._id_factory()
        while workout_id in self._index:
            logger.warning("Generated workout id %s collides, drawing another", workout_id)
            workout_id = self._id_factory()
        return workout_id

    def add(
        self,
        kind: WorkoutKind | str,
        distance_km: float,
        duration_min: float,
        coordinates: tuple[float, float],
        extra: float,
    ) -> Workout:
        """
        Validate inputs, build the matching workout variant and append it.

        Args:
            kind: running or cycling
            distance_km: distance in kilometres, > 0
            duration_min: duration in minutes, > 0
            coordinates: (latitude, longitude) where the workout is placed
            extra: cadence in steps/min (running, > 0) or elevation gain in
                metres (cycling, any finite number)

        Returns:
            The newly stored workout

        Raises:
            InvalidWorkoutInput: if any input fails validation; the store is
                left unchanged
        """
        workout_kind = WorkoutKind.parse(kind)
        validate_inputs(workout_kind, distance_km, duration_min, extra)
        position = validate_coordinates(coordinates)

        workout = Workout(
            id=self._unique_id(),
            created_at=self._clock(),
            kind=workout_kind,
            distance_km=distance_km,
            duration_min=duration_min,
            coordinates=position,
            extra=extra,
        )
        self._workouts.append(workout)
        self._index[workout.id] = workout

        logger.info(
            "Added %s workout id=%s distance=%.2fkm duration=%.1fmin",
            workout.kind.value,
            workout.id,
            workout.distance_km,
            workout.duration_min,
        )
        return workout

    def find_by_id(self, workout_id: str) -> Workout:
        try:
            return self._index[workout_id]
        except KeyError:
            raise NotFound(workout_id) from None

    def all(self) -> tuple[Workout, ...]:
        """Return the workouts in insertion order as a read-only tuple."""
        return tuple(self._workouts)

    def discard(self, workout_id: str) -> None:
        """Undo an ``add`` whose workout could not be persisted."""
        workout = self.find_by_id(workout_id)
        self._workouts = [w for w in self._workouts if w.id != workout_id]
        del self._index[workout.id]

    def clear(self) -> None:
        self._workouts, self._index = [], {}
        logger.info("Workout store cleared")

    def serialize(self) -> list[dict[str, Any]]:
        """Return every workout as a plain, JSON-ready record."""
        return [WorkoutRecord.from_workout(w).to_plain() for w in self._workouts]

    def deserialize(self, value: Any) -> None:
        """
        Replace the collection with workouts rebuilt from serialized records.

        ``None`` or an empty list yields an empty store. Each record is
        validated, then rebuilt through the ``Workout`` constructor so the
        derived metric is computed again and must agree with the stored one.

        Raises:
            CorruptPersistedData: if any record is malformed, invalid or
                duplicated; the store is emptied rather than left partial
        """
        try:
            workouts = self._rebuild(value)
        except CorruptPersistedData:
            self.clear()
            raise

        self._workouts = workouts
        self._index = {w.id: w for w in workouts}
        logger.info("Restored %d workouts from persisted data", len(workouts))

    @staticmethod
    def _rebuild(value: Any) -> list[Workout]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise CorruptPersistedData(f"Expected a list of workouts, got {type(value).__name__}")

        workouts: list[Workout] = []
        seen: set[str] = set()
        for position, raw in enumerate(value):
            try:
                record = WorkoutRecord.model_validate(raw)
                workout = Workout(
                    id=record.id,
                    created_at=record.created_at,
                    kind=record.kind,
                    distance_km=record.distance_km,
                    duration_min=record.duration_min,
                    coordinates=record.coordinates,
                    extra=getattr(record, record.kind.extra_field),
                )
            except (ValidationError, InvalidWorkoutInput) as exc:
                raise CorruptPersistedData(f"Workout record {position} is invalid: {exc}") from exc

            stored_metric = getattr(record, record.kind.metric_field)
            if not math.isclose(stored_metric, workout.metric, rel_tol=1e-9):
                raise CorruptPersistedData(
                    f"Workout record {position} has {record.kind.metric_field}={stored_metric}, "
                    f"expected {workout.metric}"
                )
            if workout.id in seen:
                raise CorruptPersistedData(f"Duplicate workout id {workout.id!r}")
            seen.add(workout.id)
            workouts.append(workout)
        return workouts
