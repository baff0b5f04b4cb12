"""Workout entity: one logged run or ride plus its derived metric.

Running and cycling differ only in one extra input and one metric formula,
so both are represented by a single ``Workout`` tagged by ``WorkoutKind``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple

from workout_map.exceptions import InvalidWorkoutInput


MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class WorkoutKind(str, Enum):
    """Supported activity types."""

    RUNNING = "running"
    CYCLING = "cycling"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def icon(self) -> str:
        return "🏃‍♂️" if self is WorkoutKind.RUNNING else "🚴‍♀️"

    @property
    def extra_field(self) -> str:
        """Name of the kind-specific input (cadence or elevation)."""
        return "cadence_spm" if self is WorkoutKind.RUNNING else "elevation_gain_m"

    @property
    def metric_field(self) -> str:
        return "pace_min_per_km" if self is WorkoutKind.RUNNING else "speed_km_per_h"

    @classmethod
    def parse(cls, value: Any) -> "WorkoutKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidWorkoutInput(f"Unknown workout kind: {value!r}") from None


class Coordinates(NamedTuple):
    latitude: float
    longitude: float


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_coordinates(coordinates: Any) -> Coordinates:
    try:
        latitude, longitude = coordinates
    except (TypeError, ValueError):
        raise InvalidWorkoutInput("Coordinates must be a (latitude, longitude) pair") from None

    if not (is_finite_number(latitude) and is_finite_number(longitude)):
        raise InvalidWorkoutInput("Coordinates must be finite numbers")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise InvalidWorkoutInput(f"Coordinates out of range: ({latitude}, {longitude})")
    return Coordinates(float(latitude), float(longitude))


def validate_inputs(
    kind: WorkoutKind,
    distance_km: Any,
    duration_min: Any,
    extra: Any,
) -> None:
    """
    Check the numeric inputs of a workout.

    Distance, duration and the kind-specific extra must all be finite numbers.
    Distance and duration must be positive; so must cadence for a run. Elevation
    gain of a ride may be zero or negative.

    Raises:
        InvalidWorkoutInput: on the first input that fails
    """
    for name, value in (
        ("distance_km", distance_km),
        ("duration_min", duration_min),
        (kind.extra_field, extra),
    ):
        if not is_finite_number(value):
            raise InvalidWorkoutInput(f"{name} must be a finite number, got {value!r}")

    positive = [("distance_km", distance_km), ("duration_min", duration_min)]
    if kind is WorkoutKind.RUNNING:
        positive.append(("cadence_spm", extra))
    for name, value in positive:
        if value <= 0:
            raise InvalidWorkoutInput(f"{name} must be positive, got {value!r}")


def derive_metric(kind: WorkoutKind, distance_km: float, duration_min: float) -> float:
    """
    Compute the kind-specific performance metric.

    Running: pace in min/km. Cycling: speed in km/h.

    Example:
        >>> derive_metric(WorkoutKind.RUNNING, 5, 30)
        6.0
        >>> derive_metric(WorkoutKind.CYCLING, 20, 60)
        20.0
    """
    if kind is WorkoutKind.RUNNING:
        return duration_min / distance_km
    return distance_km / (duration_min / 60)


def build_description(kind: WorkoutKind, created_at: datetime) -> str:
    """Return e.g. ``"Running on October 18"`` for the workout's creation day."""
    return f"{kind.label} on {MONTHS[created_at.month - 1]} {created_at.day}"


@dataclass(frozen=True)
class Workout:
    """
    A single logged activity.

    The constructor re-validates every input, so no invalid workout can exist
    even if a caller skipped validation. ``metric`` and ``description`` are
    computed here once and never change.
    """

    id: str
    created_at: datetime
    kind: WorkoutKind
    distance_km: float
    duration_min: float
    coordinates: Coordinates
    extra: float
    metric: float = field(init=False)
    description: str = field(init=False)

    def __post_init__(self) -> None:
        kind = WorkoutKind.parse(self.kind)
        if not isinstance(self.id, str) or not self.id:
            raise InvalidWorkoutInput("Workout id must be a non-empty string")
        if not isinstance(self.created_at, datetime):
            raise InvalidWorkoutInput("created_at must be a datetime")
        coordinates = validate_coordinates(self.coordinates)
        validate_inputs(kind, self.distance_km, self.duration_min, self.extra)

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "coordinates", coordinates)
        object.__setattr__(self, "distance_km", float(self.distance_km))
        object.__setattr__(self, "duration_min", float(self.duration_min))
        object.__setattr__(self, "extra", float(self.extra))
        object.__setattr__(self, "metric", derive_metric(kind, self.distance_km, self.duration_min))
        object.__setattr__(self, "description", build_description(kind, self.created_at))

    @property
    def cadence_spm(self) -> float | None:
        return self.extra if self.kind is WorkoutKind.RUNNING else None

    @property
    def elevation_gain_m(self) -> float | None:
        return self.extra if self.kind is WorkoutKind.CYCLING else None

    @property
    def pace_min_per_km(self) -> float | None:
        return self.metric if self.kind is WorkoutKind.RUNNING else None

    @property
    def speed_km_per_h(self) -> float | None:
        return self.metric if self.kind is WorkoutKind.CYCLING else None

    @property
    def icon(self) -> str:
        return self.kind.icon
