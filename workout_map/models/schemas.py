"""Pydantic models describing stored records and API payloads."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from workout_map.models.workout import Workout, WorkoutKind, is_finite_number


class WorkoutRecord(BaseModel):
    """
    Plain-data form of a workout, as persisted and as returned by the API.

    Keys are camelCase on the wire. Only the fields of the record's own kind
    are populated; the other variant's fields are left out when dumping.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    created_at: datetime
    kind: WorkoutKind
    distance_km: float
    duration_min: float
    coordinates: tuple[float, float]
    description: str

    cadence_spm: float | None = None
    pace_min_per_km: float | None = None
    elevation_gain_m: float | None = None
    speed_km_per_h: float | None = None

    @field_validator(
        "distance_km",
        "duration_min",
        "cadence_spm",
        "pace_min_per_km",
        "elevation_gain_m",
        "speed_km_per_h",
        mode="before",
    )
    @classmethod
    def require_real_number(cls, value: Any) -> Any:
        """Reject text and booleans the way ``WorkoutStore.add`` does, instead of coercing them."""
        if value is not None and not is_finite_number(value):
            raise ValueError(f"expected a finite number, got {value!r}")
        return value

    @field_validator("coordinates", mode="before")
    @classmethod
    def require_numeric_coordinates(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)) or not all(is_finite_number(v) for v in value):
            raise ValueError(f"expected a (latitude, longitude) pair of numbers, got {value!r}")
        return value

    @model_validator(mode="after")
    def check_variant_fields(self) -> "WorkoutRecord":
        required = (self.kind.extra_field, self.kind.metric_field)
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise ValueError(f"{self.kind.value} record is missing {', '.join(missing)}")
        return self

    @classmethod
    def from_workout(cls, workout: Workout) -> "WorkoutRecord":
        return cls(
            id=workout.id,
            created_at=workout.created_at,
            kind=workout.kind,
            distance_km=workout.distance_km,
            duration_min=workout.duration_min,
            coordinates=tuple(workout.coordinates),
            description=workout.description,
            cadence_spm=workout.cadence_spm,
            pace_min_per_km=workout.pace_min_per_km,
            elevation_gain_m=workout.elevation_gain_m,
            speed_km_per_h=workout.speed_km_per_h,
        )

    def to_plain(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class WorkoutFormSubmission(BaseModel):
    """Raw form values; numbers arrive as text and are coerced by the controller."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    kind: str = Field(default="running", description="running or cycling")
    distance_km: str = ""
    duration_min: str = ""
    cadence_spm: str = ""
    elevation_gain_m: str = ""


class CoordinatesPayload(BaseModel):
    """A map click or reported position."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class LocationReport(BaseModel):
    """Result of the client's geolocation request: a position or an error."""

    position: CoordinatesPayload | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_one_of(self) -> "LocationReport":
        if (self.position is None) == (self.error is None):
            raise ValueError("Provide exactly one of position or error")
        return self


class SessionStateResponse(BaseModel):
    """Schema for the placement/map state API response."""

    placement: str
    pending_coordinates: tuple[float, float] | None = None
    map_status: str
    map_center: tuple[float, float] | None = None
    zoom_level: int | None = None
    message: str | None = None
    workout_count: int


class MarkerResponse(BaseModel):
    """Schema for a rendered map marker."""

    workout_id: str
    coordinates: tuple[float, float]
    icon: str
    popup_text: str
    popup_class: str
    auto_close: bool
    close_on_click: bool


class WorkoutRowResponse(BaseModel):
    """Schema for a rendered list row."""

    workout_id: str
    kind: WorkoutKind
    html: str


class SubmissionResponse(BaseModel):
    """Schema for the result of a form submission."""

    workout: dict
    marker: MarkerResponse | None = None
    row: WorkoutRowResponse


class FocusResponse(BaseModel):
    """Schema for the jump-to-workout response."""

    moved: bool
    center: tuple[float, float] | None = None
    zoom_level: int | None = None


class FormFieldsResponse(BaseModel):
    kind: WorkoutKind
    visible: list[str]
    hidden: list[str]
