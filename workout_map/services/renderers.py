"""View-state collaborators: map markers and the workout list."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from jinja2 import Environment, PackageLoader, select_autoescape

from workout_map.models.workout import Coordinates, Workout, WorkoutKind


logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Render whole numbers without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


_templates = Environment(
    loader=PackageLoader("workout_map", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_templates.filters["number"] = format_number


@dataclass(frozen=True)
class Marker:
    workout_id: str
    coordinates: Coordinates
    icon: str
    popup_text: str
    popup_class: str
    auto_close: bool = False
    close_on_click: bool = False


@dataclass(frozen=True)
class MapView:
    center: Coordinates
    zoom_level: int
    animate: bool = False
    pan_duration_s: float | None = None


@dataclass(frozen=True)
class WorkoutRow:
    workout_id: str
    kind: WorkoutKind
    html: str


class MapRenderer:
    """Track what the map shows: its view and one popup marker per workout."""

    def __init__(self) -> None:
        self.view: MapView | None = None
        self.markers: list[Marker] = []

    @property
    def is_ready(self) -> bool:
        return self.view is not None

    def show(self, center: Coordinates, zoom_level: int) -> MapView:
        """Display the map centred on ``center`` with no markers yet."""
        self.view = MapView(center=center, zoom_level=zoom_level)
        self.markers = []
        logger.info("Map shown at %s zoom=%d", tuple(center), zoom_level)
        return self.view

    def render_marker(self, workout: Workout) -> Marker:
        marker = Marker(
            workout_id=workout.id,
            coordinates=workout.coordinates,
            icon=workout.icon,
            popup_text=f"{workout.icon} {workout.description}",
            popup_class=f"{workout.kind.value}-popup",
        )
        self.markers.append(marker)
        return marker

    def set_view(self, center: Coordinates, zoom_level: int, pan_duration_s: float = 1.0) -> MapView:
        """Pan the map to ``center`` with animation."""
        self.view = MapView(center=center, zoom_level=zoom_level, animate=True, pan_duration_s=pan_duration_s)
        return self.view

    def clear(self) -> None:
        self.markers = []


class ListRenderer:
    """Render workouts as HTML list rows, kept in insertion order."""

    def __init__(self) -> None:
        self.rows: list[WorkoutRow] = []
        self._template = _templates.get_template("workout_row.html")

    def render_row(self, workout: Workout) -> WorkoutRow:
        row = WorkoutRow(
            workout_id=workout.id,
            kind=workout.kind,
            html=self._template.render(workout=workout),
        )
        self.rows.append(row)
        return row

    def clear(self) -> None:
        self.rows = []
