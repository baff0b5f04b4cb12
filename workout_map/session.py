"""Per-process session context wiring the store, views, storage and controller."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request

from workout_map.config import Settings, get_settings
from workout_map.database import init_db
from workout_map.models.workout import Coordinates
from workout_map.services.location import ConfiguredLocationProvider, LocationProvider
from workout_map.services.persistence import WorkoutPersistence
from workout_map.services.renderers import ListRenderer, MapRenderer
from workout_map.services.session_controller import SessionController
from workout_map.services.workout_store import WorkoutStore


logger = logging.getLogger(__name__)


@dataclass
class WorkoutSession:
    """Everything one running app needs; created on startup and closed on shutdown."""

    settings: Settings
    store: WorkoutStore
    map_renderer: MapRenderer
    list_renderer: ListRenderer
    persistence: WorkoutPersistence
    location_provider: LocationProvider
    controller: SessionController

    @classmethod
    def open(
        cls,
        settings: Settings | None = None,
        persistence: WorkoutPersistence | None = None,
        store: WorkoutStore | None = None,
        location_provider: LocationProvider | None = None,
    ) -> "WorkoutSession":
        """Build the session and restore any persisted workouts."""
        settings = settings or get_settings()
        if persistence is None:
            init_db()
            persistence = WorkoutPersistence(key=settings.storage_key)

        store = store or WorkoutStore()
        map_renderer = MapRenderer()
        list_renderer = ListRenderer()
        controller = SessionController(
            store,
            map_renderer,
            list_renderer,
            persistence,
            zoom_level=settings.map_zoom_level,
        )
        session = cls(
            settings=settings,
            store=store,
            map_renderer=map_renderer,
            list_renderer=list_renderer,
            persistence=persistence,
            location_provider=location_provider or ConfiguredLocationProvider(settings.home_position),
            controller=controller,
        )

        restored = controller.start()
        logger.info("Workout session opened with %d stored workouts", restored)
        return session

    async def locate(self) -> Coordinates | None:
        return await self.controller.acquire_location(self.location_provider)

    def close(self) -> None:
        """Drop in-memory state; persisted workouts stay untouched."""
        self.controller.cancel()
        self.store.clear()
        self.map_renderer.clear()
        self.list_renderer.clear()
        logger.info("Workout session closed")


def get_session(request: Request) -> WorkoutSession:
    """FastAPI dependency returning the session opened by the app lifespan."""
    return request.app.state.workout_session
