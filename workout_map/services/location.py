"""Location providers consumed by the session controller."""
from __future__ import annotations

import logging
from typing import Protocol

from workout_map.exceptions import LocationUnavailable
from workout_map.models.workout import Coordinates


logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    async def locate(self) -> Coordinates:
        """Resolve the user's position or raise ``LocationUnavailable``."""
        ...


class ConfiguredLocationProvider:
    """Resolve to a fixed home position taken from settings."""

    def __init__(self, position: tuple[float, float] | None):
        self._position = Coordinates(*position) if position is not None else None

    async def locate(self) -> Coordinates:
        if self._position is None:
            logger.info("No home position configured; waiting for a client-reported location")
            raise LocationUnavailable("Could not get your current position")
        return self._position
