"""Error types raised by the workout domain and its collaborators."""


class WorkoutMapError(Exception):
    """Base class for all workout map errors."""


class InvalidWorkoutInput(WorkoutMapError, ValueError):
    """A numeric input is missing, not finite, or out of range."""


class NotFound(WorkoutMapError, LookupError):
    """No workout exists with the requested id."""

    def __init__(self, workout_id: str):
        super().__init__(f"Workout {workout_id!r} not found")
        self.workout_id = workout_id


class CorruptPersistedData(WorkoutMapError):
    """The stored workout list cannot be turned back into workouts."""


class LocationUnavailable(WorkoutMapError):
    """The location provider could not determine a position."""


class NoActivePlacement(WorkoutMapError):
    """A form was submitted without a location having been picked first."""
