"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from itertools import count
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

_TMP_DIR = Path(tempfile.mkdtemp(prefix="workout-map-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'workouts.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")
os.environ["HOME_LATITUDE"] = "51.5"
os.environ["HOME_LONGITUDE"] = "-0.12"

from workout_map.logging_config import configure_logging

configure_logging()

from workout_map.config import get_settings
from workout_map.database import init_db
from workout_map.main import app
from workout_map.services.persistence import WorkoutPersistence
from workout_map.services.renderers import ListRenderer, MapRenderer
from workout_map.services.session_controller import SessionController
from workout_map.services.workout_store import WorkoutStore

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
LONDON = (51.5, -0.12)


@pytest.fixture()
def fixed_clock():
    """Clock that always reports FIXED_NOW."""

    return lambda: FIXED_NOW


@pytest.fixture()
def store(fixed_clock) -> WorkoutStore:
    """Store with a fixed clock and predictable ids (w1, w2, ...)."""

    counter = count(1)
    return WorkoutStore(clock=fixed_clock, id_factory=lambda: f"w{next(counter)}")


@pytest.fixture()
def persistence() -> WorkoutPersistence:
    """Persistence backed by a private in-memory SQLite database."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    return WorkoutPersistence(sessionmaker(bind=engine, autoflush=False, autocommit=False), key="workouts")


@pytest.fixture()
def controller(store, persistence) -> SessionController:
    return SessionController(store, MapRenderer(), ListRenderer(), persistence, zoom_level=13)


@pytest.fixture()
def test_client() -> Iterator[TestClient]:
    """Provide a FastAPI test client with a running lifespan and empty storage."""

    init_db()
    stored = WorkoutPersistence(key=get_settings().storage_key)
    stored.clear()
    with TestClient(app) as client:
        yield client
    stored.clear()
