"""Keyed JSON storage for the serialized workout list."""
from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from workout_map.database import SessionLocal
from workout_map.exceptions import CorruptPersistedData
from workout_map.models.database_models import StoredValue


logger = logging.getLogger(__name__)


class WorkoutPersistence:
    """Save and load the workout list under a single storage key."""

    def __init__(self, session_factory: sessionmaker | None = None, key: str = "workouts"):
        self._session_factory = session_factory or SessionLocal
        self.key = key

    def _session(self) -> Session:
        return self._session_factory()

    def save(self, records: list[dict[str, Any]]) -> None:
        """Overwrite the stored list with ``records``."""
        payload = json.dumps(records, ensure_ascii=False)
        db = self._session()
        try:
            row = db.get(StoredValue, self.key)
            if row is None:
                db.add(StoredValue(key=self.key, value=payload))
            else:
                row.value = payload
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.debug("Persisted %d workouts under key %s", len(records), self.key)

    def load(self) -> Any:
        """
        Return the stored value, or ``None`` when nothing was saved yet.

        Raises:
            CorruptPersistedData: if the stored text is not valid JSON
        """
        db = self._session()
        try:
            row = db.get(StoredValue, self.key)
            payload = row.value if row is not None else None
        finally:
            db.close()

        if payload is None:
            return None
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise CorruptPersistedData(f"Stored value for {self.key!r} is not valid JSON") from exc

    def clear(self) -> None:
        db = self._session()
        try:
            row = db.get(StoredValue, self.key)
            if row is not None:
                db.delete(row)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.info("Cleared persisted workouts under key %s", self.key)
