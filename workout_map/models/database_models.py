"""SQLAlchemy ORM models for persisted session data."""
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from workout_map.database import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoredValue(Base):
    """A single keyed blob of JSON text, the server-side twin of browser local storage."""

    __tablename__ = "stored_values"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)  # JSON document

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)
