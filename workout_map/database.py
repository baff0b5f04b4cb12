"""Database session and base model setup."""
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from workout_map.config import get_settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, preparing the directory of a file-backed SQLite database."""

    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # Request handlers and the lifespan hook may run on different threads.
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, echo=echo, future=True, connect_args=connect_args)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.debug)


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db(bind: Engine | None = None) -> None:
    """Create any missing tables."""

    # Import models so they register on the metadata.
    from workout_map.models import database_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
