"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    database_url: str = Field(
        default="sqlite:///./data/workouts.db",
        description="SQLAlchemy-compatible database URL.",
    )
    app_host: str = Field(default="127.0.0.1")
    app_port: int = Field(default=8000, ge=1, le=65535)

    debug: bool = Field(default=False)

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    log_file: str | None = Field(
        default="workout_map.log",
        description="File name inside log_dir, or null to log to the console only.",
    )

    storage_key: str = Field(
        default="workouts",
        min_length=1,
        description="Key under which the serialized workout list is stored.",
    )

    map_zoom_level: int = Field(default=13, ge=0, le=19)
    map_tile_url: str = Field(default="https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png")
    map_attribution: str = Field(
        default='&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
    )

    # Optional fixed position used when no client reports one.
    home_latitude: float | None = Field(default=None, ge=-90, le=90)
    home_longitude: float | None = Field(default=None, ge=-180, le=180)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper

    @model_validator(mode="after")
    def check_home_position(self) -> "Settings":
        """Require the home position to be given in full or not at all."""

        if (self.home_latitude is None) != (self.home_longitude is None):
            raise ValueError("HOME_LATITUDE and HOME_LONGITUDE must be set together")
        return self

    @property
    def home_position(self) -> tuple[float, float] | None:
        if self.home_latitude is None or self.home_longitude is None:
            return None
        return (self.home_latitude, self.home_longitude)


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
