"""Runtime settings for the intake service.

Values are read from the environment each time :func:`get_settings` is
called so that tests can adjust them with ``monkeypatch.setenv``.
"""
from __future__ import annotations

import os

from pydantic import BaseModel, Field


DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _cors_origins() -> list[str]:
    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    return origins or list(DEFAULT_CORS_ORIGINS)


class Settings(BaseModel):
    MIN_TEXT_LENGTH: int = Field(default_factory=lambda: _env_int("INTAKE_MIN_TEXT_LENGTH", 100))
    MAX_UPLOAD_MB: int = Field(default_factory=lambda: _env_int("MAX_UPLOAD_MB", 25))
    ALLOWED_SUFFIXES: set[str] = {".pdf"}
    CORS_ALLOW_ORIGINS: list[str] = Field(default_factory=_cors_origins)
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024


def get_settings() -> Settings:
    return Settings()
