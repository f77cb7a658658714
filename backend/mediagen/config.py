from __future__ import annotations
"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """mediagen settings.

    Loaded from environment variables or .env file.
    """

    # --- Application ---
    APP_NAME: str = "mediagen"
    DEBUG: bool = False
    PORT: int = 5000
    CORS_ORIGINS: str = "*"  # comma-separated

    # --- Runware (image + video inference) ---
    RUNWARE_API_BASE: str = "https://api.runware.ai/v1"
    RUNWARE_API_KEY: str = ""
    RUNWARE_TIMEOUT: float = 60.0

    # --- Default models ---
    IMAGE_MODEL: str = "runware:101@1"
    VIDEO_MODEL: str = "klingai:5@3"

    # --- Video status polling ---
    POLL_INTERVAL: float = 5.0
    POLL_TIMEOUT: float = 600.0
    POLL_MAX_TRANSIENT_ERRORS: int = 3

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
