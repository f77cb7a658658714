"""Per-kind generation defaults.

Single source of truth for the values filled into a task descriptor when
the caller leaves a parameter unset. Models come from settings so they can
be switched without a code change.

Usage:
    from mediagen.services.defaults import defaults_for
    d = defaults_for(MediaKind.VIDEO)
    d.width, d.height  # (1920, 1080)
"""

from __future__ import annotations

from dataclasses import dataclass

from mediagen.config import get_settings
from mediagen.schemas.generation import MediaKind


@dataclass(frozen=True)
class MediaDefaults:
    """Default generation parameters for one media kind."""
    task_type: str
    model: str
    width: int
    height: int
    output_format: str
    output_quality: int
    steps: int | None = None
    cfg_scale: float | None = None
    duration: int | None = None
    asynchronous: bool = False


def _build_table() -> dict[MediaKind, MediaDefaults]:
    settings = get_settings()
    return {
        MediaKind.IMAGE: MediaDefaults(
            task_type="imageInference",
            model=settings.IMAGE_MODEL,
            width=512,
            height=512,
            steps=30,
            cfg_scale=7.5,
            output_format="jpg",
            output_quality=95,
        ),
        MediaKind.VIDEO: MediaDefaults(
            task_type="videoInference",
            model=settings.VIDEO_MODEL,
            width=1920,
            height=1080,
            duration=5,
            output_format="mp4",
            output_quality=95,
            asynchronous=True,
        ),
    }


def defaults_for(kind: MediaKind) -> MediaDefaults:
    """Return the defaults row for a media kind."""
    return _build_table()[kind]
