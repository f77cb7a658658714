from __future__ import annotations
"""Pydantic v2 schemas for generation requests and the public HTTP API."""

import enum

from pydantic import BaseModel, Field


class MediaKind(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


class GenerationParams(BaseModel):
    """Optional generation knobs. Anything left unset falls back to the
    per-kind defaults table in `mediagen.services.defaults`."""

    model: str | None = None
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    steps: int | None = Field(default=None, gt=0)
    cfg_scale: float | None = Field(default=None, gt=0)
    output_format: str | None = None
    output_quality: int | None = Field(default=None, ge=20, le=99)
    duration: int | None = Field(default=None, gt=0)

    model_config = {"frozen": True, "extra": "forbid", "protected_namespaces": ()}


class GenerationRequest(BaseModel):
    """Caller intent: a prompt, a media kind and optional params."""

    prompt: str
    kind: MediaKind
    params: GenerationParams = Field(default_factory=GenerationParams)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# HTTP API bodies
# ---------------------------------------------------------------------------

class GenerateBody(BaseModel):
    """Body for both generate endpoints."""

    prompt: str
    params: GenerationParams | None = None


class ImageResponse(BaseModel):
    image_url: str = Field(alias="imageURL")
    cost: float | None = None

    model_config = {"populate_by_name": True}


class VideoSubmitResponse(BaseModel):
    task_uuid: str = Field(alias="taskUUID")
    status: str
    cost: float | None = None

    model_config = {"populate_by_name": True}


class VideoStatusBody(BaseModel):
    task_uuid: str = Field(alias="taskUUID", min_length=1)

    model_config = {"populate_by_name": True}


class VideoStatusResponse(BaseModel):
    status: str  # pending | ready | failed | error
    video_url: str | None = Field(default=None, alias="videoURL")
    cost: float | None = None
    reason: str | None = None

    model_config = {"populate_by_name": True}
