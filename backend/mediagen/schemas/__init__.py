"""Pydantic v2 schemas package."""

from mediagen.schemas.generation import (
    GenerateBody,
    GenerationParams,
    GenerationRequest,
    ImageResponse,
    MediaKind,
    VideoStatusBody,
    VideoStatusResponse,
    VideoSubmitResponse,
)

__all__ = [
    "GenerateBody",
    "GenerationParams",
    "GenerationRequest",
    "ImageResponse",
    "MediaKind",
    "VideoStatusBody",
    "VideoStatusResponse",
    "VideoSubmitResponse",
]
