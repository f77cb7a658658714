from __future__ import annotations
"""Generation API endpoints: image (sync), video (async submit) and video status."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from mediagen.config import get_settings
from mediagen.schemas.generation import (
    GenerateBody,
    ImageResponse,
    VideoStatusBody,
    VideoStatusResponse,
    VideoSubmitResponse,
)
from mediagen.services.poller import PollOrchestrator
from mediagen.services.providers.runware import get_runware_client
from mediagen.services.submitter import TaskSubmitter
from mediagen.services.tasks import Failed, Ready, StillPending, TransientError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_submitter() -> TaskSubmitter:
    return TaskSubmitter(get_runware_client())


def get_poller() -> PollOrchestrator:
    return PollOrchestrator(get_runware_client())


@router.post("/generate-image", response_model=ImageResponse)
async def generate_image(
    body: GenerateBody, submitter: TaskSubmitter = Depends(get_submitter)
):
    """Generate one image and return its URL and cost."""
    outcome = await submitter.generate_image(body.prompt, body.params)
    return ImageResponse(image_url=outcome.result.url, cost=outcome.result.cost)


@router.post("/generate-video", response_model=VideoSubmitResponse)
async def generate_video(
    body: GenerateBody, submitter: TaskSubmitter = Depends(get_submitter)
):
    """Submit a video task. Poll /video-status with the returned taskUUID."""
    outcome = await submitter.generate_video(body.prompt, body.params)
    return VideoSubmitResponse(
        task_uuid=outcome.handle.task_uuid,
        status=outcome.handle.status.value,
        cost=outcome.cost,
    )


@router.post("/video-status", response_model=VideoStatusResponse)
async def video_status(
    body: VideoStatusBody, poller: PollOrchestrator = Depends(get_poller)
):
    """One status check for a video task. Never blocks on the job."""
    outcome = await poller.poll_once(body.task_uuid)

    if isinstance(outcome, Ready):
        return VideoStatusResponse(
            status="ready", video_url=outcome.result.url, cost=outcome.result.cost
        )
    if isinstance(outcome, Failed):
        return VideoStatusResponse(status="failed", cost=outcome.cost, reason=outcome.reason)
    if isinstance(outcome, TransientError):
        # the job may be fine; only this query failed
        return VideoStatusResponse(status="error", reason=outcome.reason)
    if isinstance(outcome, StillPending):
        return VideoStatusResponse(status="pending")
    raise HTTPException(status_code=500, detail="Unexpected poll outcome")


@router.get("/health")
async def health():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "provider_configured": bool(settings.RUNWARE_API_KEY),
    }
