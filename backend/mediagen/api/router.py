from __future__ import annotations
"""Master API router, mounts all sub-routers."""

from fastapi import APIRouter

from mediagen.api.generation import router as generation_router

api_router = APIRouter(prefix="/api", redirect_slashes=False)

api_router.include_router(generation_router, tags=["Generation"])
