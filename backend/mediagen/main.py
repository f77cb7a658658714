from __future__ import annotations
"""mediagen: FastAPI application entry point.

Mounts the API routes, configures CORS, and maps generation errors to
HTTP responses.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mediagen.api.router import api_router
from mediagen.config import get_settings
from mediagen.services.errors import (
    GenerationError,
    InvalidRequest,
    MalformedResponse,
    ProviderUnavailable,
)
from mediagen.services.providers.runware import close_runware_client

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_ERROR_STATUS: list[tuple[type[GenerationError], int]] = [
    (InvalidRequest, 400),
    (ProviderUnavailable, 503),
    (MalformedResponse, 502),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: log config on startup, close the provider client on shutdown."""
    logger.info("%s starting up...", settings.APP_NAME)
    logger.info("Runware endpoint: %s", settings.RUNWARE_API_BASE)
    if not settings.RUNWARE_API_KEY:
        logger.error("Missing RUNWARE_API_KEY in environment, generation calls will fail")

    yield

    await close_runware_client()
    logger.info("%s shut down", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Image and video generation over the Runware inference API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    status_code = 500
    for cls, code in _ERROR_STATUS:
        if isinstance(exc, cls):
            status_code = code
            break
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "code": exc.code},
    )


app.include_router(api_router)


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run("mediagen.main:app", host="0.0.0.0", port=settings.PORT)
