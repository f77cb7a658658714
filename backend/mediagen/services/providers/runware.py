"""Runware inference API client.

Every call goes to one endpoint, ``POST {base}/inference``, with an ordered
list of task objects. Responses look like::

    {"data": [{"taskUUID": "...", "imageURL": "...", "cost": 0.0013}],
     "errors": [{"code": "...", "message": "...", "taskUUID": "..."}]}

This module is the only place httpx exceptions are seen; everything above
it deals in `mediagen.services.errors`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from mediagen.config import get_settings
from mediagen.services.errors import (
    InvalidRequest,
    MalformedResponse,
    ProviderUnavailable,
)
from mediagen.services.tasks import TaskDescriptor

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Retriable status codes
# ---------------------------------------------------------------------------

_RETRIABLE_STATUS = {408, 429, 500, 502, 503, 504}


@dataclass
class RunwareResponse:
    """Parsed body of one inference call."""
    data: list[dict[str, Any]] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    status_code: int = 200

    def first(self) -> dict[str, Any] | None:
        return self.data[0] if self.data else None

    def error_for(self, task_uuid: str) -> dict[str, Any] | None:
        """First error entry addressed to ``task_uuid`` (or to no task at all)."""
        for err in self.errors:
            if err.get("taskUUID") in (None, task_uuid):
                return err
        return None


def describe_error(err: dict[str, Any]) -> str:
    message = err.get("message") or err.get("error") or "unknown error"
    code = err.get("code")
    return f"{code}: {message}" if code else str(message)


class RunwareClient:
    """Thin async client over the Runware task endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.runware.ai/v1",
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client
        self._own_client = http_client is None

    @property
    def inference_url(self) -> str:
        return f"{self.base_url}/inference"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._own_client = True
        return self._client

    async def aclose(self) -> None:
        if self._own_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RunwareClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    async def submit(self, descriptor: TaskDescriptor) -> RunwareResponse:
        """Send a single-task batch."""
        logger.info(
            "Runware submit: task=%s type=%s",
            descriptor.task_uuid, descriptor.task_type,
        )
        return await self.send_tasks([descriptor.to_payload()])

    async def get_response(self, task_uuid: str) -> RunwareResponse:
        """Read the current state of an async task."""
        logger.debug("Runware getResponse: task=%s", task_uuid)
        return await self.send_tasks([{"taskType": "getResponse", "taskUUID": task_uuid}])

    async def send_tasks(self, tasks: list[dict[str, Any]]) -> RunwareResponse:
        """POST a task batch and parse the reply.

        Raises:
            ProviderUnavailable: no API key, transport failure, 5xx/429.
            InvalidRequest: a 4xx without a usable error list.
            MalformedResponse: the body is not the expected JSON shape.
        """
        if not self.api_key:
            raise ProviderUnavailable(
                "RUNWARE_API_KEY is not configured", code="provider_not_configured"
            )

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = await self._get_client().post(
                self.inference_url, json=tasks, headers=headers
            )
        except httpx.TimeoutException as exc:
            raise ProviderUnavailable(
                f"Runware request timed out: {exc}", code="provider_timeout"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailable(f"Runware request failed: {exc}") from exc

        if resp.status_code in _RETRIABLE_STATUS or resp.status_code >= 500:
            logger.warning(
                "Runware HTTP %d: %s", resp.status_code, resp.text[:500]
            )
            raise ProviderUnavailable(
                f"Runware returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                raw=resp.text[:2000],
            )
        if resp.status_code in (401, 403):
            logger.error("Runware rejected credentials: HTTP %d", resp.status_code)
            raise ProviderUnavailable(
                f"Runware rejected credentials (HTTP {resp.status_code})",
                code="provider_auth_failed",
                status_code=resp.status_code,
                raw=resp.text[:2000],
            )

        parsed = self._parse_body(resp)

        if resp.status_code >= 400:
            logger.warning(
                "Runware HTTP %d: %s", resp.status_code, resp.text[:500]
            )
            if not parsed.errors:
                raise InvalidRequest(
                    f"Runware rejected the request (HTTP {resp.status_code})",
                    raw=resp.text[:2000],
                )
        return parsed

    @staticmethod
    def _parse_body(resp: httpx.Response) -> RunwareResponse:
        try:
            body = resp.json()
        except ValueError as exc:
            if resp.status_code >= 400:
                return RunwareResponse(status_code=resp.status_code)
            raise MalformedResponse(
                "Runware response is not JSON", raw=resp.text[:2000]
            ) from exc

        if not isinstance(body, dict):
            raise MalformedResponse("Runware response is not an object", raw=body)

        data = body.get("data") or []
        errors = body.get("errors") or []
        if not isinstance(data, list) or not isinstance(errors, list):
            raise MalformedResponse("Runware data/errors must be lists", raw=body)
        if not all(isinstance(item, dict) for item in data + errors):
            raise MalformedResponse("Runware result entries must be objects", raw=body)

        return RunwareResponse(data=data, errors=errors, status_code=resp.status_code)


# ---------------------------------------------------------------------------
# Shared client (lazy init)
# ---------------------------------------------------------------------------

_runware_client: RunwareClient | None = None


def get_runware_client() -> RunwareClient:
    """Process-wide client built from settings."""
    global _runware_client
    if _runware_client is None:
        settings = get_settings()
        if not settings.RUNWARE_API_KEY:
            logger.warning("No RUNWARE_API_KEY configured, Runware calls will fail")
        _runware_client = RunwareClient(
            settings.RUNWARE_API_KEY,
            base_url=settings.RUNWARE_API_BASE,
            timeout=settings.RUNWARE_TIMEOUT,
        )
    return _runware_client


async def close_runware_client() -> None:
    global _runware_client
    if _runware_client is not None:
        await _runware_client.aclose()
        _runware_client = None
