"""Normalize raw Runware result entries into task results and poll outcomes."""

from __future__ import annotations

import logging
import math
from typing import Any

from mediagen.services.errors import MalformedResponse, TaskMismatch
from mediagen.services.providers.runware import RunwareResponse, describe_error
from mediagen.services.tasks import (
    Failed,
    PollOutcome,
    Ready,
    StillPending,
    TaskResult,
    TaskStatus,
)

logger = logging.getLogger(__name__)

_FAILURE_STATUSES = {"error", "failed", "failure", "cancelled"}
_SUCCESS_STATUSES = {"success", "succeeded", "completed"}


def parse_cost(item: dict[str, Any]) -> float | None:
    """Reported cost as a float, or None when the provider sent none."""
    raw = item.get("cost")
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise MalformedResponse(f"cost is not a number: {raw!r}", raw=item)
    try:
        cost = float(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedResponse(f"cost is not a number: {raw!r}", raw=item) from exc
    if not math.isfinite(cost):
        raise MalformedResponse(f"cost is not finite: {raw!r}", raw=item)
    if cost < 0:
        raise MalformedResponse(f"cost is negative: {cost}", raw=item)
    return cost


def failure_reason(item: dict[str, Any]) -> str | None:
    """Reason text when the entry reports an explicit failure status, else None."""
    status = str(item.get("status") or "").lower()
    if status not in _FAILURE_STATUSES:
        return None
    reason = item.get("error") or item.get("message") or f"provider status {status}"
    return str(reason)


def check_echo(item: dict[str, Any], task_uuid: str) -> None:
    """An echoed taskUUID is optional, but when present it has to be ours."""
    echoed = item.get("taskUUID")
    if echoed is not None and echoed != task_uuid:
        raise TaskMismatch(task_uuid, str(echoed), raw=item)


def result_url(item: dict[str, Any]) -> str | None:
    url = item.get("videoURL") or item.get("imageURL")
    if url is not None and not isinstance(url, str):
        raise MalformedResponse(f"result url is not a string: {url!r}", raw=item)
    return url or None


def classify(response: RunwareResponse, task_uuid: str) -> PollOutcome:
    """Turn one ``getResponse`` reply into a poll outcome.

    URL present -> Ready; explicit failure -> Failed; otherwise StillPending.
    """
    err = response.error_for(task_uuid)
    if err is not None:
        return Failed(task_uuid=task_uuid, reason=describe_error(err))

    item = response.first()
    if item is None:
        logger.debug("Runware task %s: no result entry yet", task_uuid)
        return StillPending(task_uuid=task_uuid)

    check_echo(item, task_uuid)
    status = str(item.get("status") or "").lower()
    cost = parse_cost(item)

    reason = failure_reason(item)
    if reason is not None:
        return Failed(task_uuid=task_uuid, reason=reason, cost=cost)

    url = result_url(item)
    if url:
        return Ready(TaskResult(status=TaskStatus.READY, url=url, cost=cost, task_uuid=task_uuid))

    if status in _SUCCESS_STATUSES:
        raise MalformedResponse(
            f"Runware task {task_uuid} reports {status} but has no result url", raw=item
        )

    return StillPending(task_uuid=task_uuid, status=status or None)
