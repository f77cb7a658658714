from __future__ import annotations
"""Poll orchestration for async (video) tasks.

Each poll is one ``getResponse`` call classified as Ready / StillPending /
Failed / TransientError. ``await_completion`` loops over that on a fixed
interval:

    sleep(interval) → poll_once → repeat until Ready or Failed,
    or until the timeout elapses (TimedOut),
    or until too many consecutive transient errors (TransientError).

There is no registry of in-flight polls: two concurrent loops over the same
task UUID will both hit the provider. Callers that can trigger that must
serialize on their side.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from mediagen.config import get_settings
from mediagen.services.errors import InvalidRequest, MalformedResponse, ProviderUnavailable
from mediagen.services.normalize import classify
from mediagen.services.providers.runware import get_runware_client
from mediagen.services.submitter import TaskProvider
from mediagen.services.tasks import (
    CompletionOutcome,
    Failed,
    PollOutcome,
    Ready,
    TaskHandle,
    TaskStatus,
    TimedOut,
    TransientError,
)

logger = logging.getLogger(__name__)


class PollOrchestrator:
    """Stateless between calls; every call carries its own task UUID."""

    def __init__(
        self,
        provider: TaskProvider | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.provider = provider or get_runware_client()
        self._sleep = sleep
        self._clock = clock

    async def poll_once(self, task_uuid: str) -> PollOutcome:
        """Issue one status query and classify it.

        MalformedResponse propagates: a broken reply is not a pending job.
        """
        if not task_uuid or not task_uuid.strip():
            raise InvalidRequest("taskUUID is required", code="missing_task_uuid")

        try:
            response = await self.provider.get_response(task_uuid)
        except ProviderUnavailable as exc:
            logger.warning("Runware status query failed for %s: %s", task_uuid, exc)
            return TransientError(task_uuid=task_uuid, reason=str(exc))
        except InvalidRequest as exc:
            # a 4xx without an error list is an endpoint fault, not a job outcome
            raise MalformedResponse(
                f"Runware status query for {task_uuid} was refused: {exc.message}",
                raw=exc.raw,
            ) from exc

        return classify(response, task_uuid)

    async def await_completion(
        self,
        task: TaskHandle | str,
        *,
        interval: float | None = None,
        timeout: float | None = None,
        max_transient_errors: int | None = None,
        cancel: asyncio.Event | None = None,
    ) -> CompletionOutcome:
        """Poll until the job reaches a terminal state or the budget runs out.

        Args:
            task: A TaskHandle (its status is updated) or a bare task UUID.
            interval: Seconds between polls. Defaults to POLL_INTERVAL.
            timeout: Total polling budget in seconds. Defaults to POLL_TIMEOUT.
            max_transient_errors: Consecutive failed queries tolerated before
                giving up with TransientError. Defaults to POLL_MAX_TRANSIENT_ERRORS.
            cancel: Optional token; once set the loop raises CancelledError at
                its next suspension point. The provider-side job is untouched.

        Returns:
            Ready, Failed, TransientError or TimedOut.
        """
        settings = get_settings()
        interval = settings.POLL_INTERVAL if interval is None else interval
        timeout = settings.POLL_TIMEOUT if timeout is None else timeout
        if max_transient_errors is None:
            max_transient_errors = settings.POLL_MAX_TRANSIENT_ERRORS
        if interval <= 0 or timeout <= 0 or max_transient_errors < 0:
            raise InvalidRequest(
                "interval and timeout must be positive, max_transient_errors non-negative",
                code="bad_poll_budget",
            )

        handle = task if isinstance(task, TaskHandle) else TaskHandle(task_uuid=task)
        start = self._clock()
        polls = 0
        transient = 0

        while True:
            elapsed = self._clock() - start
            if elapsed >= timeout:
                logger.warning(
                    "Runware task %s still pending after %.0fs (%d polls)",
                    handle.task_uuid, elapsed, polls,
                )
                return TimedOut(task_uuid=handle.task_uuid, elapsed=elapsed, polls=polls)

            _raise_if_cancelled(cancel, handle.task_uuid)
            await self._wait(min(interval, timeout - elapsed), cancel)
            _raise_if_cancelled(cancel, handle.task_uuid)

            outcome = await self.poll_once(handle.task_uuid)
            polls += 1
            logger.info(
                "Runware task poll: task=%s outcome=%s elapsed=%.0fs",
                handle.task_uuid, type(outcome).__name__, self._clock() - start,
            )

            if isinstance(outcome, TransientError):
                transient += 1
                if transient > max_transient_errors:
                    logger.error(
                        "Runware task %s: giving up after %d consecutive failed queries",
                        handle.task_uuid, transient,
                    )
                    return outcome
                continue
            transient = 0

            if isinstance(outcome, Ready):
                handle.status = TaskStatus.READY
                return outcome
            if isinstance(outcome, Failed):
                handle.status = TaskStatus.FAILED
                return outcome

    async def _wait(self, seconds: float, cancel: asyncio.Event | None) -> None:
        """Sleep between polls; a set cancel token cuts the sleep short."""
        if cancel is None:
            await self._sleep(seconds)
            return

        sleeper = asyncio.ensure_future(self._sleep(seconds))
        watcher = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for fut in (sleeper, watcher):
                if not fut.done():
                    fut.cancel()
            await asyncio.gather(sleeper, watcher, return_exceptions=True)
        if sleeper.done() and not sleeper.cancelled():
            sleeper.result()


def _raise_if_cancelled(cancel: asyncio.Event | None, task_uuid: str) -> None:
    if cancel is not None and cancel.is_set():
        logger.info("Polling cancelled for task %s", task_uuid)
        raise asyncio.CancelledError(f"polling cancelled for {task_uuid}")
