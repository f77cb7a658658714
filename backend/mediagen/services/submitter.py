from __future__ import annotations
"""Task submission: build a descriptor, send it, extract the outcome.

Image tasks come back inline:
    submit → Completed(TaskResult(ready, imageURL, cost))
Video tasks are acknowledged only (deliveryMethod=async):
    submit → Pending(TaskHandle(taskUUID, pending))

The task UUID is always generated here, before the request leaves.
"""

import logging
from typing import Any, Protocol, cast

from pydantic import ValidationError

from mediagen.schemas.generation import GenerationParams, GenerationRequest, MediaKind
from mediagen.services.defaults import defaults_for
from mediagen.services.errors import InvalidRequest, MalformedResponse
from mediagen.services.normalize import (
    check_echo,
    failure_reason,
    parse_cost,
    result_url,
)
from mediagen.services.providers.runware import (
    RunwareResponse,
    describe_error,
    get_runware_client,
)
from mediagen.services.tasks import (
    Completed,
    Pending,
    SubmissionOutcome,
    TaskDescriptor,
    TaskHandle,
    TaskResult,
    TaskStatus,
    new_task_uuid,
)

logger = logging.getLogger(__name__)


class TaskProvider(Protocol):
    async def submit(self, descriptor: TaskDescriptor) -> RunwareResponse:
        ...

    async def get_response(self, task_uuid: str) -> RunwareResponse:
        ...


def make_request(
    prompt: str,
    kind: MediaKind | str,
    params: GenerationParams | dict[str, Any] | None = None,
) -> GenerationRequest:
    """Build a GenerationRequest, reporting schema errors as InvalidRequest."""
    try:
        return GenerationRequest(
            prompt=prompt,
            kind=kind,
            params=params if params is not None else GenerationParams(),
        )
    except ValidationError as exc:
        raise InvalidRequest(f"invalid generation request: {exc}", raw=exc.errors()) from exc


def build_descriptor(request: GenerationRequest, task_uuid: str | None = None) -> TaskDescriptor:
    """Merge request params over the kind's defaults into a provider task."""
    d = defaults_for(request.kind)
    p = request.params

    parameters: dict[str, Any] = {
        "model": p.model or d.model,
        "width": p.width or d.width,
        "height": p.height or d.height,
        "numberResults": 1,
        "outputType": "URL",
        "outputFormat": p.output_format or d.output_format,
        "outputQuality": p.output_quality or d.output_quality,
        "includeCost": True,
    }

    steps = p.steps or d.steps
    if steps is not None:
        parameters["steps"] = steps
    cfg_scale = p.cfg_scale or d.cfg_scale
    if cfg_scale is not None:
        parameters["CFGScale"] = cfg_scale
    duration = p.duration or d.duration
    if duration is not None:
        parameters["duration"] = duration
    if d.asynchronous:
        parameters["deliveryMethod"] = "async"

    return TaskDescriptor(
        task_uuid=task_uuid or new_task_uuid(),
        task_type=d.task_type,
        prompt=request.prompt.strip(),
        parameters=parameters,
    )


class TaskSubmitter:
    """Submits one generation request per call. Holds no per-task state."""

    def __init__(self, provider: TaskProvider | None = None) -> None:
        self.provider = provider or get_runware_client()

    async def submit(self, request: GenerationRequest) -> SubmissionOutcome:
        """Send ``request`` to the provider.

        Raises:
            InvalidRequest: empty prompt, unknown kind, or provider rejection.
            ProviderUnavailable: transport-level failure.
            MalformedResponse: reply lacks the expected fields.
        """
        _validate(request)
        descriptor = build_descriptor(request)
        response = await self.provider.submit(descriptor)

        err = response.error_for(descriptor.task_uuid)
        if err is not None:
            logger.warning(
                "Runware rejected task %s: %s", descriptor.task_uuid, describe_error(err)
            )
            raise InvalidRequest(
                f"provider rejected task: {describe_error(err)}",
                code="provider_rejected",
                raw=response.errors,
            )

        item = response.first()
        if item is None:
            raise MalformedResponse(
                f"Runware returned no result for task {descriptor.task_uuid}",
                raw=response.data,
            )
        check_echo(item, descriptor.task_uuid)
        cost = parse_cost(item)

        reason = failure_reason(item)
        if reason is not None:
            logger.warning("Runware failed task %s on submit: %s", descriptor.task_uuid, reason)
            raise InvalidRequest(
                f"provider rejected task: {reason}",
                code="provider_rejected",
                raw=item,
            )

        if request.kind is MediaKind.VIDEO:
            logger.info("Video task accepted: %s", descriptor.task_uuid)
            return Pending(handle=TaskHandle(task_uuid=descriptor.task_uuid), cost=cost)

        url = result_url(item)
        if not url:
            raise MalformedResponse(
                f"Runware image result for {descriptor.task_uuid} has no imageURL",
                raw=item,
            )
        logger.info("Image ready: task=%s cost=%s", descriptor.task_uuid, cost)
        return Completed(
            TaskResult(
                status=TaskStatus.READY,
                url=url,
                cost=cost,
                task_uuid=descriptor.task_uuid,
            )
        )

    async def generate_image(
        self, prompt: str, params: GenerationParams | dict[str, Any] | None = None
    ) -> Completed:
        outcome = await self.submit(make_request(prompt, MediaKind.IMAGE, params))
        return cast(Completed, outcome)

    async def generate_video(
        self, prompt: str, params: GenerationParams | dict[str, Any] | None = None
    ) -> Pending:
        outcome = await self.submit(make_request(prompt, MediaKind.VIDEO, params))
        return cast(Pending, outcome)


def _validate(request: GenerationRequest) -> None:
    if not isinstance(request.prompt, str) or not request.prompt.strip():
        raise InvalidRequest("prompt must be non-empty text", code="empty_prompt")
    if not isinstance(request.kind, MediaKind):
        raise InvalidRequest(f"unsupported media kind: {request.kind!r}", code="bad_kind")
