"""Task lifecycle types: descriptors, handles, results and outcomes.

Submission yields ``Completed`` (image) or ``Pending`` (video). Polling
yields ``Ready``, ``StillPending``, ``Failed`` or ``TransientError``, and
the polling loop adds ``TimedOut``. None of these are stored anywhere: the
caller owns them once they are returned.
"""

from __future__ import annotations

import enum
import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Union


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


def new_task_uuid() -> str:
    """Fresh identifier for a task, generated before the provider sees it."""
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Descriptor / handle / result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskDescriptor:
    """Normalized payload for one provider task."""
    task_uuid: str
    task_type: str
    prompt: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "taskType": self.task_type,
            "taskUUID": self.task_uuid,
            "positivePrompt": self.prompt,
        }
        payload.update(self.parameters)
        return payload


@dataclass
class TaskHandle:
    """Caller-side reference to an asynchronous job."""
    task_uuid: str
    status: TaskStatus = TaskStatus.PENDING


@dataclass(frozen=True)
class TaskResult:
    """Terminal outcome of a job: ``ready`` carries a URL, ``failed`` never does."""
    status: TaskStatus
    url: str | None = None
    cost: float | None = None
    task_uuid: str | None = None

    def __post_init__(self) -> None:
        if self.status is TaskStatus.PENDING:
            raise ValueError("TaskResult must be terminal (ready or failed)")
        if self.status is TaskStatus.READY and not self.url:
            raise ValueError("ready result requires a url")
        if self.status is TaskStatus.FAILED and self.url:
            raise ValueError("failed result must not carry a url")
        if self.cost is not None and (not math.isfinite(self.cost) or self.cost < 0):
            raise ValueError(f"cost must be a finite non-negative number, got {self.cost}")


# ---------------------------------------------------------------------------
# Submission outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Completed:
    """Synchronous submission: the result came back inline."""
    result: TaskResult


@dataclass(frozen=True)
class Pending:
    """Asynchronous submission: the provider only acknowledged the task."""
    handle: TaskHandle
    cost: float | None = None


SubmissionOutcome = Union[Completed, Pending]


# ---------------------------------------------------------------------------
# Poll outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Ready:
    result: TaskResult


@dataclass(frozen=True)
class StillPending:
    task_uuid: str
    status: str | None = None  # provider's raw status, e.g. "processing"


@dataclass(frozen=True)
class Failed:
    """The provider reports that the job itself failed."""
    task_uuid: str
    reason: str
    cost: float | None = None

    @property
    def result(self) -> TaskResult:
        return TaskResult(
            status=TaskStatus.FAILED, cost=self.cost, task_uuid=self.task_uuid
        )


@dataclass(frozen=True)
class TransientError:
    """A status query failed; says nothing about the job itself."""
    task_uuid: str
    reason: str


@dataclass(frozen=True)
class TimedOut:
    """Polling budget ran out. The job may still finish; poll again later."""
    task_uuid: str
    elapsed: float
    polls: int


PollOutcome = Union[Ready, StillPending, Failed, TransientError]
CompletionOutcome = Union[Ready, Failed, TransientError, TimedOut]
