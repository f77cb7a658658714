"""Structured errors raised by the submit and poll paths.

Outcomes of the generation job itself (failed, timed out) are values, see
`mediagen.services.tasks`. Everything here is a failure of the request or
of the plumbing around it.
"""

from __future__ import annotations

from typing import Any


class GenerationError(Exception):
    """Base error with a machine-readable code and the raw provider payload."""

    code: str = "generation_error"

    def __init__(self, message: str, *, code: str | None = None, raw: Any = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.raw = raw

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidRequest(GenerationError):
    """Caller input failed validation, locally or at the provider."""

    code = "invalid_request"


class ProviderUnavailable(GenerationError):
    """Provider unreachable, or answered with a transport-level failure."""

    code = "provider_unavailable"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        raw: Any = None,
        status_code: int = 0,
    ):
        super().__init__(message, code=code, raw=raw)
        self.status_code = status_code


class MalformedResponse(GenerationError):
    """Provider answered, but not in the shape we expect."""

    code = "malformed_response"


class TaskMismatch(MalformedResponse):
    """Provider echoed a task UUID other than the one we generated."""

    code = "task_mismatch"

    def __init__(self, expected: str, received: str, *, raw: Any = None):
        super().__init__(
            f"provider echoed taskUUID {received!r}, expected {expected!r}",
            raw=raw,
        )
        self.expected = expected
        self.received = received
