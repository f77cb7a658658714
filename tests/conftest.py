"""Pytest configuration helpers.

Puts ``backend/`` on `sys.path` so tests can import the `mediagen` package
without an install, and provides a scripted stand-in for the Runware client.
"""
import os
import sys
from collections import deque

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from mediagen.services.providers.runware import RunwareResponse  # noqa: E402


class FakeProvider:
    """Answers submit/get_response from scripted replies.

    A reply is a RunwareResponse, an exception instance (raised), or a
    callable taking the task UUID and returning either of those.
    """

    def __init__(self, submit_replies=(), status_replies=()):
        self.submit_replies = deque(submit_replies)
        self.status_replies = deque(status_replies)
        self.submitted = []
        self.queried = []

    async def submit(self, descriptor):
        self.submitted.append(descriptor)
        return self._next(self.submit_replies, descriptor.task_uuid)

    async def get_response(self, task_uuid):
        self.queried.append(task_uuid)
        return self._next(self.status_replies, task_uuid)

    @staticmethod
    def _next(replies, task_uuid):
        reply = replies.popleft() if len(replies) > 1 else replies[0]
        if callable(reply):
            reply = reply(task_uuid)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClock:
    """Virtual time: ``sleep`` advances ``now`` instead of waiting."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def data(*items, status_code=200):
    return RunwareResponse(data=list(items), status_code=status_code)


@pytest.fixture
def clock():
    return FakeClock()
