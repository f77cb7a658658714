"""Demo script: generate an image, then a video, polling until it is ready.

Run with:
    RUNWARE_API_KEY=... python3 scripts/generate_demo.py "a red fox in snow"

Mirrors what a UI does: the image call returns inline; the video call
returns a task UUID that is polled every POLL_INTERVAL seconds.
"""

import asyncio
import sys

from mediagen.services.poller import PollOrchestrator
from mediagen.services.providers.runware import close_runware_client
from mediagen.services.submitter import TaskSubmitter
from mediagen.services.tasks import Ready


async def demo(prompt: str) -> None:
    submitter = TaskSubmitter()
    poller = PollOrchestrator()

    print("--- Image ---")
    image = await submitter.generate_image(prompt)
    print("imageURL ->", image.result.url)
    print("cost     ->", image.result.cost)

    print("--- Video ---")
    pending = await submitter.generate_video(prompt)
    print("taskUUID ->", pending.handle.task_uuid)
    outcome = await poller.await_completion(pending.handle)
    if isinstance(outcome, Ready):
        print("videoURL ->", outcome.result.url)
        print("cost     ->", outcome.result.cost)
    else:
        print("outcome  ->", outcome)

    await close_runware_client()


if __name__ == "__main__":
    asyncio.run(demo(" ".join(sys.argv[1:]) or "a lighthouse at dusk, cinematic"))
