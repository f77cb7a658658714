import pytest

from mediagen.schemas.generation import GenerationParams, MediaKind
from mediagen.services.submitter import build_descriptor, make_request
from mediagen.services.tasks import TaskHandle, TaskResult, TaskStatus, new_task_uuid


def test_ready_result_requires_url():
    with pytest.raises(ValueError):
        TaskResult(status=TaskStatus.READY)


def test_failed_result_rejects_url():
    with pytest.raises(ValueError):
        TaskResult(status=TaskStatus.FAILED, url="https://x/y.mp4")


@pytest.mark.parametrize("cost", [float("nan"), float("inf")])
def test_result_rejects_non_finite_cost(cost):
    with pytest.raises(ValueError):
        TaskResult(status=TaskStatus.READY, url="https://x/y.jpg", cost=cost)


def test_result_rejects_negative_cost_and_pending_status():
    with pytest.raises(ValueError):
        TaskResult(status=TaskStatus.READY, url="https://x/y.jpg", cost=-0.01)
    with pytest.raises(ValueError):
        TaskResult(status=TaskStatus.PENDING)


def test_handle_starts_pending():
    handle = TaskHandle(task_uuid=new_task_uuid())
    assert handle.status is TaskStatus.PENDING


def test_image_descriptor_uses_defaults():
    desc = build_descriptor(make_request("a cat", "image"))
    payload = desc.to_payload()

    assert payload["taskType"] == "imageInference"
    assert payload["taskUUID"] == desc.task_uuid
    assert payload["positivePrompt"] == "a cat"
    assert payload["model"] == "runware:101@1"
    assert (payload["width"], payload["height"]) == (512, 512)
    assert payload["steps"] == 30
    assert payload["CFGScale"] == 7.5
    assert payload["outputType"] == "URL"
    assert payload["outputFormat"] == "jpg"
    assert payload["includeCost"] is True
    assert "deliveryMethod" not in payload


def test_video_descriptor_is_async():
    desc = build_descriptor(make_request("waves", MediaKind.VIDEO))
    payload = desc.to_payload()

    assert payload["taskType"] == "videoInference"
    assert payload["model"] == "klingai:5@3"
    assert (payload["width"], payload["height"]) == (1920, 1080)
    assert payload["duration"] == 5
    assert payload["outputFormat"] == "mp4"
    assert payload["deliveryMethod"] == "async"
    assert "steps" not in payload


def test_params_override_defaults():
    params = GenerationParams(model="runware:100@1", width=1024, height=768, steps=12)
    payload = build_descriptor(make_request("x", "image", params)).to_payload()

    assert payload["model"] == "runware:100@1"
    assert (payload["width"], payload["height"]) == (1024, 768)
    assert payload["steps"] == 12
    assert payload["CFGScale"] == 7.5
