import json

import httpx
import pytest

from mediagen.services.errors import InvalidRequest, MalformedResponse, ProviderUnavailable
from mediagen.services.providers.runware import RunwareClient
from mediagen.services.submitter import build_descriptor, make_request


def client_for(handler, api_key="test-key"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RunwareClient(api_key, base_url="https://api.runware.test/v1/", http_client=http)


async def test_submit_posts_single_task_batch():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        task = seen["body"][0]
        return httpx.Response(
            200, json={"data": [{"taskUUID": task["taskUUID"], "imageURL": "https://x/a.jpg", "cost": 0.002}]}
        )

    descriptor = build_descriptor(make_request("a cat", "image"))
    resp = await client_for(handler).submit(descriptor)

    assert seen["url"] == "https://api.runware.test/v1/inference"
    assert seen["auth"] == "Bearer test-key"
    assert len(seen["body"]) == 1
    assert seen["body"][0]["taskUUID"] == descriptor.task_uuid
    assert resp.first()["imageURL"] == "https://x/a.jpg"


async def test_get_response_sends_status_task():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": []})

    resp = await client_for(handler).get_response("abc")

    assert seen["body"] == [{"taskType": "getResponse", "taskUUID": "abc"}]
    assert resp.data == []


async def test_missing_key_is_unavailable_without_a_request():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(ProviderUnavailable) as exc_info:
        await client_for(handler, api_key="").get_response("abc")
    assert exc_info.value.code == "provider_not_configured"


async def test_transport_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderUnavailable):
        await client_for(handler).get_response("abc")


@pytest.mark.parametrize("status", [429, 500, 502, 503])
async def test_server_errors_are_unavailable(status):
    client = client_for(lambda r: httpx.Response(status, text="upstream down"))
    with pytest.raises(ProviderUnavailable) as exc_info:
        await client.get_response("abc")
    assert exc_info.value.status_code == status


async def test_auth_failure_is_unavailable():
    client = client_for(lambda r: httpx.Response(401, json={"errors": [{"code": "invalidApiKey"}]}))
    with pytest.raises(ProviderUnavailable) as exc_info:
        await client.get_response("abc")
    assert exc_info.value.code == "provider_auth_failed"


async def test_client_error_with_error_list_is_returned():
    body = {"errors": [{"code": "invalidModel", "message": "no such model", "taskUUID": "abc"}]}
    resp = await client_for(lambda r: httpx.Response(400, json=body)).get_response("abc")

    assert resp.status_code == 400
    assert resp.error_for("abc")["code"] == "invalidModel"
    assert resp.error_for("other") is None


async def test_client_error_without_error_list_is_invalid_request():
    client = client_for(lambda r: httpx.Response(400, text="bad request"))
    with pytest.raises(InvalidRequest):
        await client.get_response("abc")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json=[1, 2, 3]),
        httpx.Response(200, json={"data": {"taskUUID": "abc"}}),
        httpx.Response(200, json={"data": ["abc"]}),
    ],
)
async def test_unexpected_bodies_are_malformed(response):
    with pytest.raises(MalformedResponse):
        await client_for(lambda r: response).get_response("abc")
