# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import json

import httpx
import pytest

from photo_editor.services.providers import (
    ProviderError,
    ProviderJobStatus,
    SubmitJobRequest,
)
from photo_editor.services.providers.replicate import ReplicateService


def _service(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ReplicateService(
        api_token="r8_test", base_url="https://api.replicate.test/v1", http_client=client
    )


@pytest.mark.unit
class TestReplicateSubmit:
    def test_model_prediction_request(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(201, json={"id": "pred-1", "status": "starting"})

        job = _service(handler).submit(
            SubmitJobRequest(
                prompt="add a hat",
                model_id="google/nano-banana",
                input_images=["https://x/in.png"],
                callback_url="https://photo.example.com/hook?taskId=t-1",
            )
        )

        assert job.id == "pred-1"
        assert job.status == ProviderJobStatus.STARTING
        assert captured["url"] == (
            "https://api.replicate.test/v1/models/google/nano-banana/predictions"
        )
        assert captured["auth"] == "Bearer r8_test"
        assert captured["body"] == {
            "input": {"prompt": "add a hat", "num_outputs": 1, "image": "https://x/in.png"},
            "webhook": "https://photo.example.com/hook?taskId=t-1",
            "webhook_events_filter": ["completed"],
        }

    def test_versioned_model_uses_predictions_endpoint(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(201, json={"id": "pred-2", "status": "starting"})

        _service(handler).submit(
            SubmitJobRequest(prompt="p", model_id="acme/model:abc123")
        )

        assert captured["path"] == "/v1/predictions"
        assert captured["body"]["version"] == "abc123"
        assert "webhook" not in captured["body"]
        assert "image" not in captured["body"]["input"]

    def test_error_detail_is_surfaced(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"detail": "Invalid input image"})

        with pytest.raises(ProviderError) as exc_info:
            _service(handler).submit(SubmitJobRequest(prompt="p", model_id="a/b"))

        assert exc_info.value.message == "Replicate API error: Invalid input image"
        assert exc_info.value.status_code == 422

    def test_unparseable_error_falls_back_to_status_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="<html>down</html>")

        with pytest.raises(ProviderError) as exc_info:
            _service(handler).submit(SubmitJobRequest(prompt="p", model_id="a/b"))

        assert exc_info.value.message == "Replicate API error: Service Unavailable"

    def test_transport_error_becomes_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        with pytest.raises(ProviderError):
            _service(handler).submit(SubmitJobRequest(prompt="p", model_id="a/b"))

    def test_missing_token_is_rejected(self):
        with pytest.raises(ProviderError):
            ReplicateService(api_token="")


@pytest.mark.unit
def test_query_status_normalizes_output():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/predictions/pred-1"
        return httpx.Response(
            200,
            json={
                "id": "pred-1",
                "status": "succeeded",
                "output": "https://replicate.delivery/out.png",
                "error": None,
            },
        )

    job = _service(handler).query_status("pred-1")

    assert job.status == ProviderJobStatus.SUCCEEDED
    assert job.output == ["https://replicate.delivery/out.png"]
    assert job.error is None
