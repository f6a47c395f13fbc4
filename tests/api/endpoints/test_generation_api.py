# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the process (dispatch) endpoint.
"""

import pytest
from fastapi import status

from photo_editor.models.photo_task import PhotoTask, PhotoTaskStatus
from photo_editor.services.providers import ProviderError

PROCESS_URL = "/api/ai-photo-editor/process"


def _payload(session_id, **overrides):
    payload = {
        "sessionId": session_id,
        "prompt": "Turn the sky purple",
        "modelId": "google/nano-banana",
    }
    payload.update(overrides)
    return payload


@pytest.mark.unit
class TestProcessEndpoint:
    def test_dispatch_returns_task_id(
        self, test_client, auth_headers, funded_user, photo_session, fake_ai_service
    ):
        response = test_client.post(
            PROCESS_URL, json=_payload(photo_session.id), headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["taskId"]
        assert body["warnings"] == []

    def test_extra_images_produce_warning(
        self, test_client, auth_headers, funded_user, photo_session, fake_ai_service
    ):
        response = test_client.post(
            PROCESS_URL,
            json=_payload(
                photo_session.id, inputImages=["https://x/1.png", "https://x/2.png"]
            ),
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["warnings"]) == 1

    def test_requires_authentication(self, test_client, photo_session):
        response = test_client.post(PROCESS_URL, json=_payload(photo_session.id))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize("prompt", ["", "   "])
    def test_blank_prompt_is_rejected(
        self, test_client, auth_headers, funded_user, photo_session, prompt
    ):
        response = test_client.post(
            PROCESS_URL, json=_payload(photo_session.id, prompt=prompt), headers=auth_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errorCode"] == "VALIDATION_ERROR"

    def test_invalid_model(self, test_client, auth_headers, funded_user, photo_session):
        response = test_client.post(
            PROCESS_URL,
            json=_payload(photo_session.id, modelId="acme/unknown"),
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errorCode"] == "INVALID_MODEL"

    def test_unknown_session(self, test_client, auth_headers, funded_user):
        response = test_client.post(
            PROCESS_URL, json=_payload("missing"), headers=auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["errorCode"] == "SESSION_NOT_FOUND"

    def test_insufficient_credits(
        self, test_client, auth_headers, photo_session, test_db, fake_ai_service
    ):
        response = test_client.post(
            PROCESS_URL,
            json=_payload(photo_session.id, modelId="bytedance/seedream-4"),
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
        body = response.json()
        assert body["errorCode"] == "INSUFFICIENT_CREDITS"
        assert body["required"] == 12
        assert body["available"] == 0
        assert test_db.query(PhotoTask).count() == 0

    def test_provider_error(
        self, test_client, auth_headers, funded_user, photo_session, fake_ai_service, test_db
    ):
        fake_ai_service.submit_error = ProviderError("Replicate API error: Unauthenticated")

        response = test_client.post(
            PROCESS_URL, json=_payload(photo_session.id), headers=auth_headers
        )

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        body = response.json()
        assert body["errorCode"] == "PROVIDER_ERROR"
        assert body["error"] == "Replicate API error: Unauthenticated"
        task = test_db.query(PhotoTask).filter(PhotoTask.id == body["taskId"]).one()
        assert task.status == PhotoTaskStatus.FAILED

    def test_unexpected_ai_service_error(
        self, test_client, auth_headers, funded_user, photo_session, fake_ai_service, test_db
    ):
        fake_ai_service.submit_error = RuntimeError("token=abc123 leaked")

        response = test_client.post(
            PROCESS_URL, json=_payload(photo_session.id), headers=auth_headers
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["errorCode"] == "INTERNAL_ERROR"
        assert "abc123" not in response.text
        assert test_db.query(PhotoTask).one().status == PhotoTaskStatus.FAILED
