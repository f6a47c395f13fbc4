# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest
from fastapi import status

from photo_editor.services.credit import credit_ledger


@pytest.mark.unit
class TestModelEndpoints:
    def test_models_are_flagged_by_balance(
        self, test_client, auth_headers, test_db, test_user_id
    ):
        credit_ledger.grant(test_db, test_user_id, 10, "welcome")

        response = test_client.get("/api/ai-photo-editor/models", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["defaultModelId"] == "google/nano-banana"
        assert body["balance"] == 10
        affordable = {m["id"]: m["affordable"] for m in body["models"]}
        assert affordable == {"google/nano-banana": True, "bytedance/seedream-4": False}
        assert body["models"][0]["creditsPerUse"] == 8

    def test_credits(self, test_client, auth_headers, funded_user):
        response = test_client.get("/api/ai-photo-editor/credits", headers=auth_headers)

        assert response.json() == {"success": True, "balance": 100}


@pytest.mark.unit
def test_health(test_client):
    response = test_client.get("/api/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
