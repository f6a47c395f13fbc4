# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
AI provider services (job dispatch and status queries).
"""

from photo_editor.services.providers.base import (
    AIService,
    ProviderError,
    ProviderJob,
    ProviderJobStatus,
    SubmitJobRequest,
    build_webhook_url,
)
from photo_editor.services.providers.factory import (
    create_ai_service,
    get_ai_service_for_model,
    register_ai_service,
    unregister_ai_service,
)

__all__ = [
    "AIService",
    "ProviderError",
    "ProviderJob",
    "ProviderJobStatus",
    "SubmitJobRequest",
    "build_webhook_url",
    "create_ai_service",
    "get_ai_service_for_model",
    "register_ai_service",
    "unregister_ai_service",
]
