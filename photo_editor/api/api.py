# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from photo_editor.api.endpoints import (
    generation,
    health,
    models,
    sessions,
    tasks,
    webhooks,
)
from photo_editor.api.router import api_router

PHOTO_EDITOR_PREFIX = "/ai-photo-editor"

# Health check endpoints (no prefix, directly under /api)
api_router.include_router(health.router, tags=["health"])
api_router.include_router(
    sessions.router, prefix=f"{PHOTO_EDITOR_PREFIX}/sessions", tags=["sessions"]
)
api_router.include_router(
    tasks.router, prefix=f"{PHOTO_EDITOR_PREFIX}/tasks", tags=["tasks"]
)
api_router.include_router(
    generation.router, prefix=PHOTO_EDITOR_PREFIX, tags=["generation"]
)
api_router.include_router(models.router, prefix=PHOTO_EDITOR_PREFIX, tags=["models"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
