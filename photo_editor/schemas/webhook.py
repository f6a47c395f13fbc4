# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from photo_editor.schemas.base import CamelModel


class ReplicateWebhookPayload(BaseModel):
    """Prediction object posted by Replicate on completion"""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str
    version: Optional[str] = None
    # A single URL or a list of URLs depending on the model
    output: Optional[Union[List[Optional[str]], str]] = None
    error: Optional[Any] = None
    logs: Optional[str] = None
    created_at: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None


class WebhookResponse(CamelModel):
    received: bool = True
    processed: bool = False
    task_id: Optional[str] = None
    action: Optional[str] = None
    error: Optional[str] = None
