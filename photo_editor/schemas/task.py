# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import List, Optional

from photo_editor.models.photo_task import PhotoTaskStatus
from photo_editor.schemas.base import CamelModel, UTCDateTime


class TaskInfo(CamelModel):
    """Full task record returned to the owner"""

    id: str
    session_id: str
    status: PhotoTaskStatus
    prompt: str
    input_images: Optional[List[str]] = None
    output_image_url: Optional[str] = None
    error_message: Optional[str] = None
    provider_job_id: Optional[str] = None
    provider_model: str
    credits_cost: int
    sequence_order: int
    created_at: UTCDateTime
    completed_at: Optional[UTCDateTime] = None


class TaskStatusResponse(CamelModel):
    success: bool = True
    task: TaskInfo


class TaskListResponse(CamelModel):
    success: bool = True
    total: int
    tasks: List[TaskInfo] = []
