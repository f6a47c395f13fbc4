# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import List, Optional

from pydantic import Field, field_validator

from photo_editor.schemas.base import CamelModel


class ProcessRequest(CamelModel):
    """Generation request for one chat turn"""

    session_id: str = Field(..., min_length=1)
    prompt: str
    # URLs of images uploaded by the client; only the first is forwarded
    input_images: Optional[List[str]] = None
    model_id: str = Field(..., min_length=1)

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("prompt must not be empty")
        return value

    @field_validator("input_images")
    @classmethod
    def drop_empty_images(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        images = [image for image in value if image and image.strip()]
        return images or None


class ProcessResponse(CamelModel):
    success: bool = True
    task_id: str
    warnings: List[str] = []
