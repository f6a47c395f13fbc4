# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from photo_editor.schemas.base import CamelModel, UTCDateTime


class SessionInfo(CamelModel):
    """Session summary as shown in the sidebar"""

    id: str
    title: str
    first_prompt: Optional[str] = None
    task_count: int
    last_activity: UTCDateTime
    created_at: UTCDateTime


class SessionDetail(SessionInfo):
    updated_at: UTCDateTime


class SessionCreateResponse(CamelModel):
    success: bool = True
    session_id: str
    is_new: bool


class SessionListResponse(CamelModel):
    success: bool = True
    sessions: List[SessionInfo] = []


class SessionDetailResponse(CamelModel):
    success: bool = True
    session: SessionDetail


class SessionUpdate(CamelModel):
    """Session update model"""

    title: Optional[str] = Field(None, max_length=256)
    last_activity: Optional[datetime] = None


class SessionUpdateResponse(CamelModel):
    success: bool = True
    session_id: str
