# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from enum import Enum as PyEnum

from sqlalchemy import JSON, Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Index, Integer, String, Text

from photo_editor.db.base import Base
from photo_editor.utils.datetime_utils import utc_now


class PhotoTaskStatus(str, PyEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({PhotoTaskStatus.COMPLETED, PhotoTaskStatus.FAILED})
NON_TERMINAL_STATUSES = frozenset(
    {PhotoTaskStatus.PENDING, PhotoTaskStatus.PROCESSING}
)


class PhotoTask(Base):
    """One generation attempt inside a session"""

    __tablename__ = "photo_tasks"

    id = Column(String(36), primary_key=True)
    session_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    input_images = Column(JSON, nullable=True)
    # Owned storage URL, never the provider's URL
    output_image_url = Column(String(1024), nullable=True)
    status = Column(
        SQLEnum(PhotoTaskStatus), nullable=False, default=PhotoTaskStatus.PENDING
    )
    # Job id assigned by the AI provider after dispatch
    provider_job_id = Column(String(128), nullable=True, index=True)
    provider_model = Column(String(128), nullable=False)
    credits_cost = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)
    sequence_order = Column(Integer, nullable=False)
    # Set while one delivery downloads and stores the output asset
    finalize_claimed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
    completed_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_photo_tasks_session_sequence", "session_id", "sequence_order"),
        {
            "mysql_engine": "InnoDB",
            "mysql_charset": "utf8mb4",
            "mysql_collate": "utf8mb4_unicode_ci",
        },
    )
