# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from photo_editor.db.base import Base
from photo_editor.utils.datetime_utils import utc_now


class PhotoSession(Base):
    """One editing conversation; a rollup of the tasks created in it"""

    __tablename__ = "photo_sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(256), nullable=False)
    # Untruncated prompt of the first task, set once
    first_prompt = Column(Text, nullable=True)
    task_count = Column(Integer, nullable=False, default=0)
    last_activity = Column(DateTime, nullable=False, default=utc_now)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("ix_photo_sessions_user_last_activity", "user_id", "last_activity"),
        {
            "mysql_engine": "InnoDB",
            "mysql_charset": "utf8mb4",
            "mysql_collate": "utf8mb4_unicode_ci",
        },
    )
