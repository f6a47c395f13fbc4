# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from photo_editor.core.config import settings
from photo_editor.core.exceptions import (
    ErrorCode,
    NotFoundException,
    ValidationException,
)
from photo_editor.models.photo_session import PhotoSession
from photo_editor.schemas.session import SessionUpdate
from photo_editor.services.base import BaseService
from photo_editor.utils.datetime_utils import to_naive_utc, utc_now

logger = logging.getLogger(__name__)


def derive_title(prompt: str, max_length: int = None) -> str:
    """Session title from the first prompt: truncated with an ellipsis when longer"""
    if max_length is None:
        max_length = settings.SESSION_TITLE_MAX_LENGTH
    if len(prompt) > max_length:
        return prompt[:max_length] + "..."
    return prompt


class PhotoSessionService(BaseService[PhotoSession]):
    """
    Photo session service class
    """

    def create_or_reuse(self, db: Session, *, user_id: str) -> Tuple[PhotoSession, bool]:
        """
        Return the user's latest session when it has no tasks yet, otherwise
        create a new one. The boolean is True for a newly created session.
        """
        latest = (
            db.query(PhotoSession)
            .filter(PhotoSession.user_id == user_id)
            .order_by(PhotoSession.last_activity.desc(), PhotoSession.created_at.desc())
            .first()
        )
        if latest is not None and latest.task_count == 0:
            logger.info(f"[Session] Reusing empty session {latest.id} for user {user_id}")
            return latest, False

        now = utc_now()
        session = PhotoSession(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=settings.SESSION_DEFAULT_TITLE,
            task_count=0,
            last_activity=now,
            created_at=now,
            updated_at=now,
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        logger.info(f"[Session] Created session {session.id} for user {user_id}")
        return session, True

    def get_session(self, db: Session, *, session_id: str, user_id: str) -> PhotoSession:
        session = (
            db.query(PhotoSession)
            .filter(PhotoSession.id == session_id, PhotoSession.user_id == user_id)
            .first()
        )
        if not session:
            raise NotFoundException("Session not found", ErrorCode.SESSION_NOT_FOUND)
        return session

    def list_sessions(
        self, db: Session, *, user_id: str, limit: Optional[int] = None
    ) -> List[PhotoSession]:
        """
        Get the user's sessions, most recently active first
        """
        if limit is None:
            limit = settings.SESSION_LIST_DEFAULT_LIMIT
        limit = max(1, min(limit, settings.SESSION_LIST_MAX_LIMIT))
        return (
            db.query(PhotoSession)
            .filter(PhotoSession.user_id == user_id)
            .order_by(PhotoSession.last_activity.desc(), PhotoSession.created_at.desc())
            .limit(limit)
            .all()
        )

    def touch(
        self,
        db: Session,
        session_id: str,
        *,
        title_seed: Optional[str] = None,
        commit: bool = True,
    ) -> None:
        """
        Record a new task in the session.

        The task counter is incremented in SQL. Title and first prompt are only
        written while first_prompt is still unset, so concurrent first tasks
        cannot overwrite each other.
        """
        now = utc_now()
        db.query(PhotoSession).filter(PhotoSession.id == session_id).update(
            {
                PhotoSession.task_count: PhotoSession.task_count + 1,
                PhotoSession.last_activity: now,
                PhotoSession.updated_at: now,
            },
            synchronize_session="fetch",
        )
        if title_seed and title_seed.strip():
            db.query(PhotoSession).filter(
                PhotoSession.id == session_id,
                PhotoSession.first_prompt.is_(None),
            ).update(
                {
                    PhotoSession.title: derive_title(title_seed),
                    PhotoSession.first_prompt: title_seed,
                },
                synchronize_session="fetch",
            )
        if commit:
            db.commit()
        else:
            db.flush()

    def update_session(
        self, db: Session, *, session_id: str, user_id: str, obj_in: SessionUpdate
    ) -> PhotoSession:
        update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise ValidationException("No fields to update")

        session = self.get_session(db, session_id=session_id, user_id=user_id)
        if "title" in update_data:
            session.title = update_data["title"]
        if "last_activity" in update_data:
            session.last_activity = to_naive_utc(update_data["last_activity"])
        session.updated_at = utc_now()

        db.add(session)
        db.commit()
        db.refresh(session)
        return session


photo_session_service = PhotoSessionService(PhotoSession)
