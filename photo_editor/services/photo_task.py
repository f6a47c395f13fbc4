# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task record store.

Every status write is a conditional update applied only while the task is
non-terminal, so a webhook delivery and a status poll racing on the same task
cannot regress it or complete it twice.
"""

import logging
import uuid
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from photo_editor.core.config import settings
from photo_editor.core.exceptions import ErrorCode, NotFoundException
from photo_editor.models.photo_task import (
    NON_TERMINAL_STATUSES,
    PhotoTask,
    PhotoTaskStatus,
)
from photo_editor.services.base import BaseService
from photo_editor.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class PhotoTaskService(BaseService[PhotoTask]):
    """
    Photo task service class
    """

    def create_task(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str,
        prompt: str,
        provider_model: str,
        credits_cost: int,
        input_images: Optional[List[str]] = None,
        commit: bool = True,
    ) -> PhotoTask:
        """
        Create a pending task at the end of the session's sequence.

        With commit=False the row is only flushed so the caller can commit it
        together with the credit debit and the session touch.
        """
        sequence_order = self.count(db, session_id=session_id) + 1
        now = utc_now()
        task = PhotoTask(
            id=str(uuid.uuid4()),
            session_id=session_id,
            user_id=user_id,
            prompt=prompt,
            input_images=input_images or None,
            status=PhotoTaskStatus.PENDING,
            provider_model=provider_model,
            credits_cost=credits_cost,
            sequence_order=sequence_order,
            created_at=now,
            updated_at=now,
        )
        db.add(task)
        if commit:
            db.commit()
            db.refresh(task)
        else:
            db.flush()
        return task

    def get_task(self, db: Session, *, task_id: str, user_id: str) -> PhotoTask:
        """
        Get a task owned by user_id.

        A task owned by someone else is reported exactly like a missing one.
        """
        task = (
            db.query(PhotoTask)
            .filter(PhotoTask.id == task_id, PhotoTask.user_id == user_id)
            .first()
        )
        if not task:
            raise NotFoundException("Task not found", ErrorCode.TASK_NOT_FOUND)
        return task

    def list_by_session(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str,
        status: Optional[PhotoTaskStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[PhotoTask]:
        query = db.query(PhotoTask).filter(
            PhotoTask.session_id == session_id, PhotoTask.user_id == user_id
        )
        if status is not None:
            query = query.filter(PhotoTask.status == status)
        return (
            query.order_by(PhotoTask.sequence_order.asc(), PhotoTask.created_at.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def update_status(
        self,
        db: Session,
        task_id: str,
        status: PhotoTaskStatus,
        *,
        output_image_url: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> bool:
        """
        Move a non-terminal task to status.

        Returns False without touching the row when the task is already
        terminal. Raises NotFoundException for unknown ids.
        """
        task = self.get(db, task_id)
        if task is None:
            raise NotFoundException("Task not found", ErrorCode.TASK_NOT_FOUND)

        now = utc_now()
        values = {PhotoTask.status: status, PhotoTask.updated_at: now}
        if status.is_terminal:
            values[PhotoTask.completed_at] = now
            values[PhotoTask.finalize_claimed_at] = None
        if output_image_url is not None:
            values[PhotoTask.output_image_url] = output_image_url
        if error_message is not None:
            values[PhotoTask.error_message] = error_message

        rows_updated = (
            db.query(PhotoTask)
            .filter(
                PhotoTask.id == task_id,
                PhotoTask.status.in_(NON_TERMINAL_STATUSES),
            )
            .update(values, synchronize_session=False)
        )
        db.commit()
        db.refresh(task)

        if rows_updated == 0:
            logger.info(
                f"[TaskStore] Task {task_id} is already {task.status.value}, "
                f"ignoring transition to {status.value}"
            )
            return False

        logger.info(f"[TaskStore] Task {task_id} -> {status.value}")
        return True

    def mark_dispatched(self, db: Session, task_id: str, provider_job_id: str) -> bool:
        """
        Record the provider job id and move pending -> processing.

        When a terminal signal already won the race the status is left alone,
        but the job id is still stored if none was recorded yet. Returns True
        when the status moved to processing.
        """
        now = utc_now()
        rows_updated = (
            db.query(PhotoTask)
            .filter(
                PhotoTask.id == task_id,
                PhotoTask.status == PhotoTaskStatus.PENDING,
            )
            .update(
                {
                    PhotoTask.status: PhotoTaskStatus.PROCESSING,
                    PhotoTask.provider_job_id: provider_job_id,
                    PhotoTask.updated_at: now,
                },
                synchronize_session="fetch",
            )
        )
        if rows_updated == 0:
            db.query(PhotoTask).filter(
                PhotoTask.id == task_id,
                PhotoTask.provider_job_id.is_(None),
            ).update(
                {PhotoTask.provider_job_id: provider_job_id},
                synchronize_session="fetch",
            )
            logger.info(
                f"[TaskStore] Task {task_id} left pending before dispatch was "
                f"recorded, kept its status"
            )
        db.commit()
        return rows_updated > 0

    def claim_finalization(self, db: Session, task_id: str) -> bool:
        """
        Claim the right to persist the output asset of a task.

        Only one delivery holds the claim at a time. A claim older than
        TASK_FINALIZE_CLAIM_TTL_SECONDS is treated as abandoned.
        """
        now = utc_now()
        expired_before = now - timedelta(
            seconds=settings.TASK_FINALIZE_CLAIM_TTL_SECONDS
        )
        rows_updated = (
            db.query(PhotoTask)
            .filter(
                PhotoTask.id == task_id,
                PhotoTask.status.in_(NON_TERMINAL_STATUSES),
                (PhotoTask.finalize_claimed_at.is_(None))
                | (PhotoTask.finalize_claimed_at < expired_before),
            )
            .update(
                {PhotoTask.finalize_claimed_at: now},
                synchronize_session=False,
            )
        )
        db.commit()
        return rows_updated > 0

    def release_finalization(self, db: Session, task_id: str) -> None:
        db.query(PhotoTask).filter(PhotoTask.id == task_id).update(
            {PhotoTask.finalize_claimed_at: None},
            synchronize_session=False,
        )
        db.commit()


photo_task_service = PhotoTaskService(PhotoTask)
