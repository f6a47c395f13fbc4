# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from photo_editor.api.dependencies import get_db
from photo_editor.core import security
from photo_editor.core.config import settings
from photo_editor.schemas.task import TaskStatusResponse
from photo_editor.services.photo_task import photo_task_service
from photo_editor.services.providers import ProviderError
from photo_editor.services.reconciler import outcome_reconciler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{task_id}", response_model=TaskStatusResponse)
def get_task_status(
    task_id: str,
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get task status.

    A dispatched task that is not terminal yet is refreshed from the provider
    first, so polling converges even when the webhook never arrives.
    """
    task = photo_task_service.get_task(db, task_id=task_id, user_id=current_user.id)

    if settings.TASK_STATUS_REFRESH_ENABLED and not task.status.is_terminal:
        try:
            outcome_reconciler.refresh_from_provider(db, task)
        except (ProviderError, ValueError) as e:
            logger.warning(f"[TaskStatus] Provider refresh failed for task {task_id}: {e}")
        except Exception:
            db.rollback()
            logger.exception(f"[TaskStatus] Failed to reconcile task {task_id}")
        db.refresh(task)

    return TaskStatusResponse(task=task)
