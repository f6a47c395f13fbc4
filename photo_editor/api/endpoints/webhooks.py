# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Completion webhook called by the AI provider.

The internal task id arrives as the taskId query parameter; the provider's
prediction id in the body is only checked against the stored job id. Once
the task is found the delivery is always acknowledged, so failures inside
reconciliation do not trigger provider retries.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from photo_editor.api.dependencies import get_db
from photo_editor.core.config import settings
from photo_editor.core.exceptions import (
    CustomHTTPException,
    ErrorCode,
    NotFoundException,
    ValidationException,
)
from photo_editor.schemas.webhook import ReplicateWebhookPayload, WebhookResponse
from photo_editor.services.photo_task import photo_task_service
from photo_editor.services.reconciler import (
    ProviderSignal,
    ReconcileAction,
    outcome_reconciler,
)
from photo_editor.services.webhook_signature import (
    WebhookSignatureError,
    verify_webhook_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter()

PROCESSING_FAILED_MESSAGE = "Webhook processing failed"


def _process_completion(
    db: Session, task_id: str, payload: ReplicateWebhookPayload
) -> WebhookResponse:
    task = photo_task_service.get(db, task_id)
    if task is None:
        logger.warning(f"[Webhook] Unknown task {task_id} (prediction {payload.id})")
        raise NotFoundException("Task not found", ErrorCode.TASK_NOT_FOUND)

    if task.provider_job_id and task.provider_job_id != payload.id:
        logger.warning(
            f"[Webhook] Prediction id mismatch for task {task_id}: "
            f"expected {task.provider_job_id}, got {payload.id}"
        )
        return WebhookResponse(
            processed=False,
            task_id=task_id,
            action=ReconcileAction.IGNORED.value,
            error="Prediction id mismatch",
        )

    try:
        result = outcome_reconciler.reconcile(
            db, task, ProviderSignal.from_webhook(payload)
        )
    except Exception:
        db.rollback()
        logger.exception(f"[Webhook] Failed to process completion of task {task_id}")
        return WebhookResponse(
            processed=False, task_id=task_id, error=PROCESSING_FAILED_MESSAGE
        )

    logger.info(
        f"[Webhook] Task {task_id} prediction {payload.id} "
        f"status={payload.status} action={result.action.value}"
    )
    return WebhookResponse(
        processed=True, task_id=task_id, action=result.action.value
    )


@router.post("/ai-photo-completion", response_model=WebhookResponse)
async def ai_photo_completion(
    request: Request,
    task_id: Optional[str] = Query(None, alias="taskId"),
    db: Session = Depends(get_db),
):
    if not task_id:
        raise ValidationException("Missing taskId parameter")

    body = await request.body()

    if settings.REPLICATE_WEBHOOK_SECRET:
        try:
            verify_webhook_signature(
                settings.REPLICATE_WEBHOOK_SECRET,
                request.headers,
                body,
                tolerance_seconds=settings.WEBHOOK_TIMESTAMP_TOLERANCE_SECONDS,
            )
        except WebhookSignatureError as e:
            logger.warning(f"[Webhook] Rejected delivery for task {task_id}: {e}")
            raise CustomHTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
                error_code=ErrorCode.INVALID_SIGNATURE,
            )

    try:
        payload = ReplicateWebhookPayload.model_validate_json(body)
    except ValidationError:
        raise ValidationException("Invalid webhook payload")

    return await run_in_threadpool(_process_completion, db, task_id, payload)


@router.get("/ai-photo-completion")
def ai_photo_completion_health():
    """Webhook reachability check"""
    return {
        "status": "ok",
        "endpoint": "ai-photo-completion",
        "signatureVerification": bool(settings.REPLICATE_WEBHOOK_SECRET),
    }
