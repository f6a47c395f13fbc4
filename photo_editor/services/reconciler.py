# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Outcome reconciler.

Webhook deliveries (push) and provider status queries (pull) are normalized
into a ProviderSignal and applied through reconcile(), the only place that
moves a task to a terminal state. Duplicate, late and out-of-order signals
are absorbed by the conditional writes of the task store.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from sqlalchemy.orm import Session

from photo_editor.core.ai_models import get_model_config
from photo_editor.models.photo_task import PhotoTask, PhotoTaskStatus
from photo_editor.schemas.webhook import ReplicateWebhookPayload
from photo_editor.services.asset import (
    AssetPersistenceError,
    AssetPersister,
    asset_persister,
)
from photo_editor.services.photo_task import photo_task_service
from photo_editor.services.providers import (
    AIService,
    ProviderJob,
    ProviderJobStatus,
    create_ai_service,
    get_ai_service_for_model,
)
from photo_editor.services.providers.replicate import normalize_error, normalize_output

logger = logging.getLogger(__name__)

PERSISTENCE_FAILURE_PREFIX = "Image persistence failed: "
MISSING_OUTPUT_MESSAGE = "Provider reported success without output"


class ReconcileAction(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    UPDATED = "updated"
    IGNORED = "ignored"


@dataclass
class ProviderSignal:
    """Provider-reported job state, whichever channel it arrived through"""

    job_id: str
    status: ProviderJobStatus
    output: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_webhook(cls, payload: ReplicateWebhookPayload) -> "ProviderSignal":
        return cls(
            job_id=payload.id,
            status=ProviderJobStatus.parse(payload.status),
            output=normalize_output(payload.output),
            error=normalize_error(payload.error),
        )

    @classmethod
    def from_job(cls, job: ProviderJob) -> "ProviderSignal":
        return cls(job_id=job.id, status=job.status, output=job.output, error=job.error)


@dataclass
class ReconcileResult:
    task_id: str
    action: ReconcileAction
    message: str = ""


class OutcomeReconciler:
    def __init__(self, persister: Optional[AssetPersister] = None):
        self.persister = persister or asset_persister

    def reconcile(
        self, db: Session, task: PhotoTask, signal: ProviderSignal
    ) -> ReconcileResult:
        if task.status.is_terminal:
            logger.info(
                f"[Reconcile] Task {task.id} already {task.status.value}, "
                f"ignoring provider status {signal.status.value}"
            )
            return ReconcileResult(
                task.id, ReconcileAction.IGNORED, f"Task already {task.status.value}"
            )

        if signal.status == ProviderJobStatus.SUCCEEDED:
            return self._complete(db, task, signal)

        if signal.status in (ProviderJobStatus.FAILED, ProviderJobStatus.CANCELED):
            message = signal.error or f"AI processing {signal.status.value}"
            return self._fail(db, task, message)

        if task.status == PhotoTaskStatus.PENDING:
            photo_task_service.update_status(db, task.id, PhotoTaskStatus.PROCESSING)
        return ReconcileResult(
            task.id, ReconcileAction.UPDATED, f"Provider status {signal.status.value}"
        )

    def _fail(self, db: Session, task: PhotoTask, message: str) -> ReconcileResult:
        applied = photo_task_service.update_status(
            db, task.id, PhotoTaskStatus.FAILED, error_message=message
        )
        if not applied:
            return ReconcileResult(task.id, ReconcileAction.IGNORED, "Task already terminal")
        logger.info(f"[Reconcile] Task {task.id} failed: {message}")
        return ReconcileResult(task.id, ReconcileAction.FAILED, message)

    def _complete(
        self, db: Session, task: PhotoTask, signal: ProviderSignal
    ) -> ReconcileResult:
        if not signal.output:
            return self._fail(db, task, MISSING_OUTPUT_MESSAGE)

        if not photo_task_service.claim_finalization(db, task.id):
            logger.info(
                f"[Reconcile] Task {task.id} is being finalized by another delivery"
            )
            return ReconcileResult(
                task.id, ReconcileAction.IGNORED, "Finalization already in progress"
            )

        try:
            output_url = self.persister.persist(signal.output[0])
        except AssetPersistenceError as e:
            logger.error(f"[Reconcile] Failed to persist output of task {task.id}: {e}")
            return self._fail(db, task, f"{PERSISTENCE_FAILURE_PREFIX}{e}")
        except Exception:
            photo_task_service.release_finalization(db, task.id)
            raise

        applied = photo_task_service.update_status(
            db, task.id, PhotoTaskStatus.COMPLETED, output_image_url=output_url
        )
        if not applied:
            logger.warning(
                f"[Reconcile] Task {task.id} turned terminal while its asset was "
                f"stored, orphaned asset {output_url}"
            )
            return ReconcileResult(task.id, ReconcileAction.IGNORED, "Task already terminal")

        logger.info(f"[Reconcile] Task {task.id} completed: {output_url}")
        return ReconcileResult(task.id, ReconcileAction.COMPLETED, output_url)

    def refresh_from_provider(
        self, db: Session, task: PhotoTask, ai_service: Optional[AIService] = None
    ) -> Optional[ReconcileResult]:
        """
        Query the provider for a non-terminal dispatched task and reconcile.

        Returns None when there is nothing to query.

        Raises:
            ProviderError: the provider could not be queried
        """
        if task.status.is_terminal or not task.provider_job_id:
            return None

        if ai_service is None:
            model = get_model_config(task.provider_model)
            ai_service = (
                get_ai_service_for_model(model) if model else create_ai_service()
            )
        job = ai_service.query_status(task.provider_job_id)
        logger.info(
            f"[Reconcile] Polled provider for task {task.id}: {job.status.value}"
        )
        return self.reconcile(db, task, ProviderSignal.from_job(job))


outcome_reconciler = OutcomeReconciler()
