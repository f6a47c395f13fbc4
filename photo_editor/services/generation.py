# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Job dispatch for one chat turn.

Order matters: the credit debit, the pending task and the session touch are
committed together before the provider is called, so a provider failure
leaves a failed task behind rather than an unaccounted generation.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from photo_editor.core.ai_models import AIModel, get_model_config
from photo_editor.core.config import settings
from photo_editor.core.exceptions import (
    ErrorCode,
    InsufficientCreditsException,
    InternalServerException,
    ProviderException,
    ValidationException,
)
from photo_editor.models.photo_task import PhotoTask, PhotoTaskStatus
from photo_editor.schemas.generation import ProcessRequest
from photo_editor.services.credit import (
    CreditGate,
    InsufficientCreditsError,
    LedgerError,
    credit_gate,
)
from photo_editor.services.photo_session import photo_session_service
from photo_editor.services.photo_task import photo_task_service
from photo_editor.services.providers import (
    AIService,
    ProviderError,
    SubmitJobRequest,
    build_webhook_url,
    get_ai_service_for_model,
)
from photo_editor.services.reconciler import ProviderSignal, outcome_reconciler

logger = logging.getLogger(__name__)

AI_SERVICE_ERROR_MESSAGE = "AI service error"


def webhook_base_url() -> Optional[str]:
    return settings.REPLICATE_WEBHOOK_URL or settings.WEBHOOK_BASE_URL


class GenerationService:
    def __init__(self, gate: Optional[CreditGate] = None):
        self.gate = gate or credit_gate

    def _reserve(
        self,
        db: Session,
        *,
        user_id: str,
        request: ProcessRequest,
        model: AIModel,
    ) -> PhotoTask:
        """Debit credits, create the pending task and touch the session in one commit"""
        try:
            self.gate.consume(
                db,
                user_id,
                model.credits_per_use,
                f"AI photo edit with {model.name}",
            )
            task = photo_task_service.create_task(
                db,
                session_id=request.session_id,
                user_id=user_id,
                prompt=request.prompt,
                provider_model=model.id,
                credits_cost=model.credits_per_use,
                input_images=request.input_images,
                commit=False,
            )
            photo_session_service.touch(
                db, request.session_id, title_seed=request.prompt, commit=False
            )
            db.commit()
        except InsufficientCreditsError as e:
            db.rollback()
            raise InsufficientCreditsException(e.required, e.available)
        except (LedgerError, SQLAlchemyError):
            db.rollback()
            logger.exception(
                f"[Dispatch] Failed to reserve credits for user {user_id}"
            )
            raise InternalServerException()

        db.refresh(task)
        return task

    def dispatch(
        self,
        db: Session,
        *,
        user_id: str,
        request: ProcessRequest,
        ai_service: Optional[AIService] = None,
    ) -> Tuple[PhotoTask, List[str]]:
        """
        Authorize, record and submit a generation job.

        Returns the task and any warnings for the client.
        """
        photo_session_service.get_session(
            db, session_id=request.session_id, user_id=user_id
        )

        model = get_model_config(request.model_id)
        if model is None:
            raise ValidationException(
                f"Invalid model: {request.model_id}", ErrorCode.INVALID_MODEL
            )

        authorization = self.gate.authorize(db, user_id, model.credits_per_use)
        if not authorization.ok:
            logger.info(
                f"[Dispatch] User {user_id} has {authorization.current_balance} "
                f"credits, {authorization.required} required"
            )
            raise InsufficientCreditsException(
                authorization.required, authorization.current_balance
            )

        task = self._reserve(db, user_id=user_id, request=request, model=model)

        warnings = []
        images = request.input_images or []
        if len(images) > 1:
            warnings.append(
                f"Only the first input image is used; "
                f"{len(images) - 1} additional image(s) were ignored"
            )

        callback_url = build_webhook_url(webhook_base_url(), task.id)
        if callback_url is None:
            logger.info(
                f"[Dispatch] No webhook URL configured, task {task.id} relies on polling"
            )

        try:
            service = ai_service or get_ai_service_for_model(model)
            job = service.submit(
                SubmitJobRequest(
                    prompt=request.prompt,
                    model_id=model.id,
                    input_images=images[:1],
                    callback_url=callback_url,
                )
            )
        except (ProviderError, ValueError) as e:
            message = e.message if isinstance(e, ProviderError) else str(e)
            logger.error(f"[Dispatch] Provider rejected task {task.id}: {message}")
            photo_task_service.update_status(
                db, task.id, PhotoTaskStatus.FAILED, error_message=message
            )
            raise ProviderException(message, task.id)
        except Exception:
            logger.exception(f"[Dispatch] AI service call failed for task {task.id}")
            db.rollback()
            photo_task_service.update_status(
                db,
                task.id,
                PhotoTaskStatus.FAILED,
                error_message=AI_SERVICE_ERROR_MESSAGE,
            )
            raise InternalServerException()

        photo_task_service.mark_dispatched(db, task.id, job.id)
        logger.info(
            f"[Dispatch] Task {task.id} submitted to {service.provider_name} "
            f"as job {job.id} (model={model.id}, session={request.session_id})"
        )

        db.refresh(task)
        if job.status.is_terminal:
            # Provider finished synchronously
            outcome_reconciler.reconcile(db, task, ProviderSignal.from_job(job))
            db.refresh(task)

        return task, warnings


generation_service = GenerationService()
