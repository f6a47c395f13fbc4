# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from photo_editor.api.dependencies import get_db
from photo_editor.core import security
from photo_editor.schemas.generation import ProcessRequest, ProcessResponse
from photo_editor.services.generation import generation_service

router = APIRouter()


@router.post("/process", response_model=ProcessResponse)
def process(
    request: ProcessRequest,
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Submit a generation job; the outcome is read through the task status endpoint"""
    task, warnings = generation_service.dispatch(
        db, user_id=current_user.id, request=request
    )
    return ProcessResponse(task_id=task.id, warnings=warnings)
