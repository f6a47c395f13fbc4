# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from photo_editor.api.dependencies import get_db
from photo_editor.core import security
from photo_editor.core.config import settings
from photo_editor.models.photo_task import PhotoTask, PhotoTaskStatus
from photo_editor.schemas.session import (
    SessionCreateResponse,
    SessionDetailResponse,
    SessionListResponse,
    SessionUpdate,
    SessionUpdateResponse,
)
from photo_editor.schemas.task import TaskListResponse
from photo_editor.services.photo_session import photo_session_service
from photo_editor.services.photo_task import photo_task_service

router = APIRouter()


@router.post("", response_model=SessionCreateResponse)
def create_session(
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Create a session, or return the latest one while it is still empty"""
    session, is_new = photo_session_service.create_or_reuse(db, user_id=current_user.id)
    return SessionCreateResponse(session_id=session.id, is_new=is_new)


@router.get("", response_model=SessionListResponse)
def list_sessions(
    limit: int = Query(
        settings.SESSION_LIST_DEFAULT_LIMIT,
        ge=1,
        le=settings.SESSION_LIST_MAX_LIMIT,
        description="Maximum number of sessions",
    ),
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    sessions = photo_session_service.list_sessions(
        db, user_id=current_user.id, limit=limit
    )
    return SessionListResponse(sessions=sessions)


@router.get("/{session_id}", response_model=SessionDetailResponse)
def get_session(
    session_id: str,
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    session = photo_session_service.get_session(
        db, session_id=session_id, user_id=current_user.id
    )
    return SessionDetailResponse(session=session)


@router.put("/{session_id}", response_model=SessionUpdateResponse)
def update_session(
    session_id: str,
    session_update: SessionUpdate,
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Update session title and/or last activity"""
    session = photo_session_service.update_session(
        db, session_id=session_id, user_id=current_user.id, obj_in=session_update
    )
    return SessionUpdateResponse(session_id=session.id)


@router.get("/{session_id}/tasks", response_model=TaskListResponse)
def list_session_tasks(
    session_id: str,
    status: Optional[PhotoTaskStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(100, ge=1, le=100, description="Items per page"),
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Tasks of a session in sequence order (paginated)"""
    photo_session_service.get_session(
        db, session_id=session_id, user_id=current_user.id
    )
    skip = (page - 1) * limit
    tasks = photo_task_service.list_by_session(
        db,
        session_id=session_id,
        user_id=current_user.id,
        status=status,
        skip=skip,
        limit=limit,
    )
    total = photo_task_service.count(
        db, session_id=session_id, user_id=current_user.id, status=status
    )
    return TaskListResponse(total=total, tasks=tasks)
