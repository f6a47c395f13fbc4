# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from photo_editor.api.dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(response: Response, db: Session = Depends(get_db)):
    """
    Liveness probe endpoint.

    Returns:
        dict: Health status with database connectivity
    """
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {e}")
        response.status_code = 503
        return {"status": "unhealthy", "database": "error", "error": str(e)}
