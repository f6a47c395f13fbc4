# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from photo_editor.api.dependencies import get_db
from photo_editor.core import security
from photo_editor.core.ai_models import DEFAULT_MODEL_ID, get_all_models
from photo_editor.schemas.model import (
    CreditBalanceResponse,
    ModelInfo,
    ModelListResponse,
)
from photo_editor.services.credit import credit_ledger

router = APIRouter()


@router.get("/models", response_model=ModelListResponse)
def list_models(
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Model catalogue, flagged by whether the current balance covers each model"""
    balance = credit_ledger.get_balance(db, current_user.id)
    models = [
        ModelInfo(
            id=model.id,
            name=model.name,
            vendor=model.vendor,
            credits_per_use=model.credits_per_use,
            max_images=model.max_images,
            description=model.description,
            affordable=model.credits_per_use <= balance,
        )
        for model in get_all_models()
    ]
    return ModelListResponse(
        default_model_id=DEFAULT_MODEL_ID, balance=balance, models=models
    )


@router.get("/credits", response_model=CreditBalanceResponse)
def get_credits(
    current_user: security.CurrentUser = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return CreditBalanceResponse(
        balance=credit_ledger.get_balance(db, current_user.id)
    )
