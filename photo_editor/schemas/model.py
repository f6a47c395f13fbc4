# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import List

from photo_editor.schemas.base import CamelModel


class ModelInfo(CamelModel):
    id: str
    name: str
    vendor: str
    credits_per_use: int
    max_images: int
    description: str = ""
    affordable: bool = True


class ModelListResponse(CamelModel):
    success: bool = True
    default_model_id: str
    balance: int
    models: List[ModelInfo] = []


class CreditBalanceResponse(CamelModel):
    success: bool = True
    balance: int
