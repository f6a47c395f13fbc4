# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Models package
"""
from photo_editor.models.credit import CreditTransaction, UserCredit
from photo_editor.models.photo_session import PhotoSession
from photo_editor.models.photo_task import PhotoTask

# Do NOT import Base here to avoid conflicts with photo_editor.db.base.Base
# All models should import Base directly from photo_editor.db.base

__all__ = [
    "PhotoSession",
    "PhotoTask",
    "UserCredit",
    "CreditTransaction",
]
