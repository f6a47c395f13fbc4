# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Catalogue of image models available to the photo editor.

Each entry fixes the credit cost of one generation and the provider
implementation used to run it (see services.providers.factory).
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class AIModel:
    id: str
    name: str
    vendor: str
    credits_per_use: int
    max_images: int = 1
    description: str = ""
    # Registered provider name; None means settings.AI_DEFAULT_PROVIDER
    provider: Optional[str] = None


AVAILABLE_MODELS: List[AIModel] = [
    AIModel(
        id="google/nano-banana",
        name="Nano Banana",
        vendor="Google",
        credits_per_use=8,
        max_images=1,
        description="Efficient image model tuned for conversational editing",
    ),
    AIModel(
        id="bytedance/seedream-4",
        name="SeeDream 4",
        vendor="ByteDance",
        credits_per_use=12,
        max_images=1,
        description="High quality image generation and editing",
    ),
]

DEFAULT_MODEL_ID = "google/nano-banana"


def get_model_config(model_id: str) -> Optional[AIModel]:
    for model in AVAILABLE_MODELS:
        if model.id == model_id:
            return model
    return None


def get_all_models() -> List[AIModel]:
    return list(AVAILABLE_MODELS)


def get_affordable_models(user_credits: int) -> List[AIModel]:
    """Models whose per-use cost fits within the given balance"""
    return [m for m in AVAILABLE_MODELS if m.credits_per_use <= user_credits]
