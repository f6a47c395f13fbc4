# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
AI provider abstraction for asynchronous image generation jobs.

A provider accepts a job, returns its own job id right away and reports the
outcome later, either by calling the webhook attached to the job or when
queried with query_status().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

WEBHOOK_TASK_ID_PARAM = "taskId"


class ProviderJobStatus(str, Enum):
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @classmethod
    def parse(cls, value: Any) -> "ProviderJobStatus":
        """Map a raw provider status string; unknown values count as processing"""
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.PROCESSING

    @property
    def is_terminal(self) -> bool:
        return self in (
            ProviderJobStatus.SUCCEEDED,
            ProviderJobStatus.FAILED,
            ProviderJobStatus.CANCELED,
        )


class ProviderError(Exception):
    """The provider rejected a request or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class SubmitJobRequest:
    prompt: str
    model_id: str
    input_images: List[str] = field(default_factory=list)
    callback_url: Optional[str] = None


@dataclass
class ProviderJob:
    """Provider-side view of a job, normalized across providers"""

    id: str
    status: ProviderJobStatus
    output: List[str] = field(default_factory=list)
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class AIService(ABC):
    """Interface every generation provider implements"""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human readable provider name"""

    @abstractmethod
    def submit(self, request: SubmitJobRequest) -> ProviderJob:
        """
        Submit a generation job.

        Only the first entry of request.input_images is forwarded.

        Raises:
            ProviderError: the provider rejected the job
        """

    @abstractmethod
    def query_status(self, job_id: str) -> ProviderJob:
        """
        Fetch the current state of a job.

        Raises:
            ProviderError: the provider could not be queried
        """


def build_webhook_url(base_url: Optional[str], task_id: str) -> Optional[str]:
    """
    Build the completion callback address for a task.

    The internal task id rides along as the taskId query parameter, which is
    how the webhook receiver correlates the callback. Returns None when no
    base URL is configured.
    """
    if not base_url:
        return None

    parts = urlsplit(base_url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != WEBHOOK_TASK_ID_PARAM
    ]
    query.append((WEBHOOK_TASK_ID_PARAM, task_id))
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment)
    )
