# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Test doubles for the AI provider and the asset persister."""

from typing import List, Optional

from photo_editor.services.providers import (
    AIService,
    ProviderError,
    ProviderJob,
    ProviderJobStatus,
    SubmitJobRequest,
)


class FakeAIService(AIService):
    """In-memory provider recording submitted jobs"""

    def __init__(self):
        self.submitted: List[SubmitJobRequest] = []
        self.submit_error: Optional[Exception] = None
        self.submit_status = ProviderJobStatus.STARTING
        self.jobs = {}
        self.query_error: Optional[ProviderError] = None

    @property
    def provider_name(self) -> str:
        return "Fake"

    def submit(self, request: SubmitJobRequest) -> ProviderJob:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(request)
        job = ProviderJob(id=f"pred-{len(self.submitted)}", status=self.submit_status)
        self.jobs[job.id] = job
        return job

    def query_status(self, job_id: str) -> ProviderJob:
        if self.query_error is not None:
            raise self.query_error
        return self.jobs[job_id]


class FakePersister:
    """Asset persister that never touches the network"""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.persisted: List[str] = []

    def persist(self, source_url: str) -> str:
        if self.error is not None:
            raise self.error
        self.persisted.append(source_url)
        return f"https://cdn.example.com/ai-photo-editor/{len(self.persisted)}.png"
