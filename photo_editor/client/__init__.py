# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Client for the photo editor API: HTTP client, task poller and CLI."""

from photo_editor.client.api_client import APIError, PhotoEditorClient, TaskNotFoundError
from photo_editor.client.poller import PollOutcome, PollResult, TaskPoller

__all__ = [
    "APIError",
    "PhotoEditorClient",
    "TaskNotFoundError",
    "PollOutcome",
    "PollResult",
    "TaskPoller",
]
