# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Client-side task poller.

Polls the task status endpoint at a fixed interval until the task is
terminal, the attempt budget runs out or stop() is called. Reaching the
budget only ends the wait: the task may still complete on the server.
stop() never cancels the server task or the provider job.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import requests

from photo_editor.client.api_client import APIError, PhotoEditorClient, TaskNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5.0
DEFAULT_MAX_ATTEMPTS = 60
DEFAULT_INITIAL_DELAY = 2.0


class PollOutcome(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    STOPPED = "stopped"


@dataclass
class PollResult:
    outcome: PollOutcome
    task: Optional[Dict[str, Any]] = None
    attempts: int = 0

    @property
    def output_image_url(self) -> Optional[str]:
        return (self.task or {}).get("outputImageUrl")

    @property
    def error_message(self) -> Optional[str]:
        return (self.task or {}).get("errorMessage")


class TaskPoller:
    def __init__(
        self,
        client: PhotoEditorClient,
        interval: float = DEFAULT_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        on_update: Optional[Callable[[Dict[str, Any]], None]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.client = client
        self.interval = interval
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.on_update = on_update
        self._sleep = sleep
        self._stop_event = threading.Event()

    def stop(self) -> None:
        """Stop waiting for the task; safe to call from another thread"""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def _wait(self, seconds: float) -> bool:
        """Wait for seconds; returns True when stop() was called"""
        if seconds <= 0:
            return self.stopped
        if self._sleep is not None:
            self._sleep(seconds)
            return self.stopped
        return self._stop_event.wait(seconds)

    def poll(self, task_id: str) -> PollResult:
        """
        Wait for task_id to reach a terminal status.

        Raises:
            APIError: a non-retryable error such as 401
        """
        if self._wait(self.initial_delay):
            return PollResult(PollOutcome.STOPPED)

        last_task = None
        for attempt in range(1, self.max_attempts + 1):
            if self.stopped:
                return PollResult(PollOutcome.STOPPED, last_task, attempt - 1)

            try:
                task = self.client.get_task(task_id)
            except TaskNotFoundError:
                return PollResult(PollOutcome.NOT_FOUND, None, attempt)
            except APIError as e:
                if not e.retryable:
                    raise
                logger.warning(f"Polling task {task_id} failed, retrying: {e}")
            except requests.RequestException as e:
                logger.warning(f"Polling task {task_id} failed, retrying: {e}")
            else:
                last_task = task
                if self.on_update is not None:
                    self.on_update(task)
                status = task.get("status")
                if status == "completed":
                    return PollResult(PollOutcome.COMPLETED, task, attempt)
                if status == "failed":
                    return PollResult(PollOutcome.FAILED, task, attempt)

            if attempt < self.max_attempts and self._wait(self.interval):
                return PollResult(PollOutcome.STOPPED, last_task, attempt)

        logger.info(
            f"Stopped polling task {task_id} after {self.max_attempts} attempts"
        )
        return PollResult(PollOutcome.TIMEOUT, last_task, self.max_attempts)
