# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""HTTP client for the photo editor API."""

from typing import Any, Dict, List, Optional

import requests

API_PREFIX = "/api/ai-photo-editor"


class APIError(Exception):
    """Non-success response from the API"""

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: Optional[str] = None,
        body: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.error_code = error_code
        self.body = body or {}
        super().__init__(f"{status_code} {error_code or ''} {message}".strip())

    @property
    def retryable(self) -> bool:
        return self.status_code >= 500


class TaskNotFoundError(APIError):
    """The task does not exist or belongs to someone else"""


class PhotoEditorClient:
    def __init__(
        self,
        server: str,
        token: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.server = server.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        response = self.session.request(
            method,
            f"{self.server}{path}",
            headers=self._headers(),
            timeout=self.timeout,
            **kwargs,
        )
        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            error_code = data.get("errorCode") if isinstance(data, dict) else None
            raise APIError(
                response.status_code,
                message or response.text or response.reason,
                error_code,
                data if isinstance(data, dict) else None,
            )
        return data

    def create_session(self) -> Dict[str, Any]:
        """Returns {"sessionId": ..., "isNew": ...}"""
        return self._request("POST", f"{API_PREFIX}/sessions")

    def list_sessions(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit else None
        return self._request("GET", f"{API_PREFIX}/sessions", params=params)[
            "sessions"
        ]

    def list_session_tasks(self, session_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"{API_PREFIX}/sessions/{session_id}/tasks")[
            "tasks"
        ]

    def process(
        self,
        session_id: str,
        prompt: str,
        model_id: str,
        input_images: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Dispatch a generation; returns {"taskId": ..., "warnings": [...]}"""
        payload = {"sessionId": session_id, "prompt": prompt, "modelId": model_id}
        if input_images:
            payload["inputImages"] = input_images
        return self._request("POST", f"{API_PREFIX}/process", json=payload)

    def get_task(self, task_id: str) -> Dict[str, Any]:
        try:
            return self._request("GET", f"{API_PREFIX}/tasks/{task_id}")["task"]
        except APIError as e:
            if e.status_code == 404:
                raise TaskNotFoundError(
                    e.status_code, e.message, e.error_code, e.body
                ) from e
            raise

    def list_models(self) -> Dict[str, Any]:
        return self._request("GET", f"{API_PREFIX}/models")
