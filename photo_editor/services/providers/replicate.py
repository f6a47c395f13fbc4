# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Replicate prediction API client.

Official models are run through ``POST /models/{owner}/{name}/predictions``;
ids pinned to a version (``owner/name:version``) go through
``POST /predictions`` with the version hash.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from photo_editor.services.providers.base import (
    AIService,
    ProviderError,
    ProviderJob,
    ProviderJobStatus,
    SubmitJobRequest,
)

logger = logging.getLogger(__name__)


def normalize_output(output: Any) -> List[str]:
    """Replicate returns a single URL or a list of URLs depending on the model"""
    if not output:
        return []
    if isinstance(output, str):
        return [output]
    if isinstance(output, (list, tuple)):
        return [item for item in output if isinstance(item, str) and item]
    return []


def normalize_error(error: Any) -> Optional[str]:
    if error is None or error == "":
        return None
    if isinstance(error, dict):
        return str(error.get("detail") or error.get("message") or error)
    return str(error)


def prediction_to_job(data: Dict[str, Any]) -> ProviderJob:
    return ProviderJob(
        id=str(data.get("id") or ""),
        status=ProviderJobStatus.parse(data.get("status")),
        output=normalize_output(data.get("output")),
        error=normalize_error(data.get("error")),
        raw=data,
    )


class ReplicateService(AIService):
    """Replicate implementation of the provider interface"""

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://api.replicate.com/v1",
        timeout: float = 60.0,
        http_client: Optional[httpx.Client] = None,
    ):
        if not api_token:
            raise ProviderError("REPLICATE_API_TOKEN is required for Replicate")
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client

    @property
    def provider_name(self) -> str:
        return "Replicate"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            if self._client is not None:
                response = self._client.request(
                    method, url, headers=self._headers(), timeout=self.timeout, **kwargs
                )
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.request(
                        method, url, headers=self._headers(), **kwargs
                    )
        except httpx.HTTPError as e:
            raise ProviderError(f"Replicate API unreachable: {e}") from e

        if not response.is_success:
            raise ProviderError(
                f"Replicate API error: {self._error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError("Replicate API returned an invalid JSON body") from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Prefer the provider's detail field, fall back to the status text"""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("detail"):
            return str(body["detail"])
        return response.reason_phrase or f"HTTP {response.status_code}"

    def build_payload(self, request: SubmitJobRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "input": {
                "prompt": request.prompt,
                "num_outputs": 1,
            }
        }
        if request.input_images:
            # Models behind this integration accept a single input image
            payload["input"]["image"] = request.input_images[0]

        if ":" in request.model_id:
            payload["version"] = request.model_id.split(":", 1)[1]

        if request.callback_url:
            payload["webhook"] = request.callback_url
            payload["webhook_events_filter"] = ["completed"]
        return payload

    @staticmethod
    def _submit_path(model_id: str) -> str:
        if ":" in model_id:
            return "/predictions"
        return f"/models/{model_id}/predictions"

    def submit(self, request: SubmitJobRequest) -> ProviderJob:
        payload = self.build_payload(request)
        logger.info(
            f"[Replicate] Creating prediction: model={request.model_id}, "
            f"has_image={'image' in payload['input']}, "
            f"has_webhook={'webhook' in payload}"
        )
        data = self._request("POST", self._submit_path(request.model_id), json=payload)
        job = prediction_to_job(data)
        if not job.id:
            raise ProviderError("Replicate API response is missing the prediction id")
        logger.info(f"[Replicate] Prediction created: id={job.id}, status={job.status.value}")
        return job

    def query_status(self, job_id: str) -> ProviderJob:
        data = self._request("GET", f"/predictions/{job_id}")
        return prediction_to_job(data)
