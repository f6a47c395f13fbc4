# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Verification of signed provider webhooks.

Replicate signs deliveries the Standard Webhooks way: an HMAC-SHA256 over
"{webhook-id}.{webhook-timestamp}.{body}" keyed with the base64 part of the
"whsec_" secret, sent as space separated "v1,<base64>" entries.
"""

import base64
import binascii
import hashlib
import hmac
import time
from typing import Mapping, Optional

SECRET_PREFIX = "whsec_"


class WebhookSignatureError(Exception):
    """The delivery is not signed by the configured secret"""


def _secret_bytes(secret: str) -> bytes:
    if secret.startswith(SECRET_PREFIX):
        try:
            return base64.b64decode(secret[len(SECRET_PREFIX):])
        except (binascii.Error, ValueError) as e:
            raise WebhookSignatureError("Webhook secret is not valid base64") from e
    return secret.encode("utf-8")


def compute_signature(secret: str, webhook_id: str, timestamp: str, body: bytes) -> str:
    signed_content = f"{webhook_id}.{timestamp}.".encode("utf-8") + body
    digest = hmac.new(_secret_bytes(secret), signed_content, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_webhook_signature(
    secret: str,
    headers: Mapping[str, str],
    body: bytes,
    tolerance_seconds: int = 300,
    now: Optional[float] = None,
) -> None:
    """
    Raises:
        WebhookSignatureError: headers are missing, stale or do not match
    """
    webhook_id = headers.get("webhook-id")
    timestamp = headers.get("webhook-timestamp")
    signature_header = headers.get("webhook-signature")
    if not webhook_id or not timestamp or not signature_header:
        raise WebhookSignatureError("Missing webhook signature headers")

    try:
        sent_at = int(timestamp)
    except ValueError as e:
        raise WebhookSignatureError("Invalid webhook timestamp") from e

    current = time.time() if now is None else now
    if abs(current - sent_at) > tolerance_seconds:
        raise WebhookSignatureError("Webhook timestamp outside the tolerance window")

    expected = compute_signature(secret, webhook_id, timestamp, body)
    for entry in signature_header.split():
        _, _, candidate = entry.partition(",")
        if candidate and hmac.compare_digest(candidate, expected):
            return
    raise WebhookSignatureError("Webhook signature mismatch")
