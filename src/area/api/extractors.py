"""Per-provider extraction of the external webhook id and event payload."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
from typing import Any, Callable, Mapping

from area.models.db import Provider

# (headers, body) -> (external webhook id or None, payload)
Extractor = Callable[[Mapping[str, str], dict[str, Any]], tuple[str | None, dict[str, Any]]]


def validate_github_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Validate GitHub's X-Hub-Signature-256 HMAC-SHA256 signature."""
    if not signature:
        return False
    expected = "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    # Header values are decoded as latin-1, so the signature may not be ASCII
    return hmac.compare_digest(expected.encode(), signature.encode("utf-8", "replace"))


def _generic(headers: Mapping[str, str], body: dict[str, Any]) -> tuple[str | None, dict[str, Any]]:
    hook_id = headers.get("x-hook-id") or body.get("hook_id")
    return (str(hook_id) if hook_id else None), body


def _github(headers: Mapping[str, str], body: dict[str, Any]) -> tuple[str | None, dict[str, Any]]:
    hook_id = headers.get("x-github-hook-id")
    if not hook_id:
        return _generic(headers, body)
    return hook_id, body


def _gmail(headers: Mapping[str, str], body: dict[str, Any]) -> tuple[str | None, dict[str, Any]]:
    """Gmail notifications arrive as Pub/Sub push messages keyed by subscription."""
    message = body.get("message")
    subscription = body.get("subscription")
    if not isinstance(message, dict) or not subscription:
        return _generic(headers, body)

    payload: dict[str, Any] = {}
    data = message.get("data")
    if data:
        try:
            decoded = json.loads(base64.b64decode(data))
        except (binascii.Error, ValueError):
            decoded = None
        if isinstance(decoded, dict):
            payload.update(decoded)
    payload["message_id"] = message.get("messageId") or message.get("message_id")
    payload["attributes"] = message.get("attributes") or {}
    return str(subscription), payload


EXTRACTORS: dict[Provider, Extractor] = {
    Provider.GITHUB: _github,
    Provider.GMAIL: _gmail,
}


def extract_event(
    provider: Provider,
    headers: Mapping[str, str],
    body: dict[str, Any],
) -> tuple[str | None, dict[str, Any]]:
    extractor = EXTRACTORS.get(provider, _generic)
    return extractor(headers, body)
