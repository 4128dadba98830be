from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any

import structlog
import httpx

from area.config import get_settings
from area.dispatch.table import ActionError, ActionResult
from area.models.db import Credential, Provider
from area.models.schemas import ConfigValue

logger = structlog.get_logger()

MAX_ERROR_BODY_CHARS = 500


def require(config: dict[str, ConfigValue], key: str) -> Any:
    """Fetch a required action parameter, failing the action when it is absent or blank."""
    value = config.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ActionError(f"Missing required parameter '{key}'")
    return value


def path_segment(config: dict[str, ConfigValue], key: str, pattern: re.Pattern) -> str:
    """A required parameter that is interpolated into the request path.

    Values can come from the event payload, so anything outside ``pattern``
    (slashes, dot segments, query strings) fails the action.
    """
    value = str(require(config, key))
    if not pattern.fullmatch(value) or value in (".", ".."):
        raise ActionError(f"Invalid {key}: {value!r}")
    return value


def interpret_response(resp: httpx.Response) -> dict[str, Any] | None:
    """Map a provider response onto the action envelope.

    204 → None (caller reports a generic success marker). Any non-2xx raises
    ActionError with the status and a truncated body. Otherwise the decoded
    JSON body, or an empty dict when the body is not JSON.
    """
    if resp.status_code == 204:
        return None
    if not resp.is_success:
        raise ActionError(
            f"{resp.request.method} {resp.request.url.path} returned {resp.status_code}",
            status=resp.status_code,
            body=resp.text[:MAX_ERROR_BODY_CHARS],
        )
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"data": data}


class HttpActionInvoker(ABC):
    """One provider API call performed with the user's access token.

    Subclasses set ``provider``, ``default_base_url`` and implement
    ``build_request`` and ``summarize``.
    """

    provider: Provider
    default_base_url: str = ""
    method: str = "POST"
    auth_scheme: str = "Bearer"
    timeout: float = 15.0

    def base_url(self) -> str:
        return get_settings().provider_base_url(self.provider.value, self.default_base_url).rstrip("/")

    def headers(self, credential: Credential) -> dict[str, str]:
        return {"Authorization": f"{self.auth_scheme} {credential.access_token}"}

    @abstractmethod
    def build_request(self, config: dict[str, ConfigValue]) -> tuple[str, dict[str, Any]]:
        """Return (path, json body) for the call."""

    def summarize(self, data: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def invoke(self, credential: Credential, config: dict[str, ConfigValue]) -> ActionResult:
        path, body = self.build_request(config)
        url = f"{self.base_url()}{path}"

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.request(self.method, url, json=body, headers=self.headers(credential))

        data = interpret_response(resp)
        if data is None:
            return ActionResult(summary={"status": "ok"})

        summary = self.summarize(data)
        logger.debug("action_invoked", provider=self.provider.value, url=url, status=resp.status_code)
        return ActionResult(summary=summary)
