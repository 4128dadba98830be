from __future__ import annotations

from typing import Any

from area.actions.base import HttpActionInvoker, require
from area.dispatch.table import ActionError
from area.models.db import Provider
from area.models.schemas import ConfigValue

SLACK_API_URL = "https://slack.com/api"


class PostMessage(HttpActionInvoker):
    provider = Provider.SLACK
    default_base_url = SLACK_API_URL

    def build_request(self, config: dict[str, ConfigValue]) -> tuple[str, dict[str, Any]]:
        body: dict[str, Any] = {
            "channel": require(config, "channel"),
            "text": require(config, "text"),
        }
        if isinstance(config.get("blocks"), list):
            body["blocks"] = config["blocks"]
        return "/chat.postMessage", body

    def summarize(self, data: dict[str, Any]) -> dict[str, Any]:
        # Slack reports API errors in a 200 response
        if not data.get("ok"):
            raise ActionError(f"Slack API error: {data.get('error', 'unknown_error')}", status=200)
        return {"channel": data.get("channel"), "ts": data.get("ts")}
