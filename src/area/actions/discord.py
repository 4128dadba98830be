from __future__ import annotations

import re
from typing import Any

from area.actions.base import HttpActionInvoker, path_segment, require
from area.models.db import Provider
from area.models.schemas import ConfigValue

DISCORD_API_URL = "https://discord.com/api/v10"

# Discord rejects message content longer than this
MAX_CONTENT_CHARS = 2000

SNOWFLAKE = re.compile(r"[0-9]{1,20}")


def _truncate(text: str, max_len: int) -> str:
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


class SendMessage(HttpActionInvoker):
    provider = Provider.DISCORD
    default_base_url = DISCORD_API_URL
    auth_scheme = "Bot"

    def build_request(self, config: dict[str, ConfigValue]) -> tuple[str, dict[str, Any]]:
        channel_id = path_segment(config, "channel_id", SNOWFLAKE)
        content = _truncate(str(require(config, "content")), MAX_CONTENT_CHARS)
        return f"/channels/{channel_id}/messages", {"content": content}

    def summarize(self, data: dict[str, Any]) -> dict[str, Any]:
        return {"id": data.get("id"), "channel_id": data.get("channel_id")}
