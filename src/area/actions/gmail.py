from __future__ import annotations

import base64
from email.message import EmailMessage
from typing import Any

from area.actions.base import HttpActionInvoker, require
from area.models.db import Provider
from area.models.schemas import ConfigValue

GMAIL_API_URL = "https://gmail.googleapis.com/gmail/v1"


def build_raw_message(to: str, subject: str, body: str) -> str:
    """RFC 2822 message encoded as the base64url ``raw`` field Gmail expects."""
    message = EmailMessage()
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


class SendEmail(HttpActionInvoker):
    provider = Provider.GMAIL
    default_base_url = GMAIL_API_URL

    def build_request(self, config: dict[str, ConfigValue]) -> tuple[str, dict[str, Any]]:
        raw = build_raw_message(
            to=str(require(config, "to")),
            subject=str(config.get("subject") or ""),
            body=str(config.get("body") or ""),
        )
        return "/users/me/messages/send", {"raw": raw}

    def summarize(self, data: dict[str, Any]) -> dict[str, Any]:
        return {"id": data.get("id"), "thread_id": data.get("threadId")}
