from __future__ import annotations

from area.actions import discord, github, gmail, slack
from area.dispatch.table import ActionDispatchTable


def default_dispatch_table() -> ActionDispatchTable:
    """Every built-in reaction type. New reaction types are added here."""
    return ActionDispatchTable({
        "github.create_issue": github.CreateIssue(),
        "github.create_comment": github.CreateComment(),
        "discord.send_message": discord.SendMessage(),
        "gmail.send_email": gmail.SendEmail(),
        "slack.post_message": slack.PostMessage(),
    })
