from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from enum import Enum

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Provider(str, Enum):
    GITHUB = "github"
    DISCORD = "discord"
    GMAIL = "gmail"
    SLACK = "slack"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Hook(SQLModel, table=True):
    __tablename__ = "hooks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    provider: str = Field(index=True)
    external_id: str = Field(index=True)  # webhook id issued by the provider
    created_at: datetime = Field(default_factory=_utcnow)


class Reaction(SQLModel, table=True):
    __tablename__ = "reactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    hook_id: int = Field(foreign_key="hooks.id", index=True)
    reaction_type: str  # e.g. "discord.send_message"
    config: str = "{}"  # JSON object stored as string
    created_at: datetime = Field(default_factory=_utcnow)


class Credential(SQLModel, table=True):
    __tablename__ = "credentials"
    __table_args__ = (UniqueConstraint("user_id", "provider"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    provider: str
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=_utcnow)
