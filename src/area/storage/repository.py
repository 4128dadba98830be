from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func

from area.models.db import Credential, Hook, Provider, Reaction


async def find_hooks_by_external_id(
    session: AsyncSession,
    provider: Provider,
    external_id: str,
) -> list[Hook]:
    result = await session.execute(
        select(Hook)
        .where(Hook.provider == provider.value, Hook.external_id == external_id)
        .order_by(Hook.id)
    )
    return list(result.scalars().all())


async def find_reactions_by_hook_id(session: AsyncSession, hook_id: int) -> list[Reaction]:
    """Reactions of a hook in declaration (insertion) order."""
    result = await session.execute(
        select(Reaction).where(Reaction.hook_id == hook_id).order_by(Reaction.id)
    )
    return list(result.scalars().all())


async def get_credential(session: AsyncSession, user_id: int, provider: Provider) -> Credential | None:
    result = await session.execute(
        select(Credential).where(
            Credential.user_id == user_id,
            Credential.provider == provider.value,
        )
    )
    return result.scalars().first()


async def get_hooks_count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Hook.id)))
    return result.scalar_one()


async def get_reactions_count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Reaction.id)))
    return result.scalar_one()


# Management-side writes. The dispatch engine never calls these; they back the
# seed script and the test fixtures.


async def create_hook(session: AsyncSession, user_id: int, provider: Provider, external_id: str) -> Hook:
    hook = Hook(user_id=user_id, provider=provider.value, external_id=external_id)
    session.add(hook)
    await session.commit()
    await session.refresh(hook)
    return hook


async def create_reaction(
    session: AsyncSession,
    hook_id: int,
    reaction_type: str,
    config: dict[str, Any] | None = None,
) -> Reaction:
    reaction = Reaction(hook_id=hook_id, reaction_type=reaction_type, config=json.dumps(config or {}))
    session.add(reaction)
    await session.commit()
    await session.refresh(reaction)
    return reaction


async def save_credential(
    session: AsyncSession,
    user_id: int,
    provider: Provider,
    access_token: str,
    refresh_token: str | None = None,
    expires_at: datetime | None = None,
) -> Credential:
    """Insert or replace the user's credential for a provider."""
    credential = await get_credential(session, user_id, provider)
    if credential is None:
        credential = Credential(user_id=user_id, provider=provider.value, access_token=access_token)
    credential.access_token = access_token
    credential.refresh_token = refresh_token
    credential.expires_at = expires_at
    credential.updated_at = datetime.now(timezone.utc)
    session.add(credential)
    await session.commit()
    await session.refresh(credential)
    return credential
