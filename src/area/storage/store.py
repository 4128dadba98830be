from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from area.models.db import Credential, Hook, Provider, Reaction
from area.storage import repository


class SqlAutomationStore:
    """Hook registry, reaction resolver and credential resolver over the database.

    Each read opens its own short-lived session so concurrent lookups from
    one event never share a session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = session_factory

    async def find_hooks_by_external_id(self, provider: Provider, external_id: str) -> list[Hook]:
        async with self._factory() as session:
            hooks = await repository.find_hooks_by_external_id(session, provider, external_id)
        # Set semantics, keeping the first occurrence of each hook
        unique: dict[int, Hook] = {}
        for hook in hooks:
            unique.setdefault(hook.id, hook)
        return list(unique.values())

    async def find_reactions_by_hook_id(self, hook_id: int) -> list[Reaction]:
        async with self._factory() as session:
            return await repository.find_reactions_by_hook_id(session, hook_id)

    async def get_credential(self, user_id: int, provider: Provider) -> Credential | None:
        async with self._factory() as session:
            return await repository.get_credential(session, user_id, provider)
