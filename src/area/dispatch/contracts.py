"""Read-side contracts the dispatch engine consumes.

The engine is constructed with one object per contract. The SQL-backed
implementation lives in ``area.storage.store``; tests use in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from area.models.db import Credential, Hook, Provider, Reaction


class HookRegistry(Protocol):
    async def find_hooks_by_external_id(self, provider: Provider, external_id: str) -> list[Hook]:
        """Hooks registered under a provider's webhook id. Empty when nothing matches."""
        ...


class ReactionResolver(Protocol):
    async def find_reactions_by_hook_id(self, hook_id: int) -> list[Reaction]:
        """Reactions of a hook in declaration order. Empty when the hook has none."""
        ...


class CredentialResolver(Protocol):
    async def get_credential(self, user_id: int, provider: Provider) -> Credential | None:
        """The user's credential for a provider, or None when the provider is not linked."""
        ...
