from __future__ import annotations

import asyncio
import os
from typing import Any

import pytest

from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from httpx import AsyncClient, ASGITransport

# Override settings before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["WEBHOOK_SECRET"] = ""
os.environ["GITHUB_WEBHOOK_SECRET"] = ""

from area.main import app
from area.api.webhooks import get_dispatch_engine
from area.actions.catalog import default_dispatch_table
from area.dispatch.engine import AutomationDispatchEngine
from area.dispatch.table import ActionResult
from area.models.db import Credential, Hook, Provider, Reaction
from area.storage.database import get_session
from area.storage.store import SqlAutomationStore


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as session:
            yield session

    def override_engine():
        store = SqlAutomationStore(session_factory)
        return AutomationDispatchEngine(store, store, store, default_dispatch_table(), timeout=5.0)

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_dispatch_engine] = override_engine

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class InMemoryStore:
    """Hook registry, reaction resolver and credential resolver backed by plain lists."""

    def __init__(self) -> None:
        self.hooks: list[Hook] = []
        self.reactions: list[Reaction] = []
        self.credentials: dict[tuple[int, str], Credential] = {}
        self.credential_lookups = 0

    def add_hook(self, user_id: int, provider: Provider, external_id: str) -> Hook:
        hook = Hook(id=len(self.hooks) + 1, user_id=user_id, provider=provider.value, external_id=external_id)
        self.hooks.append(hook)
        return hook

    def add_reaction(self, hook: Hook, reaction_type: str, config: str = "{}") -> Reaction:
        reaction = Reaction(
            id=len(self.reactions) + 1,
            hook_id=hook.id,
            reaction_type=reaction_type,
            config=config,
        )
        self.reactions.append(reaction)
        return reaction

    def link(self, user_id: int, provider: Provider, token: str = "token") -> None:
        self.credentials[(user_id, provider.value)] = Credential(
            user_id=user_id, provider=provider.value, access_token=token
        )

    async def find_hooks_by_external_id(self, provider: Provider, external_id: str) -> list[Hook]:
        return [h for h in self.hooks if h.provider == provider.value and h.external_id == external_id]

    async def find_reactions_by_hook_id(self, hook_id: int) -> list[Reaction]:
        return [r for r in self.reactions if r.hook_id == hook_id]

    async def get_credential(self, user_id: int, provider: Provider) -> Credential | None:
        self.credential_lookups += 1
        return self.credentials.get((user_id, provider.value))


class RecordingInvoker:
    """Invoker double that records calls and can be slowed down or made to fail."""

    def __init__(
        self,
        provider: Provider,
        delay: float = 0.0,
        error: Exception | None = None,
        on_invoke=None,
        name: str = "",
    ) -> None:
        self.provider = provider
        self.delay = delay
        self.error = error
        self.on_invoke = on_invoke
        self.name = name
        self.calls: list[tuple[Credential, dict[str, Any]]] = []

    async def invoke(self, credential: Credential, config: dict[str, Any]) -> ActionResult:
        self.calls.append((credential, config))
        if self.on_invoke is not None:
            self.on_invoke(self)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ActionResult(summary={"invoker": self.name, "config": config})


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def make_invoker():
    def factory(provider: Provider = Provider.DISCORD, **kwargs) -> RecordingInvoker:
        return RecordingInvoker(provider, **kwargs)

    return factory
