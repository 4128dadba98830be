from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, TypeVar

import structlog

from area.dispatch.contracts import CredentialResolver, HookRegistry, ReactionResolver
from area.dispatch.table import ActionDispatchTable, ActionError, UnknownReactionType
from area.dispatch.templating import substitute
from area.models.db import Hook, Provider, Reaction
from area.models.schemas import ConfigValue, ExecutionReport, OutcomeKind, ReactionOutcome

logger = structlog.get_logger()

T = TypeVar("T")


def _coerce_provider(provider: Provider | str) -> Provider:
    if isinstance(provider, Provider):
        return provider
    try:
        return Provider(provider)
    except ValueError:
        raise ValueError(f"Unknown provider identifier: {provider!r}") from None


def _load_config(reaction: Reaction) -> dict[str, ConfigValue]:
    config = json.loads(reaction.config or "{}")
    if not isinstance(config, dict):
        raise ValueError(f"Reaction config must be a JSON object, got {type(config).__name__}")
    return config


async def _bounded(awaitable: Awaitable[T], timeout: float | None) -> T:
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout)


class AutomationDispatchEngine:
    """Fans an inbound event out to the reactions bound to its hooks.

    Each reaction is its own failure boundary: credential lookups, template
    substitution and action calls that fail are recorded in the report and
    never stop sibling reactions. A hook whose reactions cannot be loaded is
    logged and skipped without affecting the other hooks. Outcomes are
    reported in declaration order whatever order they complete in.
    """

    def __init__(
        self,
        hooks: HookRegistry,
        reactions: ReactionResolver,
        credentials: CredentialResolver,
        table: ActionDispatchTable,
        *,
        max_concurrency: int = 4,
        timeout: float | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._hooks = hooks
        self._reactions = reactions
        self._credentials = credentials
        self._table = table
        self._max_concurrency = max_concurrency
        self._timeout = timeout

    async def handle_event(
        self,
        provider: Provider | str,
        external_webhook_id: str,
        payload: ConfigValue,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> ExecutionReport:
        """Run every reaction bound to ``external_webhook_id`` against ``payload``.

        ``cancel`` skips reactions that have not started yet once it is set;
        reactions already running finish and keep their real outcome.
        ``timeout`` bounds each credential lookup and each action call and
        falls back to the engine's default.

        Raises ValueError for an unknown provider or an empty webhook id.
        Business-level failures never raise.
        """
        provider = _coerce_provider(provider)
        if not external_webhook_id:
            raise ValueError("external_webhook_id must be a non-empty string")
        timeout = self._timeout if timeout is None else timeout

        report = ExecutionReport(provider=provider.value, external_webhook_id=external_webhook_id)

        hooks = await self._hooks.find_hooks_by_external_id(provider, external_webhook_id)
        if not hooks:
            logger.info("no_matching_hook", provider=provider.value, external_webhook_id=external_webhook_id)
            report.no_matching_hook = True
            return report

        hooks = sorted(hooks, key=lambda h: h.id or 0)
        batches = await asyncio.gather(*(self._resolve_reactions(hook) for hook in hooks))
        jobs = [(hook, reaction) for hook, reactions in zip(hooks, batches) for reaction in reactions]

        logger.info(
            "event_dispatch",
            provider=provider.value,
            external_webhook_id=external_webhook_id,
            hooks=len(hooks),
            reactions=len(jobs),
        )

        semaphore = asyncio.Semaphore(self._max_concurrency)
        outcomes = await asyncio.gather(
            *(self._run(hook, reaction, payload, semaphore, cancel, timeout) for hook, reaction in jobs)
        )
        report.outcomes = list(outcomes)
        return report

    async def _resolve_reactions(self, hook: Hook) -> list[Reaction]:
        # A hook whose reactions cannot be read contributes none
        try:
            return list(await self._reactions.find_reactions_by_hook_id(hook.id))
        except Exception as e:
            logger.warning(
                "reaction_lookup_failed",
                hook_id=hook.id,
                user_id=hook.user_id,
                error=f"{type(e).__name__}: {e}",
            )
            return []

    async def _run(
        self,
        hook: Hook,
        reaction: Reaction,
        payload: ConfigValue,
        semaphore: asyncio.Semaphore,
        cancel: asyncio.Event | None,
        timeout: float | None,
    ) -> ReactionOutcome:
        async with semaphore:
            if cancel is not None and cancel.is_set():
                return _outcome(hook, reaction, OutcomeKind.CANCELLED)
            return await self._execute(hook, reaction, payload, timeout)

    async def _execute(
        self,
        hook: Hook,
        reaction: Reaction,
        payload: ConfigValue,
        timeout: float | None,
    ) -> ReactionOutcome:
        try:
            invoker = self._table.resolve(reaction.reaction_type)
        except UnknownReactionType as e:
            return _outcome(hook, reaction, OutcomeKind.UNKNOWN_REACTION_TYPE, {"error": str(e)})

        target = invoker.provider
        try:
            credential = await _bounded(self._credentials.get_credential(hook.user_id, target), timeout)
        except asyncio.TimeoutError:
            return _outcome(
                hook,
                reaction,
                OutcomeKind.ACTION_FAILED,
                {"error": "credential lookup timed out", "timeout": True},
            )
        except Exception as e:
            return _outcome(
                hook,
                reaction,
                OutcomeKind.ACTION_FAILED,
                {"error": f"credential lookup failed: {type(e).__name__}: {e}"[:500]},
            )

        if credential is None:
            return _outcome(hook, reaction, OutcomeKind.PROVIDER_NOT_LINKED, {"provider": target.value})

        try:
            config = substitute(_load_config(reaction), payload)
            result = await _bounded(invoker.invoke(credential, config), timeout)
            summary = dict(result.summary)
        except asyncio.TimeoutError:
            return _outcome(
                hook,
                reaction,
                OutcomeKind.ACTION_FAILED,
                {"error": "action timed out", "timeout": True},
            )
        except ActionError as e:
            return _outcome(hook, reaction, OutcomeKind.ACTION_FAILED, e.to_detail())
        except Exception as e:
            return _outcome(
                hook,
                reaction,
                OutcomeKind.ACTION_FAILED,
                {"error": f"{type(e).__name__}: {e}"[:500]},
            )

        return _outcome(hook, reaction, OutcomeKind.SUCCESS, summary)


def _outcome(
    hook: Hook,
    reaction: Reaction,
    kind: OutcomeKind,
    detail: dict[str, Any] | None = None,
) -> ReactionOutcome:
    return ReactionOutcome(
        reaction_id=reaction.id,
        hook_id=hook.id,
        reaction_type=reaction.reaction_type,
        kind=kind,
        detail=detail or {},
    )
