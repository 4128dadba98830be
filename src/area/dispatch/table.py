from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from area.models.db import Credential, Provider
from area.models.schemas import ConfigValue


@dataclass
class ActionResult:
    summary: dict[str, Any] = field(default_factory=dict)


class ActionError(Exception):
    """An external action failed. Carries the upstream status and body when there was one."""

    def __init__(self, message: str, status: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    def to_detail(self) -> dict[str, Any]:
        detail: dict[str, Any] = {"error": str(self)}
        if self.status is not None:
            detail["status"] = self.status
        if self.body:
            detail["body"] = self.body
        return detail


class UnknownReactionType(LookupError):
    def __init__(self, reaction_type: str) -> None:
        super().__init__(f"No action registered for reaction type '{reaction_type}'")
        self.reaction_type = reaction_type


class ActionInvoker(Protocol):
    # Provider whose credential the action runs with
    provider: Provider

    async def invoke(self, credential: Credential, config: dict[str, ConfigValue]) -> ActionResult: ...


class ActionDispatchTable:
    """Maps reaction-type identifiers to the invokers that perform them."""

    def __init__(self, invokers: Mapping[str, ActionInvoker] | None = None) -> None:
        self._invokers: dict[str, ActionInvoker] = {}
        for reaction_type, invoker in (invokers or {}).items():
            self.register(reaction_type, invoker)

    def register(self, reaction_type: str, invoker: ActionInvoker) -> None:
        if reaction_type in self._invokers:
            raise ValueError(f"Reaction type '{reaction_type}' is already registered")
        self._invokers[reaction_type] = invoker

    def resolve(self, reaction_type: str) -> ActionInvoker:
        try:
            return self._invokers[reaction_type]
        except KeyError:
            raise UnknownReactionType(reaction_type) from None

    async def dispatch(self, reaction_type: str, credential: Credential, config: dict[str, ConfigValue]) -> ActionResult:
        return await self.resolve(reaction_type).invoke(credential, config)

    def types(self) -> list[str]:
        return sorted(self._invokers)

    def __contains__(self, reaction_type: object) -> bool:
        return reaction_type in self._invokers

    def __len__(self) -> int:
        return len(self._invokers)
