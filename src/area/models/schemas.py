from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel

# Reaction configuration and event payloads: scalars, ordered sequences and
# string-keyed mappings, nested arbitrarily.
Scalar = Union[str, int, float, bool, None]
ConfigValue = Union[Scalar, list["ConfigValue"], dict[str, "ConfigValue"]]


class OutcomeKind(str, Enum):
    SUCCESS = "Success"
    PROVIDER_NOT_LINKED = "ProviderNotLinked"
    UNKNOWN_REACTION_TYPE = "UnknownReactionType"
    ACTION_FAILED = "ActionFailed"
    CANCELLED = "Cancelled"


class ReactionOutcome(BaseModel):
    reaction_id: int
    hook_id: int
    reaction_type: str
    kind: OutcomeKind
    detail: dict[str, Any] = {}


class ExecutionReport(BaseModel):
    provider: str
    external_webhook_id: str
    no_matching_hook: bool = False
    outcomes: list[ReactionOutcome] = []

    @property
    def ok(self) -> bool:
        return all(o.kind == OutcomeKind.SUCCESS for o in self.outcomes)

    def counts(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for outcome in self.outcomes:
            totals[outcome.kind.value] = totals.get(outcome.kind.value, 0) + 1
        return totals


class WebhookAck(BaseModel):
    status: str = "accepted"
    matched: bool = False
    outcomes: dict[str, int] = {}


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    hooks_total: int = 0
    reactions_total: int = 0
