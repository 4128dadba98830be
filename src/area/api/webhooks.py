from __future__ import annotations

import json

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request

from area.actions.catalog import default_dispatch_table
from area.api.extractors import extract_event, validate_github_signature
from area.config import get_settings
from area.dispatch.engine import AutomationDispatchEngine
from area.dispatch.reporting import log_report
from area.models.db import Provider
from area.models.schemas import WebhookAck
from area.storage.database import get_session_factory
from area.storage.store import SqlAutomationStore

logger = structlog.get_logger()

router = APIRouter(prefix="/webhooks")


def get_dispatch_engine() -> AutomationDispatchEngine:
    settings = get_settings()
    store = SqlAutomationStore(get_session_factory())
    return AutomationDispatchEngine(
        hooks=store,
        reactions=store,
        credentials=store,
        table=default_dispatch_table(),
        max_concurrency=settings.max_concurrent_reactions,
        timeout=settings.reaction_timeout_seconds,
    )


@router.post("/{provider}", response_model=WebhookAck)
async def receive_event(
    provider: str,
    request: Request,
    engine: AutomationDispatchEngine = Depends(get_dispatch_engine),
    x_webhook_secret: str | None = Header(None),
):
    return await _ingest(provider, None, request, engine, x_webhook_secret)


@router.post("/{provider}/{external_id}", response_model=WebhookAck)
async def receive_event_for_hook(
    provider: str,
    external_id: str,
    request: Request,
    engine: AutomationDispatchEngine = Depends(get_dispatch_engine),
    x_webhook_secret: str | None = Header(None),
):
    return await _ingest(provider, external_id, request, engine, x_webhook_secret)


async def _ingest(
    provider_name: str,
    external_id: str | None,
    request: Request,
    engine: AutomationDispatchEngine,
    x_webhook_secret: str | None,
) -> WebhookAck:
    settings = get_settings()

    try:
        provider = Provider(provider_name)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider_name}")

    # Verify webhook secret if configured
    if settings.webhook_secret:
        if x_webhook_secret != settings.webhook_secret:
            raise HTTPException(status_code=401, detail="Invalid webhook secret")

    raw = await request.body()
    if provider == Provider.GITHUB and settings.github_webhook_secret:
        signature = request.headers.get("x-hub-signature-256")
        if not validate_github_signature(raw, signature, settings.github_webhook_secret):
            raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        body = json.loads(raw or b"{}")
    except ValueError:
        raise HTTPException(status_code=400, detail="Body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Body must be a JSON object")

    extracted_id, payload = extract_event(provider, request.headers, body)
    external_id = external_id or extracted_id
    if not external_id:
        raise HTTPException(status_code=400, detail="Missing webhook id")

    # Redelivered events run again; the delivery id is logged so operators can spot repeats.
    delivery_id = request.headers.get("x-github-delivery") or request.headers.get("x-delivery-id")
    logger.info(
        "webhook_received",
        provider=provider.value,
        external_webhook_id=external_id,
        delivery_id=delivery_id,
    )

    shutdown = getattr(request.app.state, "shutdown", None)
    try:
        report = await engine.handle_event(provider, external_id, payload, cancel=shutdown)
    except Exception as e:
        # Providers retry on failure responses; acknowledge anyway.
        logger.exception("dispatch_error", provider=provider.value, external_webhook_id=external_id, error=str(e))
        return WebhookAck(status="error")

    log_report(report, delivery_id=delivery_id)
    return WebhookAck(matched=not report.no_matching_hook, outcomes=report.counts())
