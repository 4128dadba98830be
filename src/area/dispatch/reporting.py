from __future__ import annotations

import structlog

from area.models.schemas import ExecutionReport, OutcomeKind

logger = structlog.get_logger()


def log_report(report: ExecutionReport, **context) -> None:
    """Log an execution report, one line per reaction.

    An unknown reaction type means the deployment is missing an invoker, so it
    is logged as an error rather than a warning.
    """
    if report.no_matching_hook:
        logger.info(
            "event_unmatched",
            provider=report.provider,
            external_webhook_id=report.external_webhook_id,
            **context,
        )
        return

    for outcome in report.outcomes:
        fields = dict(
            provider=report.provider,
            external_webhook_id=report.external_webhook_id,
            hook_id=outcome.hook_id,
            reaction_id=outcome.reaction_id,
            reaction_type=outcome.reaction_type,
            outcome=outcome.kind.value,
            **context,
        )
        if outcome.kind == OutcomeKind.SUCCESS:
            logger.info("reaction_succeeded", **fields)
        elif outcome.kind == OutcomeKind.CANCELLED:
            logger.info("reaction_cancelled", **fields)
        elif outcome.kind == OutcomeKind.UNKNOWN_REACTION_TYPE:
            logger.error("reaction_type_unknown", error=outcome.detail.get("error"), **fields)
        else:
            logger.warning("reaction_failed", detail=outcome.detail, **fields)

    logger.info(
        "event_processed",
        provider=report.provider,
        external_webhook_id=report.external_webhook_id,
        outcomes=report.counts(),
        **context,
    )
