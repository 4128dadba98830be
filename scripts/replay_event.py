#!/usr/bin/env python3
"""Run a saved webhook payload through the dispatch engine (no HTTP server needed)."""

import argparse
import asyncio
import json
from pathlib import Path

from area.api.webhooks import get_dispatch_engine
from area.dispatch.reporting import log_report
from area.storage.database import dispose_engine, init_db
from area.utils.logging import setup_logging


async def main(provider: str, external_id: str, payload_path: Path):
    setup_logging()
    await init_db()

    payload = json.loads(payload_path.read_text())
    print(f"Replaying {payload_path} for {provider} hook {external_id}")

    try:
        report = await get_dispatch_engine().handle_event(provider, external_id, payload)
    finally:
        await dispose_engine()
    log_report(report)

    if report.no_matching_hook:
        print("No hook matched")
        return
    for outcome in report.outcomes:
        print(f"  reaction {outcome.reaction_id} [{outcome.reaction_type}]: {outcome.kind.value} {outcome.detail}")
    print("Replay complete")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Replay a stored payload through the dispatch engine")
    parser.add_argument("provider")
    parser.add_argument("external_id")
    parser.add_argument("payload", type=Path, help="JSON file holding the event payload")
    args = parser.parse_args()
    asyncio.run(main(args.provider, args.external_id, args.payload))
