#!/usr/bin/env python3
"""Invoke a single reaction type directly to check a token and a config."""

import argparse
import asyncio
import json

from area.actions.catalog import default_dispatch_table
from area.dispatch.table import ActionError, UnknownReactionType
from area.models.db import Credential


async def main(reaction_type: str, token: str, config: dict):
    table = default_dispatch_table()
    try:
        invoker = table.resolve(reaction_type)
    except UnknownReactionType as e:
        print(e)
        print(f"Known types: {', '.join(table.types())}")
        return

    credential = Credential(user_id=0, provider=invoker.provider.value, access_token=token)
    try:
        result = await table.dispatch(reaction_type, credential, config)
    except ActionError as e:
        print(f"Failed: {e.to_detail()}")
        return
    print(f"Success: {result.summary}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Send one action with the given token")
    parser.add_argument("reaction_type", help="e.g. discord.send_message")
    parser.add_argument("--token", required=True)
    parser.add_argument("--config", default="{}", help="JSON object of action parameters")
    args = parser.parse_args()
    asyncio.run(main(args.reaction_type, args.token, json.loads(args.config)))
