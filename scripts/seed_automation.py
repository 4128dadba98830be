#!/usr/bin/env python3
"""Create a hook with one reaction and a credential in the local database."""

import argparse
import asyncio
import json

from area.models.db import Provider
from area.storage.database import dispose_engine, init_db, get_session_factory
from area.storage import repository


async def main(args):
    await init_db()

    factory = get_session_factory()
    async with factory() as session:
        hook = await repository.create_hook(
            session,
            user_id=args.user_id,
            provider=Provider(args.provider),
            external_id=args.hook_id,
        )
        reaction = await repository.create_reaction(
            session,
            hook_id=hook.id,
            reaction_type=args.reaction_type,
            config=json.loads(args.config),
        )
        if args.token:
            target = Provider(args.reaction_type.split(".", 1)[0])
            await repository.save_credential(session, args.user_id, target, args.token)

    await dispose_engine()
    print(f"Hook {hook.id} ({args.provider}:{args.hook_id}) -> reaction {reaction.id} [{args.reaction_type}]")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a hook and reaction for local testing")
    parser.add_argument("--user-id", type=int, default=1)
    parser.add_argument("--provider", default="github", choices=[p.value for p in Provider])
    parser.add_argument("--hook-id", default="test-hook-001")
    parser.add_argument("--reaction-type", default="discord.send_message")
    parser.add_argument(
        "--config",
        default='{"channel_id": "123", "content": "New issue #{{issue.number}} in {{repository.name}}"}',
    )
    parser.add_argument("--token", default="", help="access token for the reaction's provider")
    asyncio.run(main(parser.parse_args()))
