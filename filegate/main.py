"""
filegate - demo entry point.

Seeds in-memory storage with a small community, a private channel and a
DM conversation, then walks through a handful of access decisions.

    python -m filegate.main
"""

from __future__ import annotations

import asyncio

from filegate.access import FileAccessEngine, build_strategy_registry
from filegate.auth.context import AuthContext
from filegate.core.errors import AccessError
from filegate.core.models import Channel, File, Message, ResourceType
from filegate.storage import create_local_storage


async def demo():
    """Run a few access checks against seeded local storage."""
    print("=" * 60)
    print("FILEGATE DEMO")
    print("=" * 60)
    print()

    storage = create_local_storage()
    entities = storage.entities

    # Community c1 with a public and a private channel
    await storage.memberships.add_member("alice", "c1")
    await storage.memberships.add_member("bob", "c1")
    await entities.save_channel(Channel(id="general", community_id="c1"))
    await entities.save_channel(Channel(id="staff", community_id="c1", is_private=True))
    await storage.channel_memberships.add_member("alice", "staff")

    # A DM between alice and carol
    await entities.add_dm_group_member("dm1", "alice")
    await entities.add_dm_group_member("dm1", "carol")

    await entities.save_message(Message(id="m-general", channel_id="general"))
    await entities.save_message(Message(id="m-staff", channel_id="staff"))
    await entities.save_message(Message(id="m-dm", direct_message_group_id="dm1"))

    files = [
        File(id="logo", filename="logo.png"),
        File(id="banner", resource_id="c1", resource_type=ResourceType.COMMUNITY_BANNER),
        File(id="general.pdf", resource_id="m-general", resource_type=ResourceType.MESSAGE_ATTACHMENT),
        File(id="staff.pdf", resource_id="m-staff", resource_type=ResourceType.MESSAGE_ATTACHMENT),
        File(id="dm.jpg", resource_id="m-dm", resource_type=ResourceType.MESSAGE_ATTACHMENT),
    ]
    for file in files:
        await entities.save_file(file)

    engine = FileAccessEngine(entities, build_strategy_registry(storage))

    callers = [AuthContext.anonymous()] + [
        AuthContext(user_id=name) for name in ("alice", "bob", "carol")
    ]

    for file in files:
        print(f"{file.id}:")
        for ctx in callers:
            who = ctx.user_id or "anonymous"
            try:
                await engine.authorize(ctx, file.id)
                outcome = "allowed"
            except AccessError as e:
                outcome = f"{e.status_code} {e.detail}"
            print(f"  • {who:<10} {outcome}")
        print()


def main():
    asyncio.run(demo())


if __name__ == "__main__":
    main()
