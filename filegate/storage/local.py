"""
Local storage implementations for development.

In-memory implementations that work without any external services.
The entity store and membership oracles read from a shared
MetadataStorage, the same way the real services read from one database.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from filegate.core.errors import NotFoundError
from filegate.core.models import (
    Channel,
    ChannelMembership,
    CommunityMembership,
    DirectMessageGroupMember,
    File,
    Message,
    ReplayClip,
    ResourceType,
)
from filegate.storage.base import (
    ChannelMembershipOracle,
    Collections,
    EntityStore,
    MembershipOracle,
    MetadataStorage,
    StorageProvider,
)

logger = logging.getLogger(__name__)

_KNOWN_RESOURCE_TYPES = {t.value for t in ResourceType}


def _pair_key(first: str, second: str) -> str:
    return f"{first}:{second}"


# =============================================================================
# In-Memory Metadata Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage for development."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        if collection not in self._data:
            self._data[collection] = {}
        self._data[collection][id] = {
            **data,
            "_id": id,
            "_updated_at": datetime.now(timezone.utc).isoformat(),
        }

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        return self._data.get(collection, {}).get(id)

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        if collection not in self._data:
            return []

        results = list(self._data[collection].values())

        if filters:
            results = [
                doc for doc in results
                if all(doc.get(key) == value for key, value in filters.items())
            ]

        return results[offset:offset + limit]


# =============================================================================
# Entity Store
# =============================================================================


class MetadataEntityStore(EntityStore):
    """Entity lookups backed by a MetadataStorage."""

    page_size = 100

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def find_file(self, file_id: str) -> File:
        data = await self.metadata.get(Collections.FILES, file_id)
        if not data:
            raise NotFoundError("File not found")

        resource_type = data.get("resource_type")
        if resource_type is not None and resource_type not in _KNOWN_RESOURCE_TYPES:
            # Read as unmapped so the engine denies it
            logger.warning(f"File {file_id} has unknown resource type {resource_type}")
            data = {**data, "resource_type": None}

        file = File.model_validate(data)
        if file.is_deleted:
            raise NotFoundError("File not found")
        return file

    async def find_message(self, message_id: str) -> Message | None:
        data = await self.metadata.get(Collections.MESSAGES, message_id)
        return Message.model_validate(data) if data else None

    async def find_channel(self, channel_id: str) -> Channel | None:
        data = await self.metadata.get(Collections.CHANNELS, channel_id)
        return Channel.model_validate(data) if data else None

    async def find_dm_group_member(
        self, group_id: str, user_id: str
    ) -> DirectMessageGroupMember | None:
        data = await self.metadata.get(
            Collections.DM_GROUP_MEMBERS, _pair_key(group_id, user_id)
        )
        return DirectMessageGroupMember.model_validate(data) if data else None

    async def find_replay_clip_by_file(self, file_id: str) -> ReplayClip | None:
        rows = await self.metadata.query(
            Collections.REPLAY_CLIPS, {"file_id": file_id}, limit=1
        )
        return ReplayClip.model_validate(rows[0]) if rows else None

    async def find_messages_with_attachment(self, file_id: str) -> list[Message]:
        messages: list[Message] = []
        offset = 0
        while True:
            page = await self.metadata.query(
                Collections.MESSAGES, limit=self.page_size, offset=offset
            )
            messages.extend(
                Message.model_validate(row)
                for row in page
                if file_id in row.get("attachments", [])
            )
            if len(page) < self.page_size:
                return messages
            offset += self.page_size

    # -------------------------------------------------------------------------
    # Seeding (development and tests)
    # -------------------------------------------------------------------------

    async def save_file(self, file: File) -> File:
        await self.metadata.save(Collections.FILES, file.id, file.model_dump())
        return file

    async def save_message(self, message: Message) -> Message:
        await self.metadata.save(Collections.MESSAGES, message.id, message.model_dump())
        return message

    async def save_channel(self, channel: Channel) -> Channel:
        await self.metadata.save(Collections.CHANNELS, channel.id, channel.model_dump())
        return channel

    async def add_dm_group_member(self, group_id: str, user_id: str) -> DirectMessageGroupMember:
        member = DirectMessageGroupMember(group_id=group_id, user_id=user_id)
        await self.metadata.save(
            Collections.DM_GROUP_MEMBERS, _pair_key(group_id, user_id), member.model_dump()
        )
        return member

    async def save_replay_clip(self, clip: ReplayClip) -> ReplayClip:
        await self.metadata.save(Collections.REPLAY_CLIPS, clip.id, clip.model_dump())
        return clip


# =============================================================================
# Membership Oracles
# =============================================================================


class MetadataMembershipOracle(MembershipOracle):
    """Community membership: a row per (user, community)."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def is_member(self, user_id: str, community_id: str) -> bool:
        row = await self.metadata.get(
            Collections.MEMBERSHIPS, _pair_key(user_id, community_id)
        )
        return row is not None

    async def add_member(self, user_id: str, community_id: str) -> CommunityMembership:
        membership = CommunityMembership(user_id=user_id, community_id=community_id)
        await self.metadata.save(
            Collections.MEMBERSHIPS, _pair_key(user_id, community_id), membership.model_dump()
        )
        return membership


class MetadataChannelMembershipOracle(ChannelMembershipOracle):
    """Private channel membership: a row per (user, channel)."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def is_member(self, user_id: str, channel_id: str) -> bool:
        row = await self.metadata.get(
            Collections.CHANNEL_MEMBERSHIPS, _pair_key(user_id, channel_id)
        )
        return row is not None

    async def add_member(self, user_id: str, channel_id: str) -> ChannelMembership:
        membership = ChannelMembership(user_id=user_id, channel_id=channel_id)
        await self.metadata.save(
            Collections.CHANNEL_MEMBERSHIPS, _pair_key(user_id, channel_id), membership.model_dump()
        )
        return membership


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with in-memory implementations."""
    metadata = InMemoryMetadataStorage()
    return StorageProvider(
        metadata=metadata,
        entities=MetadataEntityStore(metadata),
        memberships=MetadataMembershipOracle(metadata),
        channel_memberships=MetadataChannelMembershipOracle(metadata),
    )
