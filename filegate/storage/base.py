"""
Storage abstraction layer.

The access engine only ever reads. Everything it needs from the rest of
the system goes through these interfaces, so the in-memory development
backend can be swapped for a real database without touching the engine
or its strategies.

Integration Points:
- MetadataStorage → PostgreSQL (or any document store)
- EntityStore → file/message/channel/DM/clip lookups
- MembershipOracle → community membership service
- ChannelMembershipOracle → private channel membership service
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from filegate.core.models import (
    Channel,
    DirectMessageGroupMember,
    File,
    Message,
    ReplayClip,
)


# =============================================================================
# Generic document storage
# =============================================================================


class MetadataStorage(ABC):
    """
    Storage for structured records, grouped in collections.

    Local Implementation: in-memory dict
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Save a document to a collection."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query documents with optional equality filters."""
        pass


# =============================================================================
# Read interfaces consumed by the access engine
# =============================================================================


class EntityStore(ABC):
    """Read access to the records a file access decision depends on."""

    @abstractmethod
    async def find_file(self, file_id: str) -> File:
        """
        Get file metadata.

        Raises:
            NotFoundError: No such file (or it has been deleted)
        """
        pass

    @abstractmethod
    async def find_message(self, message_id: str) -> Message | None:
        pass

    @abstractmethod
    async def find_channel(self, channel_id: str) -> Channel | None:
        pass

    @abstractmethod
    async def find_dm_group_member(
        self, group_id: str, user_id: str
    ) -> DirectMessageGroupMember | None:
        pass

    @abstractmethod
    async def find_replay_clip_by_file(self, file_id: str) -> ReplayClip | None:
        """Get the replay clip whose recording is stored in `file_id`."""
        pass

    @abstractmethod
    async def find_messages_with_attachment(self, file_id: str) -> list[Message]:
        """All messages that list `file_id` among their attachments."""
        pass


class MembershipOracle(ABC):
    """Answers whether a user belongs to a community."""

    @abstractmethod
    async def is_member(self, user_id: str, community_id: str) -> bool:
        pass


class ChannelMembershipOracle(ABC):
    """Answers whether a user belongs to a private channel."""

    @abstractmethod
    async def is_member(self, user_id: str, channel_id: str) -> bool:
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for all storage backends.

    Initialize once at app startup with appropriate implementations.
    The strategy registry is built from it.
    """

    model_config = {"arbitrary_types_allowed": True}

    metadata: MetadataStorage
    entities: EntityStore
    memberships: MembershipOracle
    channel_memberships: ChannelMembershipOracle


# =============================================================================
# Collection Names (for MetadataStorage)
# =============================================================================


class Collections:
    """Standard collection/table names."""

    FILES = "files"
    MESSAGES = "messages"
    CHANNELS = "channels"
    MEMBERSHIPS = "memberships"
    CHANNEL_MEMBERSHIPS = "channel_memberships"
    DM_GROUP_MEMBERS = "dm_group_members"
    REPLAY_CLIPS = "replay_clips"
