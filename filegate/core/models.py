"""
Core data models for filegate.

These are read snapshots of records owned by other services (files,
messages, channels, memberships, replay clips). The access engine never
mutates them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from filegate.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class ResourceType(str, Enum):
    """What kind of entity a stored file is attached to."""

    USER_AVATAR = "USER_AVATAR"
    USER_BANNER = "USER_BANNER"
    COMMUNITY_AVATAR = "COMMUNITY_AVATAR"
    COMMUNITY_BANNER = "COMMUNITY_BANNER"
    CUSTOM_EMOJI = "CUSTOM_EMOJI"
    MESSAGE_ATTACHMENT = "MESSAGE_ATTACHMENT"
    REPLAY_CLIP = "REPLAY_CLIP"


# =============================================================================
# File
# =============================================================================


class File(BaseModel):
    """
    Stored file metadata.

    `resource_id` points at the owning entity; its meaning depends on
    `resource_type` (community id, message id, clip owner id, ...).
    A file without a resource id is public.
    """

    id: str = Field(default_factory=lambda: generate_id("file"))

    resource_id: str | None = None
    # None both when unset and when the stored tag is not a known ResourceType
    resource_type: ResourceType | None = None

    filename: str = ""
    mime_type: str = "application/octet-stream"
    size: int = 0
    uploaded_by_id: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = None

    @property
    def is_public(self) -> bool:
        return self.resource_id is None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


# =============================================================================
# Messaging
# =============================================================================


class Message(BaseModel):
    """
    A chat message.

    Belongs to a channel or to a direct message group, never both.
    """

    id: str = Field(default_factory=lambda: generate_id("msg"))
    channel_id: str | None = None
    direct_message_group_id: str | None = None
    author_id: str | None = None
    attachments: list[str] = Field(default_factory=list)  # file ids


class Channel(BaseModel):
    """A channel inside a community."""

    id: str = Field(default_factory=lambda: generate_id("ch"))
    community_id: str
    name: str = ""
    is_private: bool = False


class DirectMessageGroupMember(BaseModel):
    """Participation of a user in a direct message conversation."""

    group_id: str
    user_id: str
    joined_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# Memberships
# =============================================================================


class CommunityMembership(BaseModel):
    user_id: str
    community_id: str
    joined_at: datetime = Field(default_factory=utc_now)


class ChannelMembership(BaseModel):
    """Explicit membership in a private channel."""

    user_id: str
    channel_id: str
    joined_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# Replay clips
# =============================================================================


class ReplayClip(BaseModel):
    """
    A saved replay clip.

    The clip's file is scoped to its owner (`user_id`). Others can see it
    when the clip is public or when it has been shared in a message they
    can read.
    """

    id: str = Field(default_factory=lambda: generate_id("clip"))
    user_id: str
    file_id: str
    channel_id: str | None = None
    is_public: bool = False
    created_at: datetime = Field(default_factory=utc_now)
