"""
Core module - data models, errors and shared utilities.

This module contains:
- models: Read snapshots of files, messages, channels and memberships
- errors: The access error taxonomy (forbidden / not found)
- utils: Shared utility functions
"""

from filegate.core.models import (
    ResourceType,
    File,
    Message,
    Channel,
    DirectMessageGroupMember,
    CommunityMembership,
    ChannelMembership,
    ReplayClip,
)

from filegate.core.errors import (
    AccessError,
    ForbiddenError,
    NotFoundError,
    RegistryError,
)

from filegate.core.utils import generate_id, utc_now

__all__ = [
    # Models
    "ResourceType",
    "File",
    "Message",
    "Channel",
    "DirectMessageGroupMember",
    "CommunityMembership",
    "ChannelMembership",
    "ReplayClip",
    # Errors
    "AccessError",
    "ForbiddenError",
    "NotFoundError",
    "RegistryError",
    # Utils
    "generate_id",
    "utc_now",
]
