"""
Storage abstractions.

Integration Points:
- MetadataStorage → PostgreSQL or any document store
- EntityStore → file/message/channel/DM/clip lookups
- MembershipOracle / ChannelMembershipOracle → membership services
"""

from filegate.storage.base import (
    MetadataStorage,
    EntityStore,
    MembershipOracle,
    ChannelMembershipOracle,
    StorageProvider,
    Collections,
)
from filegate.storage.local import create_local_storage

__all__ = [
    "MetadataStorage",
    "EntityStore",
    "MembershipOracle",
    "ChannelMembershipOracle",
    "StorageProvider",
    "Collections",
    "create_local_storage",
]
