"""
Strategy for message attachments.

Access follows the message: a channel message is readable by whoever can
read the channel, a direct message by the participants of its
conversation.

    message ─┬─ channel ─┬─ public  → community membership
             │           └─ private → channel membership
             └─ DM group ─────────── → DM group membership
"""

from __future__ import annotations

import logging

from filegate.access.strategies.base import FileAccessStrategy
from filegate.core.errors import ForbiddenError, NotFoundError
from filegate.core.models import Message
from filegate.storage.base import (
    ChannelMembershipOracle,
    EntityStore,
    MembershipOracle,
)

logger = logging.getLogger(__name__)


class MessageAttachmentStrategy(FileAccessStrategy):
    """Checks access based on the message context (channel or DM group)."""

    def __init__(
        self,
        entities: EntityStore,
        memberships: MembershipOracle,
        channel_memberships: ChannelMembershipOracle,
    ):
        self.entities = entities
        self.memberships = memberships
        self.channel_memberships = channel_memberships

    async def check_access(self, user_id: str, message_id: str, file_id: str) -> bool:
        message = await self.entities.find_message(message_id)
        if message is None:
            logger.debug(f"Message {message_id} not found for file {file_id}")
            raise NotFoundError("Message not found")

        return await self.check_message_access(user_id, message, file_id)

    async def check_message_access(self, user_id: str, message: Message, file_id: str) -> bool:
        """
        Decide access for an already loaded message.

        The channel is checked first; a message carrying both references is
        treated as a channel message.
        """
        if message.channel_id:
            return await self.check_channel_access(
                user_id, message.channel_id, file_id
            )

        if message.direct_message_group_id:
            return await self.check_dm_group_access(
                user_id, message.direct_message_group_id, file_id
            )

        logger.warning(
            f"Message {message.id} has no channel or DM group for file {file_id}"
        )
        raise ForbiddenError("Access denied")

    async def check_channel_access(
        self, user_id: str, channel_id: str, file_id: str
    ) -> bool:
        channel = await self.entities.find_channel(channel_id)
        if channel is None:
            logger.debug(f"Channel {channel_id} not found for file {file_id}")
            raise NotFoundError("Channel not found")

        # Private channels are gated by channel membership alone
        if channel.is_private:
            if not await self.channel_memberships.is_member(user_id, channel_id):
                logger.debug(
                    f"User {user_id} is not a member of private channel {channel_id}, "
                    f"denying access to file {file_id}"
                )
                raise ForbiddenError(
                    "You must be a member of this private channel to access this file"
                )

            logger.debug(
                f"User {user_id} is a member of private channel {channel_id}, "
                f"allowing access to file {file_id}"
            )
            return True

        if not await self.memberships.is_member(user_id, channel.community_id):
            logger.debug(
                f"User {user_id} is not a member of community {channel.community_id}, "
                f"denying access to file {file_id}"
            )
            raise ForbiddenError(
                "You must be a member of this community to access this file"
            )

        logger.debug(
            f"User {user_id} is a member of community {channel.community_id}, "
            f"allowing access to file {file_id}"
        )
        return True

    async def check_dm_group_access(
        self, user_id: str, group_id: str, file_id: str
    ) -> bool:
        member = await self.entities.find_dm_group_member(group_id, user_id)
        if member is None:
            logger.debug(
                f"User {user_id} is not a member of DM group {group_id}, "
                f"denying access to file {file_id}"
            )
            raise ForbiddenError(
                "You must be a member of this conversation to access this file"
            )

        logger.debug(
            f"User {user_id} is a member of DM group {group_id}, "
            f"allowing access to file {file_id}"
        )
        return True
