"""
Strategy for replay clip files.

A clip file is scoped to the clip's owner. Access is granted when:
1. The caller owns the clip
2. The clip is public (shown on the owner's profile)
3. The caller can read any message the clip was shared in
"""

from __future__ import annotations

import logging

from filegate.access.strategies.base import FileAccessStrategy
from filegate.access.strategies.message_attachment import MessageAttachmentStrategy
from filegate.core.errors import AccessError, ForbiddenError
from filegate.core.models import Message
from filegate.storage.base import (
    ChannelMembershipOracle,
    EntityStore,
    MembershipOracle,
)

logger = logging.getLogger(__name__)


class ReplayClipAccessStrategy(FileAccessStrategy):
    """Owner, public flag, then any message the clip was shared in."""

    def __init__(
        self,
        entities: EntityStore,
        memberships: MembershipOracle,
        channel_memberships: ChannelMembershipOracle,
    ):
        self.entities = entities
        self._messages = MessageAttachmentStrategy(
            entities, memberships, channel_memberships
        )

    async def check_access(self, user_id: str, clip_owner_id: str, file_id: str) -> bool:
        if user_id == clip_owner_id:
            logger.debug(
                f"User {user_id} is the owner of clip, allowing access to file {file_id}"
            )
            return True

        clip = await self.entities.find_replay_clip_by_file(file_id)
        if clip is not None and clip.is_public:
            logger.debug(
                f"Clip for file {file_id} is public, allowing access for user {user_id}"
            )
            return True

        messages = await self.entities.find_messages_with_attachment(file_id)
        if not messages:
            logger.debug(
                f"No messages contain file {file_id}, denying access for user {user_id}"
            )
            raise ForbiddenError("Access denied")

        for message in messages:
            try:
                await self._check_message(user_id, message, file_id)
            except AccessError as e:
                logger.debug(
                    f"User {user_id} cannot read message {message.id} "
                    f"containing file {file_id}: {e.detail}"
                )
                continue
            except Exception:
                # One unreadable message must not hide the others
                logger.warning(
                    f"Error checking message {message.id} for file {file_id}",
                    exc_info=True,
                )
                continue

            logger.debug(
                f"User {user_id} has access to message {message.id} containing file {file_id}"
            )
            return True

        logger.debug(
            f"User {user_id} does not have access to any message containing file {file_id}"
        )
        raise ForbiddenError("Access denied")

    async def _check_message(self, user_id: str, message: Message, file_id: str) -> bool:
        """
        Decide access through one message containing the clip.

        A message carrying both a channel and a DM group is readable through
        either of them: a denial on the channel side falls through to the
        DM group.
        """
        if not (message.channel_id and message.direct_message_group_id):
            return await self._messages.check_message_access(user_id, message, file_id)

        try:
            return await self._messages.check_channel_access(
                user_id, message.channel_id, file_id
            )
        except AccessError as e:
            logger.debug(
                f"Channel {message.channel_id} denied user {user_id} for file {file_id} "
                f"({e.detail}), trying DM group {message.direct_message_group_id}"
            )

        return await self._messages.check_dm_group_access(
            user_id, message.direct_message_group_id, file_id
        )
