"""
Strategy for community-owned files (avatars, banners, custom emoji).
"""

from __future__ import annotations

import logging

from filegate.access.strategies.base import FileAccessStrategy
from filegate.core.errors import ForbiddenError
from filegate.storage.base import MembershipOracle

logger = logging.getLogger(__name__)


class CommunityMembershipStrategy(FileAccessStrategy):
    """Members of the community can read its files; nobody else can."""

    def __init__(self, memberships: MembershipOracle):
        self.memberships = memberships

    async def check_access(self, user_id: str, community_id: str, file_id: str) -> bool:
        if not await self.memberships.is_member(user_id, community_id):
            logger.debug(
                f"User {user_id} is not a member of community {community_id}, "
                f"denying access to file {file_id}"
            )
            raise ForbiddenError(
                "You must be a member of this community to access this file"
            )

        logger.debug(
            f"User {user_id} is a member of community {community_id}, "
            f"allowing access to file {file_id}"
        )
        return True
